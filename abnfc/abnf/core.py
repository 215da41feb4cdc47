# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
"""
Core rules of ABNF (RFC 5234, Appendix B.1), used for definition of ABNF grammar.

Instead of the pre-defined CRLF sequence, any type of line ending is accepted.
"""
RE_ALPHA = r'[A-Za-z]'
RE_BIT = r'[01]'
RE_DIGIT = r'[0-9]'
RE_HEXDIG = r'[0-9A-Fa-f]'
RE_DQUOTE = r'"'
RE_WSP = r'[ \t]'
RE_VCHAR = r'[\x21-\x7E]'
RE_PRINT = r'[\x20-\x7E]'
RE_CRLF = r'\r\n|\r|\n'
RE_EOF = r'\Z'

RE_RULENAME = RE_ALPHA + r'[A-Za-z0-9-]*'
RE_REPEAT = r'[0-9]*\*[0-9]*|[0-9]+'
