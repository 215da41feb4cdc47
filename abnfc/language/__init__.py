# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
from abnfc.language.grammar import Grammar, ParseletID
from abnfc.language.parser import Parser, ParserError, ParseError
