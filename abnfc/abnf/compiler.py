# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
import logging
from typing import Sequence

from abnfc.abnf.codegen import Generator, PREFIX
from abnfc.abnf.grammar import create_abnf_grammar
from abnfc.abnf.resolver import RuleList
from abnfc.language.parser import Parser, RECURSION_LIMIT, recursion_limit
from abnfc.language.source import Source

_log = logging.getLogger(__name__)

abnf_grammar = create_abnf_grammar()


def parse_rulelist(content: str, filename: str = '<example>') -> RuleList:
    """
    Parse ABNF source text to rulelist. Incremental alternations are merged into previous definitions.

    :raise ParserError  if source text is not matched grammar
    :raise ParseError   if required construct is not matched
    :raise SemanticError if rule is duplicated, or incremental alternation is not defined before
    """
    rules = RuleList()
    parser = Parser(abnf_grammar, Source(filename, content), rules)
    parser.parse(abnf_grammar.parselets['rulelist'])
    _log.debug('Parsed %d rules from %s', len(rules), filename)
    return rules


def compile_rulelist(content: str, filename: str = '<example>', *, prefix: str = PREFIX) -> Sequence[str]:
    """ Compile ABNF source text to PEGTL rule definitions. Returns one statement per rule """
    rules = parse_rulelist(content, filename)
    generator = Generator(rules, prefix=prefix)
    with recursion_limit(RECURSION_LIMIT):
        return list(generator.generate(rules))
