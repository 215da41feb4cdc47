# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
from __future__ import annotations

import sys
from contextlib import contextmanager
from io import StringIO
from typing import Set, Optional, TYPE_CHECKING, MutableMapping, Tuple, Sequence, Pattern, Callable

import attr

from abnfc.exceptions import ABNFError, DiagnosticError, dump_source_string
from abnfc.language.source import Source
from abnfc.locations import Location
from abnfc.writers import Writer, create_writer

if TYPE_CHECKING:
    from abnfc.language.grammar import Grammar, ParseletID

# Result of invocation of parselet: values built by actions and offset of end of match
ParseletResult = Tuple[Sequence[object], int]

# Each nested group of ABNF grammar costs about thirty frames of parser
RECURSION_LIMIT = 5000


@contextmanager
def recursion_limit(limit: int):
    """ Raise recursion limit of interpreter for nested block. Previous limit is restored on exit """
    previous = sys.getrecursionlimit()
    if limit > previous:
        sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


class Parser:
    """
    This parser is used for parse input text using Packrat algorithm, e.g. PEG with ordered choice and
    backtracking.

    State is passed to actions of parselets, e.g. collection of parsed rules.
    """

    def __init__(self, grammar: Grammar, source: Source, state: object = None):
        self.grammar = grammar
        self.source = source
        self.state = state
        self.__position = 0
        self.__memory: MutableMapping[Tuple[int, ParseletID], ParseletResult] = {}

    @property
    def position(self) -> int:
        return self.__position

    @property
    def location(self) -> Location:
        return self.source.location(self.__position)

    @property
    def current_char(self) -> str:
        """ Returns current character or empty string at end of input """
        return self.source.content[self.__position:self.__position + 1]

    def error(self, expected: Set[str]) -> ParserError:
        """ Generate exception """
        actual = repr(self.current_char) if self.current_char else 'end of file'
        return ParserError(self.location, actual, set(expected))

    def consume(self, pattern: Pattern, description: str) -> str:
        """
        Consume text at current position

        :param pattern:     Compiled regular expression
        :param description: Human readable description of pattern, used in error message
        :return: Return consumed text
        :raise ParserError if input at current position is not matched passed pattern
        """
        match = pattern.match(self.source.content, self.__position)
        if match:
            self.__position = match.end()
            return match.group()
        raise self.error({description})

    @contextmanager
    def backtrack(self):
        position = self.__position
        try:
            yield
        except ParserError as ex:
            self.__position = position
            raise ex

    def parselet(self, parser_id: ParseletID) -> Sequence[object]:
        """
        Use parselet to consume next characters and create results.

        This call is cached for given parselet and current position, e.g. using packrat parsing

        :param parser_id:   Parselet identifier
        :return:
        """
        key = (self.__position, parser_id)
        result = self.__memory.get(key, None)
        if result is None:
            table = self.grammar.tables[parser_id]
            result = table(self), self.__position
            self.__memory[key] = result

        results, self.__position = result
        return results

    def choice(self, alternatives: Sequence[Callable], *args) -> Sequence[object]:
        """ Returns results of first matched alternative. Input is rewound after each failed alternative """
        error = None
        for alternative in alternatives:
            try:
                with self.backtrack():
                    return alternative(self, *args)
            except ParserError as last_error:
                error = ParserError.merge(error, last_error)

        raise error or ParserConsumeNothingError()

    def parse(self, parser_id: ParseletID) -> Sequence[object]:
        """
        Parse all characters from input or fail.

        :raise ParseError if input is nested deeper than recursion limit
        """
        with recursion_limit(RECURSION_LIMIT):
            try:
                results = self.parselet(parser_id)
            except RecursionError as ex:
                raise ParseError(self.location, 'grammar is nested too deeply', self.source.content) from ex
        if self.__position != self.source.length:
            raise self.error({'end of file'})
        return results


# noinspection PyShadowingBuiltins
@attr.dataclass
class SyntaxError(ABNFError):
    pass


@attr.dataclass
class ParserError(SyntaxError):
    """ Local mismatch of combinator. This error is backtracked by choice, optional and repeat combinators """
    location: Location
    actual: str
    expected: Set[str]

    @staticmethod
    def merge(lhs: Optional[ParserError], rhs: Optional[ParserError]) -> Optional[ParserError]:
        """
        Merge two error at longest position in source text

        :param lhs:
        :param rhs:
        :return:
        """
        if not lhs:
            return rhs
        if not rhs:
            return lhs
        if lhs.location < rhs.location:
            return rhs
        if lhs.location == rhs.location:
            return ParserError(lhs.location, lhs.actual, lhs.expected | rhs.expected)
        return lhs

    def get_message(self) -> str:
        if len(self.expected) > 1:
            required_names = []
            for x in sorted(self.expected):
                required_names.append(f'‘{x}’')
            return "Required one of {}, but got ‘{}’".format(', '.join(required_names), self.actual)

        required_name = next(iter(self.expected), None)
        return "Required ‘{}’, but got ‘{}’".format(required_name, self.actual)

    def to_stream(self, stream: Writer, content: str = None):
        dump_source_string(stream, self.location, self.get_message(), content)

    def __str__(self) -> str:
        stream = StringIO()
        self.to_stream(create_writer(stream))
        return stream.getvalue()


class ParserConsumeNothingError(SyntaxError):
    pass


@attr.dataclass
class ParseError(DiagnosticError):
    """ Required match is failed. This error is fatal for parsing and is not backtracked """
    pass
