# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
from __future__ import annotations

import re
from typing import Mapping, Sequence, Optional, Union

import attr

from abnfc.exceptions import DiagnosticError
from abnfc.language.actions import Action, make_return_result
from abnfc.language.combinators import Combinator, CombinatorResult, flat_combinator
from abnfc.language.parser import Parser
from abnfc.locations import Location, py_location

RE_PARSELET = re.compile('[a-z][a-z0-9_]*$')


@attr.dataclass(hash=True, order=True, eq=True, frozen=True, repr=False)
class ParseletID:
    id: int = attr.attrib(hash=True, order=True, eq=True)
    name: str = attr.attrib(hash=False, order=False, eq=False)
    location: Location = attr.attrib(hash=False, order=False, eq=False, repr=False)

    # Diagnostic message, that is used when required match of this parselet is failed
    message: Optional[str] = attr.attrib(default=None, hash=False, order=False, eq=False, repr=False)

    def __repr__(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name


@attr.dataclass
class GrammarError(DiagnosticError):
    pass


class Grammar:
    def __init__(self):
        self.__parselets = {}
        self.__tables = {}

    @property
    def parselets(self) -> Mapping[str, ParseletID]:
        return self.__parselets

    @property
    def tables(self) -> Mapping[ParseletID, ParseletTable]:
        return self.__tables

    def add_parselet(self, name: str, *, message: str = None, location: Location = None) -> ParseletID:
        location = location or py_location(2)
        if not RE_PARSELET.match(name):
            raise GrammarError(location, f'Symbol id for parselet must be: {RE_PARSELET.pattern}')
        if name in self.__parselets:
            parser_id = self.__parselets[name]
            if message and parser_id.message != message:
                raise GrammarError(location, f'Can not define parselet {parser_id} with different message')
            return parser_id

        parser_id = ParseletID(len(self.__parselets), name, location, message)
        self.__parselets[name] = parser_id
        self.__tables[parser_id] = ParseletTable(parser_id)
        return parser_id

    def add_parser(self, parser_id: Union[str, ParseletID], combinator: Union[Combinator, ParseletID, str],
                   action: Action = None, *, location: Location = None) -> ParseletID:
        location = location or py_location(2)
        combinator = flat_combinator(combinator)
        action = action or make_return_result()

        if isinstance(parser_id, str):
            parser_id = self.add_parselet(parser_id, location=location)
        elif self.__parselets.get(parser_id.name) is not parser_id:
            raise GrammarError(location, f'Parselet {parser_id} is not registered in grammar')

        # add parser to table
        self.tables[parser_id].add_parser(combinator, action, location)
        return parser_id


class ParseletTable:
    """ This class is ordered alternatives of parselet, e.g. rule in PEG """

    def __init__(self, parser_id: ParseletID) -> None:
        self.__parser_id = parser_id
        self.__parselets = []

    @property
    def parser_id(self) -> ParseletID:
        return self.__parser_id

    @property
    def parselets(self) -> Sequence[Parselet]:
        return self.__parselets

    def add_parser(self, combinator: Combinator, action: Action, location: Location) -> Parselet:
        parselet = Parselet(self.parser_id, combinator, action, location)
        self.__parselets.append(parselet)
        return parselet

    def __call__(self, parser: Parser) -> CombinatorResult:
        # single alternative is not rewound here, callers that recover from error rewind input themselves
        if len(self.__parselets) == 1:
            return self.__parselets[0](parser)
        return parser.choice(self.__parselets)


@attr.dataclass(frozen=True, repr=False, order=False, eq=False)
class Parselet:
    """ Parselet is single alternative of rule in PEG """
    parser_id: ParseletID
    combinator: Combinator
    action: Action
    location: Location

    def __call__(self, parser: Parser) -> CombinatorResult:
        begin = parser.position
        results = self.combinator(parser, self)
        return self.action(parser, begin, results)

    def __str__(self) -> str:
        from abnfc.language.printer import dump_parselet
        return dump_parselet.to_string(self)

    def __repr__(self) -> str:
        class_name = type(self).__name__
        return f'<{class_name}: {self}>'

