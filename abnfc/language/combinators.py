# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
from __future__ import annotations

import abc
import re
from typing import Sequence, overload, Iterator, Optional, Union, Type, TYPE_CHECKING, Pattern

import attr

if TYPE_CHECKING:
    from abnfc.language.grammar import ParseletID, Parselet
from abnfc.language.parser import Parser, ParserError, ParseError

# Results of combinator: values built by committed parselets, e.g. syntax nodes
CombinatorResult = Sequence[object]


@attr.dataclass
class Combinator(abc.ABC):
    @property
    def nested(self) -> Sequence[Combinator]:
        """ Nested combinators, used for traverse of combinators tree """
        return ()

    @abc.abstractmethod
    def __call__(self, parser: Parser, context: Parselet) -> CombinatorResult:
        raise NotImplementedError

    def __str__(self) -> str:
        from abnfc.language.printer import dump_combinator
        return dump_combinator.to_string(self)


@attr.dataclass
class NestedCombinator(Combinator, abc.ABC):
    combinator: Combinator

    @property
    def nested(self) -> Sequence[Combinator]:
        return self.combinator,


@attr.dataclass
class PatternCombinator(Combinator):
    """
    This combinator is match regular expression at current position of input.

    If pattern is matched then consume matched text and returns nothing. Otherwise raises parser error
    """
    pattern: Pattern
    description: str

    def __call__(self, parser: Parser, context: Parselet) -> CombinatorResult:
        parser.consume(self.pattern, self.description)
        return ()


@attr.dataclass
class ParseletCombinator(Combinator):
    """
    This combinator is match result of call another parselet.
    """
    parser_id: ParseletID

    def __call__(self, parser: Parser, context: Parselet) -> CombinatorResult:
        return parser.parselet(self.parser_id)


@attr.dataclass
class CollectionCombinator(Combinator, Sequence[Combinator], abc.ABC):
    """
    Abstract base for all combinators that contains sequence of nested combinators.
    """
    combinators: Sequence[Combinator]

    @property
    def nested(self) -> Sequence[Combinator]:
        return self.combinators

    @overload
    def __getitem__(self, index: int) -> Combinator: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[Combinator]: ...

    def __getitem__(self, index):
        return self.combinators[index]

    def __len__(self) -> int:
        return len(self.combinators)


@attr.dataclass
class SequenceCombinator(CollectionCombinator):
    """
    This combinator is match sequence of nested combinators.

    If all nested combinators returns without error this combinator return concatenated results of them.

    If any nested combinator is raised error it's propagated to up combinator
    """

    def __call__(self, parser: Parser, context: Parselet) -> CombinatorResult:
        items = []
        for combinator in self.combinators:
            items.extend(combinator(parser, context))
        return tuple(items)


@attr.dataclass
class ChoiceCombinator(CollectionCombinator):
    """
    This combinator is match first successful nested combinator, e.g. ordered choice in PEG.

    Nested combinators are tried from left to right, the input is rewound before each attempt.
    """

    def __call__(self, parser: Parser, context: Parselet) -> CombinatorResult:
        return parser.choice(self.combinators, context)


@attr.dataclass
class OptionalCombinator(NestedCombinator):
    """
    This combinator returns result of nested combinator on success and returns nothing on failure
    """

    def __call__(self, parser: Parser, context: Parselet) -> CombinatorResult:
        try:
            with parser.backtrack():
                return self.combinator(parser, context)
        except ParserError:
            return ()


@attr.dataclass
class RepeatCombinator(NestedCombinator):
    """
    This combinator match zero or more occurrences of nested combinator.

    Return concatenated results of nested combinator
    """

    def __call__(self, parser: Parser, context: Parselet) -> CombinatorResult:
        items = []
        while True:
            position = parser.position
            try:
                with parser.backtrack():
                    items.extend(self.combinator(parser, context))
            except ParserError:
                break
            if parser.position == position:
                break
        return tuple(items)


@attr.dataclass
class MustCombinator(NestedCombinator):
    """
    This combinator is required match of nested combinator, e.g. cut in PEG.

    If nested combinator is failed then raises fatal parse error at position where this combinator is started.
    The error is not backtracked by choice, optional or repeat combinators.
    """
    message: Optional[str] = None

    def __call__(self, parser: Parser, context: Parselet) -> CombinatorResult:
        location = parser.location
        try:
            return self.combinator(parser, context)
        except ParserError as ex:
            raise ParseError(location, self.get_message(ex), parser.source.content) from ex

    def get_message(self, error: ParserError) -> str:
        if self.message:
            return self.message
        if isinstance(self.combinator, ParseletCombinator) and self.combinator.parser_id.message:
            return self.combinator.parser_id.message
        return error.get_message()


@attr.dataclass
class UntilCombinator(NestedCombinator):
    """
    This combinator match nested combinator until condition is matched.

    Condition is checked before each occurrence of nested combinator. Returns concatenated results of nested
    combinator and condition. If nested combinator is failed before condition is matched, it raises parser error.
    """
    condition: Combinator

    @property
    def nested(self) -> Sequence[Combinator]:
        return self.condition, self.combinator

    def __call__(self, parser: Parser, context: Parselet) -> CombinatorResult:
        items = []
        while True:
            try:
                with parser.backtrack():
                    items.extend(self.condition(parser, context))
                    return tuple(items)
            except ParserError:
                pass
            items.extend(self.combinator(parser, context))


def flat_combinator(combinator: Union[Combinator, ParseletID, str]) -> Combinator:
    from abnfc.language.grammar import ParseletID
    if isinstance(combinator, ParseletID):
        return make_parselet(combinator)
    if isinstance(combinator, str):
        return make_literal(combinator)
    return combinator


def flat_sequence(*combinators: Union[Combinator, ParseletID, str], kind: Type[CollectionCombinator]) \
        -> Iterator[Combinator]:
    """
    Returns iterator that flatted nested collection combinators plus converted ParseletID and strings to
    combinator. e.g.

        [[rule, rule], '=', [[value, '.'], value]]  => [rule, rule, '=', value, '.', value]
    """
    assert issubclass(kind, CollectionCombinator)
    for combinator in combinators:
        if isinstance(combinator, kind):
            # noinspection PyUnresolvedReferences
            yield from flat_sequence(*combinator.combinators, kind=kind)
        else:
            yield flat_combinator(combinator)


def make_pattern(pattern: Union[str, Pattern], description: str, flags: int = 0) -> PatternCombinator:
    """ Helper for create pattern combinator """
    if isinstance(pattern, str):
        pattern = re.compile(pattern, flags)
    return PatternCombinator(pattern, description)


def make_literal(value: str) -> PatternCombinator:
    """ Helper for create combinator that match string exactly """
    return make_pattern(re.escape(value), f"'{value}'")


def make_iliteral(value: str) -> PatternCombinator:
    """ Helper for create combinator that match string ignoring case of ASCII letters """
    return make_pattern(re.escape(value), f"'{value}'", re.IGNORECASE | re.ASCII)


def make_parselet(parser_id: ParseletID) -> ParseletCombinator:
    """ Helper for create parselet combinator """
    return ParseletCombinator(parser_id)


def make_sequence(*combinators: Union[Combinator, ParseletID, str]) -> Combinator:
    """
    Helper for create sequence combinator.

    If input sequence of combinators contains only one combinator returns it
    """
    combinators = tuple(flat_sequence(*combinators, kind=SequenceCombinator))
    if len(combinators) == 0:
        raise ValueError("Can not create sequence combinator from empty arguments")
    return combinators[0] if len(combinators) == 1 else SequenceCombinator(combinators)


def make_choice(*combinators: Union[Combinator, ParseletID, str]) -> Combinator:
    """
    Helper for create ordered choice combinator.

    If input sequence of combinators contains only one combinator returns it
    """
    combinators = tuple(flat_sequence(*combinators, kind=ChoiceCombinator))
    if len(combinators) == 0:
        raise ValueError("Can not create choice combinator from empty arguments")
    return combinators[0] if len(combinators) == 1 else ChoiceCombinator(combinators)


def make_optional(*combinators: Union[Combinator, ParseletID, str]) -> Combinator:
    """
    Helper for create optional combinator.
    """
    return OptionalCombinator(make_sequence(*combinators))


def make_repeat(*combinators: Union[Combinator, ParseletID, str]) -> Combinator:
    return RepeatCombinator(make_sequence(*combinators))


def make_plus(*combinators: Union[Combinator, ParseletID, str]) -> Combinator:
    """ Helper for create combinator that match one or more occurrences of sequence """
    combinator = make_sequence(*combinators)
    return make_sequence(combinator, RepeatCombinator(combinator))


def make_must(*combinators: Union[Combinator, ParseletID, str], message: str = None) -> Combinator:
    return MustCombinator(make_sequence(*combinators), message)


def make_if_must(condition: Union[Combinator, ParseletID, str], *combinators: Union[Combinator, ParseletID, str]) \
        -> Combinator:
    """
    Helper for create sequence, that required all combinators after condition is matched.

        if_must(cond, a, b) := cond must(a) must(b)
    """
    return make_sequence(condition, *(make_must(combinator) for combinator in combinators))


def make_until(condition: Union[Combinator, ParseletID, str], *combinators: Union[Combinator, ParseletID, str]) \
        -> Combinator:
    return UntilCombinator(make_sequence(*combinators), flat_combinator(condition))


def make_list(item: Union[Combinator, ParseletID, str], separator: Union[Combinator, ParseletID, str]) \
        -> Combinator:
    """
    Helper for create list of items with separators. Trailing separator is not consumed.

        list(item, sep) := item { sep item }
    """
    return make_sequence(item, make_repeat(separator, item))


def make_list_must(item: Union[Combinator, ParseletID, str], separator: Union[Combinator, ParseletID, str]) \
        -> Combinator:
    """
    Helper for create list of items, that required item after each separator.

        list_must(item, sep) := item { sep must(item) }
    """
    return make_sequence(item, make_repeat(separator, make_must(item)))


def make_pad(item: Union[Combinator, ParseletID, str], padding: Union[Combinator, ParseletID, str]) -> Combinator:
    """
    Helper for create combinator that match item surrounded by optional padding.

        pad(item, padding) := { padding } item { padding }
    """
    return make_sequence(make_repeat(padding), item, make_repeat(padding))
