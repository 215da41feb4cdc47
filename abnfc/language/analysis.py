# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
"""
Static analysis of grammar.

The analysis finds problems of grammar, that could cause infinite loops or infinite recursion in parser:

- parselets without any alternatives
- left recursion, e.g. parselet is reachable from itself without consuming input
- repetition of combinator that could be matched without consuming input
"""
import logging
from typing import Iterator, Sequence, FrozenSet, Mapping, Set, List

import attr
from multimethod import multimethod

from abnfc.language.combinators import Combinator, PatternCombinator, ParseletCombinator, SequenceCombinator, \
    ChoiceCombinator, OptionalCombinator, RepeatCombinator, MustCombinator, UntilCombinator
from abnfc.language.grammar import Grammar, ParseletID
from abnfc.language.printer import dump_combinator

_log = logging.getLogger(__name__)


@attr.dataclass(frozen=True)
class GrammarIssue:
    parser_id: ParseletID
    message: str

    def __str__(self) -> str:
        return f'{self.parser_id.location}: {self.message}'


@multimethod
def is_nullable(combinator: Combinator, nullables: frozenset) -> bool:
    """ Returns True if combinator could be matched without consuming input """
    raise NotImplementedError(f'Analysis of combinator is not implemented: {type(combinator).__name__}')


@is_nullable.register
def _(combinator: PatternCombinator, nullables: frozenset) -> bool:
    return combinator.pattern.fullmatch('') is not None


@is_nullable.register
def _(combinator: ParseletCombinator, nullables: frozenset) -> bool:
    return combinator.parser_id in nullables


@is_nullable.register
def _(combinator: SequenceCombinator, nullables: frozenset) -> bool:
    return all(is_nullable(child, nullables) for child in combinator.combinators)


@is_nullable.register
def _(combinator: ChoiceCombinator, nullables: frozenset) -> bool:
    return any(is_nullable(child, nullables) for child in combinator.combinators)


@is_nullable.register
def _(combinator: OptionalCombinator, nullables: frozenset) -> bool:
    return True


@is_nullable.register
def _(combinator: RepeatCombinator, nullables: frozenset) -> bool:
    return True


@is_nullable.register
def _(combinator: MustCombinator, nullables: frozenset) -> bool:
    return is_nullable(combinator.combinator, nullables)


@is_nullable.register
def _(combinator: UntilCombinator, nullables: frozenset) -> bool:
    return is_nullable(combinator.condition, nullables)


@multimethod
def iter_leftmost(combinator: Combinator, nullables: frozenset) -> Iterator[ParseletID]:
    """ Returns parselets that could be called by combinator at it's starting position """
    raise NotImplementedError(f'Analysis of combinator is not implemented: {type(combinator).__name__}')


@iter_leftmost.register
def _(combinator: PatternCombinator, nullables: frozenset) -> Iterator[ParseletID]:
    return iter(())


@iter_leftmost.register
def _(combinator: ParseletCombinator, nullables: frozenset) -> Iterator[ParseletID]:
    yield combinator.parser_id


@iter_leftmost.register
def _(combinator: SequenceCombinator, nullables: frozenset) -> Iterator[ParseletID]:
    for child in combinator.combinators:
        yield from iter_leftmost(child, nullables)
        if not is_nullable(child, nullables):
            break


@iter_leftmost.register
def _(combinator: ChoiceCombinator, nullables: frozenset) -> Iterator[ParseletID]:
    for child in combinator.combinators:
        yield from iter_leftmost(child, nullables)


@iter_leftmost.register
def _(combinator: OptionalCombinator, nullables: frozenset) -> Iterator[ParseletID]:
    return iter_leftmost(combinator.combinator, nullables)


@iter_leftmost.register
def _(combinator: RepeatCombinator, nullables: frozenset) -> Iterator[ParseletID]:
    return iter_leftmost(combinator.combinator, nullables)


@iter_leftmost.register
def _(combinator: MustCombinator, nullables: frozenset) -> Iterator[ParseletID]:
    return iter_leftmost(combinator.combinator, nullables)


@iter_leftmost.register
def _(combinator: UntilCombinator, nullables: frozenset) -> Iterator[ParseletID]:
    yield from iter_leftmost(combinator.condition, nullables)
    yield from iter_leftmost(combinator.combinator, nullables)


def iter_combinators(combinator: Combinator) -> Iterator[Combinator]:
    """ Returns iterator over combinator and all nested combinators """
    yield combinator
    for child in combinator.nested:
        yield from iter_combinators(child)


def find_nullables(grammar: Grammar) -> FrozenSet[ParseletID]:
    """ Find all parselets that could be matched without consuming input """
    nullables = frozenset()
    while True:
        result = frozenset(
            parser_id for parser_id, table in grammar.tables.items()
            if any(is_nullable(parselet.combinator, nullables) for parselet in table.parselets)
        )
        if result == nullables:
            return nullables
        nullables = result


def find_cycles(graph: Mapping[ParseletID, Set[ParseletID]]) -> Sequence[Sequence[ParseletID]]:
    """ Find cycles in graph, each cycle is reported once starting from it's smallest parselet """
    cycles = []
    for start in sorted(graph):
        stack = [(start, [start])]
        while stack:
            node, path = stack.pop()
            for neighbor in sorted(graph.get(node, ())):
                if neighbor == start:
                    cycles.append(path + [neighbor])
                elif neighbor > start and neighbor not in path:
                    stack.append((neighbor, path + [neighbor]))
    return cycles


def analyze_grammar(grammar: Grammar) -> Sequence[GrammarIssue]:
    """ Analyze grammar and returns found issues. Returns empty sequence for well-formed grammar """
    issues: List[GrammarIssue] = []
    nullables = find_nullables(grammar)

    graph = {}
    for parser_id, table in grammar.tables.items():
        if not table.parselets:
            issues.append(GrammarIssue(parser_id, f"parselet '{parser_id}' has no alternatives"))

        graph[parser_id] = set()
        for parselet in table.parselets:
            graph[parser_id].update(iter_leftmost(parselet.combinator, nullables))

            for combinator in iter_combinators(parselet.combinator):
                if isinstance(combinator, (RepeatCombinator, UntilCombinator)) \
                        and is_nullable(combinator.combinator, nullables):
                    issues.append(GrammarIssue(
                        parser_id,
                        f"repetition of expression that matches empty input in parselet '{parser_id}': "
                        f"{dump_combinator.to_string(combinator)}"
                    ))

    for cycle in find_cycles(graph):
        issues.append(GrammarIssue(
            cycle[0],
            f"parselet '{cycle[0]}' is left recursive: {' -> '.join(map(str, cycle))}"
        ))

    for issue in issues:
        _log.debug('Grammar issue: %s', issue)
    return issues
