# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
import io
import sys
from typing import Sequence

import pytest

from abnfc.language.actions import make_call
from abnfc.language.combinators import make_pattern, make_sequence, make_choice
from abnfc.language.grammar import Grammar
from abnfc.language.parser import Parser, ParseError, ParserError, ParserConsumeNothingError
from abnfc.language.source import Source
from abnfc.locations import Location, Position
from abnfc.writers import Writer


@pytest.fixture
def grammar() -> Grammar:
    grammar = Grammar()
    number_id = grammar.add_parselet('number')
    grammar.add_parser(number_id, make_pattern('[0-9]+', 'number'), make_call(make_count))
    return grammar


calls = []


def make_count(parser: Parser, begin: int, results: Sequence[object]) -> str:
    text = parser.source.slice(begin, parser.position)
    calls.append(text)
    return text


def make_parser(grammar: Grammar, content: str) -> Parser:
    return Parser(grammar, Source('<example>', content))


def test_consume(grammar):
    parser = make_parser(grammar, 'abc')
    pattern = make_pattern('ab', 'ab').pattern

    assert parser.consume(pattern, 'ab') == 'ab'
    assert parser.position == 2
    assert parser.current_char == 'c'

    with pytest.raises(ParserError) as ex:
        parser.consume(pattern, 'ab')
    assert ex.value.actual == "'c'"
    assert ex.value.expected == {'ab'}
    assert parser.position == 2


def test_error_at_end_of_file(grammar):
    parser = make_parser(grammar, '')
    error = parser.error({'number'})
    assert error.actual == 'end of file'
    assert error.get_message() == "Required ‘number’, but got ‘end of file’"


def test_backtrack(grammar):
    parser = make_parser(grammar, 'abc')
    pattern = make_pattern('[a-z]', 'letter').pattern

    with pytest.raises(ParserError):
        with parser.backtrack():
            parser.consume(pattern, 'letter')
            parser.consume(pattern, 'letter')
            parser.consume(make_pattern('[0-9]', 'digit').pattern, 'digit')
    assert parser.position == 0

    with parser.backtrack():
        parser.consume(pattern, 'letter')
    assert parser.position == 1


def test_packrat_memory(grammar):
    number_id = grammar.parselets['number']
    grammar.add_parser('item', make_choice(make_sequence(number_id, ';'), make_sequence(number_id, '.')))

    calls.clear()
    parser = make_parser(grammar, '123.')
    assert parser.parse(grammar.parselets['item']) == ('123',)
    assert calls == ['123']


def test_parse_requires_end_of_file(grammar):
    parser = make_parser(grammar, '12a')
    with pytest.raises(ParserError) as ex:
        parser.parse(grammar.parselets['number'])
    assert ex.value.expected == {'end of file'}
    assert ex.value.location.begin == Position(1, 3, 2)


def test_parse_without_alternatives(grammar):
    empty_id = grammar.add_parselet('empty')
    parser = make_parser(grammar, '')
    with pytest.raises(ParserConsumeNothingError):
        parser.parse(empty_id)


def test_merge_errors():
    begin = Location('<example>', Position(1, 1, 0), Position(1, 1, 0))
    end = Location('<example>', Position(1, 5, 4), Position(1, 5, 4))

    lhs = ParserError(begin, "'a'", {'x'})
    rhs = ParserError(end, "'b'", {'y'})
    assert ParserError.merge(None, rhs) is rhs
    assert ParserError.merge(lhs, None) is lhs
    assert ParserError.merge(lhs, rhs) is rhs
    assert ParserError.merge(rhs, lhs) is rhs

    merged = ParserError.merge(lhs, ParserError(begin, "'a'", {'z'}))
    assert merged.expected == {'x', 'z'}
    assert merged.location == begin


def test_error_to_string(grammar):
    parser = make_parser(grammar, 'value = 1\n')
    with pytest.raises(ParserError) as ex:
        parser.parse(grammar.parselets['number'])
    assert str(ex.value) == "[<example>:1:1] Required ‘number’, but got ‘'v'’\n"

    stream = io.StringIO()
    ex.value.to_stream(Writer(stream), parser.source.content)
    lines = [line.rstrip() for line in stream.getvalue().splitlines()]
    assert lines == [
        "[<example>:1:1] Required ‘number’, but got ‘'v'’",
        "    1 : value = 1",
        "      : ^",
    ]


def test_single_alternative_is_rewound_by_choice(grammar):
    number_id = grammar.parselets['number']
    pair_id = grammar.add_parser('pair', make_sequence(number_id, ',', number_id))
    grammar.add_parser('item', make_choice(pair_id, number_id))

    parser = make_parser(grammar, '12')
    assert parser.parse(grammar.parselets['item']) == ('12',)


@pytest.fixture
def nested_grammar(grammar) -> Grammar:
    number_id = grammar.parselets['number']
    nested_id = grammar.add_parselet('nested')
    grammar.add_parser(nested_id, make_choice(make_sequence('(', nested_id, ')'), number_id))
    return grammar


def test_parse_nested(nested_grammar):
    depth = 100
    parser = make_parser(nested_grammar, '(' * depth + '1' + ')' * depth)
    assert parser.parse(nested_grammar.parselets['nested']) == ('1',)


def test_parse_too_deeply_nested(nested_grammar):
    limit = sys.getrecursionlimit()
    depth = 10000
    parser = make_parser(nested_grammar, '(' * depth + '1' + ')' * depth)

    with pytest.raises(ParseError) as ex:
        parser.parse(nested_grammar.parselets['nested'])
    assert ex.value.message == 'grammar is nested too deeply'
    assert ex.value.location.begin.line == 1
    assert sys.getrecursionlimit() == limit
