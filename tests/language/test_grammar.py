# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
import pytest

from abnfc.language.combinators import make_sequence, PatternCombinator, ParseletCombinator
from abnfc.language.grammar import Grammar, GrammarError


def test_add_parselet():
    grammar = Grammar()
    expr_id = grammar.add_parselet('expr', message='expected expression')

    assert 'expr' in grammar.parselets
    assert grammar.parselets['expr'] is expr_id
    assert expr_id.name == 'expr'
    assert expr_id.message == 'expected expression'
    assert expr_id in grammar.tables
    assert str(expr_id) == 'expr'


def test_add_parselet_twice():
    grammar = Grammar()
    expr_id = grammar.add_parselet('expr', message='expected expression')

    assert grammar.add_parselet('expr') is expr_id
    assert grammar.add_parselet('expr', message='expected expression') is expr_id
    with pytest.raises(GrammarError):
        grammar.add_parselet('expr', message='expected term')


def test_add_parselet_with_wrong_name():
    grammar = Grammar()
    with pytest.raises(GrammarError):
        grammar.add_parselet('Expr')
    with pytest.raises(GrammarError):
        grammar.add_parselet('1expr')


def test_parselet_order():
    grammar = Grammar()
    first_id = grammar.add_parselet('first')
    second_id = grammar.add_parselet('second')

    assert first_id < second_id
    assert sorted([second_id, first_id]) == [first_id, second_id]


def test_add_parser():
    grammar = Grammar()
    expr_id = grammar.add_parser('expr', make_sequence('(', 'expr', ')'))

    assert grammar.parselets['expr'] is expr_id
    parselets = grammar.tables[expr_id].parselets
    assert len(parselets) == 1
    assert parselets[0].parser_id is expr_id
    assert len(parselets[0].combinator) == 3


def test_add_parser_from_other_grammar():
    other = Grammar()
    expr_id = other.add_parselet('expr')

    grammar = Grammar()
    with pytest.raises(GrammarError):
        grammar.add_parser(expr_id, 'a')


def test_add_parser_in_declaration_order():
    grammar = Grammar()
    expr_id = grammar.add_parselet('expr')
    number_id = grammar.add_parselet('number')

    grammar.add_parser(expr_id, 'a')
    grammar.add_parser(expr_id, number_id)
    grammar.add_parser(expr_id, 'b')

    parselets = grammar.tables[expr_id].parselets
    assert isinstance(parselets[0].combinator, PatternCombinator)
    assert parselets[0].combinator.description == "'a'"
    assert isinstance(parselets[1].combinator, ParseletCombinator)
    assert parselets[2].combinator.description == "'b'"


def test_parselet_str():
    grammar = Grammar()
    expr_id = grammar.add_parselet('expr')
    number_id = grammar.add_parselet('number')
    grammar.add_parser(expr_id, make_sequence(number_id, '+', expr_id))

    parselet = grammar.tables[expr_id].parselets[0]
    assert str(parselet) == "expr := number '+' expr"
    assert repr(parselet) == "<Parselet: expr := number '+' expr>"
