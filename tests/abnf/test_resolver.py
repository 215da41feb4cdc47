# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
import pytest

from abnfc.abnf.resolver import NameResolver, RuleList, ReservedNameError, DuplicateRuleError, MissingRuleError, \
    InvalidOperatorError, get_rulename, find_rule, is_reserved
from abnfc.abnf.syntax import Node, NodeKind
from abnfc.locations import Location, Position


def make_location(begin: int, end: int) -> Location:
    return Location('<example>', Position(1, begin + 1, begin), Position(1, end + 1, end))


def make_rulename(name: str) -> Node:
    return Node(NodeKind.Rulename, make_location(0, len(name)), name)


def make_rule(name: str, operator: str, *assignee: Node) -> Node:
    if len(assignee) == 1:
        node = assignee[0]
    else:
        node = Node(NodeKind.Alternation, assignee[0].location + assignee[-1].location, '', list(assignee))
    return Node(NodeKind.Rule, make_location(0, 20), '', [
        make_rulename(name),
        Node(NodeKind.DefinedAs, make_location(0, len(operator)), operator),
        node
    ])


def make_literal(value: str, begin: int = 0) -> Node:
    return Node(NodeKind.IString, make_location(begin, begin + len(value)), value)


def test_get_rulename():
    assert get_rulename(make_rulename('rule-name')) == 'rule_name'


def test_find_rule():
    assert find_rule(['Alpha', 'digit'], 'ALPHA') == 'Alpha'
    assert find_rule(['Alpha', 'digit'], 'hexdig') is None


@pytest.mark.parametrize('name', ['class', 'Class', 'STRUCT', 'xor_eq', 'a__b', '__', 'x__'])
def test_is_reserved(name):
    assert is_reserved(name)


@pytest.mark.parametrize('name', ['classes', 'my_struct', 'a_b', 'rule'])
def test_is_not_reserved(name):
    assert not is_reserved(name)


def test_resolve_canonical_spelling():
    resolver = NameResolver()
    assert resolver.resolve(make_rulename('Rule-Name')) == 'Rule_Name'
    assert resolver.resolve(make_rulename('rule-name')) == 'Rule_Name'
    assert resolver.resolve(make_rulename('RULE_NAME')) == 'Rule_Name'
    assert resolver.seen == ['Rule_Name']


def test_resolve_reserved_name():
    resolver = NameResolver()
    with pytest.raises(ReservedNameError) as ex:
        resolver.resolve(make_rulename('Class'))
    assert ex.value.message == "'Class' is a reserved rulename"

    with pytest.raises(ReservedNameError) as ex:
        resolver.resolve(make_rulename('a--b'))
    assert ex.value.message == "'a__b' is a reserved rulename"


def test_resolve_forward_declarations():
    resolver = NameResolver(['first', 'second'])

    assert resolver.resolve(make_rulename('first')) == 'first'
    assert resolver.resolve(make_rulename('Second'), is_forward=True) == 'Second'
    assert resolver.resolve(make_rulename('second'), is_forward=True) == 'Second'
    assert resolver.resolve(make_rulename('ALPHA'), is_forward=True) == 'ALPHA'
    assert resolver.pop_declarations() == ('Second',)
    assert resolver.pop_declarations() == ()


def test_rulelist_append():
    rules = RuleList()
    rules.append(make_rule('first', '=', make_literal('a')))
    rules.append(make_rule('second', '=', make_literal('b')))

    assert len(rules) == 2
    assert rules.names == ('first', 'second')
    assert rules.find('SECOND') == 1
    assert rules.find('third') is None
    assert rules[0].back.content == 'a'
    assert [rule.front.content for rule in rules[:1]] == ['first']


def test_rulelist_duplicate_rule():
    rules = RuleList([make_rule('rule', '=', make_literal('a'))])

    with pytest.raises(DuplicateRuleError) as ex:
        rules.append(make_rule('Rule', '=', make_literal('b')))
    assert ex.value.message == "rule 'Rule' is already defined"
    assert len(rules) == 1
    assert rules[0].back.content == 'a'


def test_rulelist_missing_rule():
    rules = RuleList()
    with pytest.raises(MissingRuleError) as ex:
        rules.append(make_rule('rule', '=/', make_literal('a')))
    assert ex.value.message == "incremental alternation 'rule' without previous rule definition"


def test_rulelist_invalid_operator():
    rules = RuleList()
    with pytest.raises(InvalidOperatorError) as ex:
        rules.append(make_rule('rule', ':=', make_literal('a')))
    assert ex.value.message == "invalid operator ':=', this should not happen!"


def test_merge_into_single_element():
    first = make_literal('y', 5)
    rules = RuleList([
        make_rule('foo', '=', first),
        make_rule('bar', '=', make_literal('z')),
        make_rule('foo', '=/', make_literal('x', 12)),
    ])

    assert rules.names == ('foo', 'bar')
    assignee = rules[0].back
    assert assignee.kind == NodeKind.Alternation
    assert [child.content for child in assignee.children] == ['y', 'x']
    assert assignee.children[0] is first
    assert assignee.location.begin == first.location.begin
    assert assignee.location.end == Position(1, 14, 13)


def test_merge_alternations():
    rules = RuleList([
        make_rule('foo', '=', make_literal('a'), make_literal('b')),
        make_rule('FOO', '=/', make_literal('c'), make_literal('d')),
        make_rule('foo', '=/', make_literal('e')),
    ])

    assert len(rules) == 1
    assert rules[0].front.content == 'foo'
    assert [child.content for child in rules[0].back.children] == ['a', 'b', 'c', 'd', 'e']
