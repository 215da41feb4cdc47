# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
"""
Hooks, that are invoked when parselet of ABNF grammar is matched. Hooks create nodes of syntax tree.
"""
from typing import Sequence

import attr

from abnfc.abnf.syntax import Node, NodeKind, NumericBase
from abnfc.language.actions import ActionHook
from abnfc.language.parser import Parser


def create_node(parser: Parser, kind: NodeKind, begin: int, end: int, children: Sequence[Node],
                base: NumericBase = None) -> Node:
    source = parser.source
    return Node(kind, source.location(begin, end), source.slice(begin, end), list(children), base)


def make_node(kind: NodeKind, base: NumericBase = None) -> ActionHook:
    """ Returns hook that creates node of given kind """

    def transform(parser: Parser, begin: int, children: Sequence[Node]) -> Node:
        return create_node(parser, kind, begin, parser.position, children, base)

    return transform


def fold_one(kind: NodeKind) -> ActionHook:
    """ Returns hook that creates node of given kind, or returns single child instead of node """

    def transform(parser: Parser, begin: int, children: Sequence[Node]) -> Node:
        if len(children) == 1:
            return children[0]
        return create_node(parser, kind, begin, parser.position, children)

    return transform


def classify_literal(content: str, is_sensitive: bool = False) -> NodeKind:
    """
    Classify content of quoted string:

    - content with alphabetic characters is case-insensitive string (unless `is_sensitive` is set)
    - content with single character is single character
    - otherwise it's case-sensitive string
    """
    if not is_sensitive and any(c.isalpha() for c in content):
        return NodeKind.IString
    if len(content) == 1:
        return NodeKind.One
    return NodeKind.String


def transform_quoted_string(parser: Parser, begin: int, children: Sequence[Node]) -> Node:
    # trim quotes
    begin, end = begin + 1, parser.position - 1
    content = parser.source.slice(begin, end)
    return create_node(parser, classify_literal(content), begin, end, children)


def transform_case_sensitive_string(parser: Parser, begin: int, children: Sequence[Node]) -> Node:
    node = children[-1]
    return attr.evolve(node, kind=classify_literal(node.content, is_sensitive=True))
