# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
from __future__ import annotations

import enum
from typing import List, Optional

import attr

from abnfc.locations import Location


@enum.unique
class NodeKind(enum.Enum):
    Rulename = 'rulename'
    One = 'literal-one'
    String = 'literal-string'
    IString = 'literal-istring'
    Prose = 'prose-description'
    Value = 'numeric-value'
    Range = 'numeric-range'
    Type = 'numeric-type'
    Alternation = 'alternation'
    Option = 'option'
    Group = 'group'
    Repeat = 'repeat-count'
    Repetition = 'repetition'
    AndPredicate = 'and-predicate'
    NotPredicate = 'not-predicate'
    Concatenation = 'concatenation'
    DefinedAs = 'assignment-operator'
    Rule = 'rule'

    def __str__(self) -> str:
        return self.value


@enum.unique
class NumericBase(enum.IntEnum):
    Binary = 2
    Decimal = 10
    Hexadecimal = 16


@attr.dataclass
class Node:
    """
    Node of ABNF syntax tree.

    Attributes:
        kind     - The kind of node
        location - The source span covered by node
        content  - The source text covered by node. Delimiters of quoted strings are trimmed
        children - Nested nodes, each node is owned by exactly one parent
        base     - The base of numeric nodes
    """
    kind: NodeKind
    location: Location
    content: str
    children: List[Node] = attr.Factory(list)
    base: Optional[NumericBase] = None

    @property
    def front(self) -> Node:
        return self.children[0]

    @property
    def back(self) -> Node:
        return self.children[-1]

    @back.setter
    def back(self, node: Node):
        self.children[-1] = node
