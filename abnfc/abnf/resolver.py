# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
"""
Semantic resolver of ABNF rules.

To form an identifier from a rulename, all minuses are replaced with underscores. As identifiers of generated code
are case-sensitive, the "correct" spelling is remembered from the first occurrence of a rulename, all other
occurrences are automatically changed to that.

Certain rulenames are reserved, as their identifier is reserved as keyword or alternative token of C++ or by the
C++ standard (double underscore).
"""
import logging
from typing import Iterable, List, Optional, Sequence, overload

import attr

from abnfc.abnf.syntax import Node, NodeKind
from abnfc.exceptions import SemanticError

_log = logging.getLogger(__name__)

KEYWORDS = frozenset({
    "alignas", "alignof", "and", "and_eq",
    "asm", "auto", "bitand", "bitor",
    "bool", "break", "case", "catch",
    "char", "char16_t", "char32_t", "class",
    "compl", "const", "constexpr", "const_cast",
    "continue", "decltype", "default", "delete",
    "do", "double", "dynamic_cast", "else",
    "enum", "explicit", "export", "extern",
    "false", "float", "for", "friend",
    "goto", "if", "inline", "int",
    "long", "mutable", "namespace", "new",
    "noexcept", "not", "not_eq", "nullptr",
    "operator", "or", "or_eq", "private",
    "protected", "public", "register", "reinterpret_cast",
    "return", "short", "signed", "sizeof",
    "static", "static_assert", "static_cast", "struct",
    "switch", "template", "this", "thread_local",
    "throw", "true", "try", "typedef",
    "typeid", "typename", "union", "unsigned",
    "using", "virtual", "void", "volatile",
    "wchar_t", "while", "xor", "xor_eq",
})

RESERVED_MARKER = '__'


@attr.dataclass
class ReservedNameError(SemanticError):
    pass


@attr.dataclass
class DuplicateRuleError(SemanticError):
    pass


@attr.dataclass
class MissingRuleError(SemanticError):
    pass


@attr.dataclass
class InvalidOperatorError(SemanticError):
    pass


def get_rulename(node: Node) -> str:
    """ Returns identifier of rulename node """
    assert node.kind == NodeKind.Rulename
    return node.content.replace('-', '_')


def find_rule(names: Iterable[str], name: str) -> Optional[str]:
    """ Find name case-insensitively, returns found spelling or None """
    name = name.lower()
    return next((candidate for candidate in names if candidate.lower() == name), None)


def is_reserved(name: str, keywords: Iterable[str] = KEYWORDS) -> bool:
    return find_rule(keywords, name) is not None or RESERVED_MARKER in name


class NameResolver:
    """
    This class is resolved references to rules to canonical identifiers.

    Attributes:
        defined - The names of all rules of rulelist, used for detect forward references
        seen    - The canonical names in order of first occurrence
    """

    def __init__(self, defined: Iterable[str] = (), keywords: Iterable[str] = KEYWORDS):
        self.defined = list(defined)
        self.keywords = frozenset(keywords)
        self.seen: List[str] = []
        self.__declarations: List[str] = []

    def resolve(self, node: Node, is_forward: bool = False) -> str:
        """
        Returns canonical identifier for rulename node.

        :param node:        Rulename node
        :param is_forward:  If set, the first reference to rule, that is defined in rulelist, is registered as
                            forward declaration
        :raise ReservedNameError if name is reserved
        """
        name = get_rulename(node)
        canonical = find_rule(self.seen, name)
        if canonical is not None:
            return canonical
        if is_reserved(name, self.keywords):
            raise ReservedNameError(node.location, f"'{name}' is a reserved rulename")
        if is_forward and find_rule(self.defined, name) is not None:
            _log.debug('Forward declaration of rule %s', name)
            self.__declarations.append(name)
        self.seen.append(name)
        return name

    def pop_declarations(self) -> Sequence[str]:
        """ Returns names registered as forward declarations since last call """
        declarations, self.__declarations = tuple(self.__declarations), []
        return declarations


class RuleList(Sequence[Node]):
    """
    This class is ordered sequence of rules.

    Incremental alternations are merged into previous definition of rule, therefore each rule name appears at most
    once and in position of first definition.
    """

    def __init__(self, rules: Iterable[Node] = ()):
        self.__rules: List[Node] = []
        for rule in rules:
            self.append(rule)

    @property
    def names(self) -> Sequence[str]:
        return tuple(get_rulename(rule.front) for rule in self.__rules)

    def find(self, name: str) -> Optional[int]:
        name = name.lower()
        return next((idx for idx, rule in enumerate(self.__rules) if get_rulename(rule.front).lower() == name), None)

    def append(self, rule: Node):
        assert rule.kind == NodeKind.Rule
        name = get_rulename(rule.front)
        operator = rule.children[1]
        assert operator.kind == NodeKind.DefinedAs

        if operator.content == '=':
            if self.find(name) is not None:
                raise DuplicateRuleError(rule.location, f"rule '{name}' is already defined")
            self.__rules.append(rule)

        elif operator.content == '=/':
            index = self.find(name)
            if index is None:
                raise MissingRuleError(
                    rule.location, f"incremental alternation '{name}' without previous rule definition")
            self.__rules[index] = merge_alternation(self.__rules[index], rule)

        else:
            raise InvalidOperatorError(
                rule.location, f"invalid operator '{operator.content}', this should not happen!")

    @overload
    def __getitem__(self, index: int) -> Node: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[Node]: ...

    def __getitem__(self, index):
        return self.__rules[index]

    def __len__(self) -> int:
        return len(self.__rules)


def merge_alternation(previous: Node, rule: Node) -> Node:
    """
    Merge assignee of incremental alternation into assignee of previous rule definition.

    If assignee of previous rule is not alternation, then it's wrapped to alternation. The alternatives of new rule
    are appended to end of alternation.
    """
    assignee = previous.back
    if assignee.kind != NodeKind.Alternation:
        assignee = Node(NodeKind.Alternation, assignee.location, assignee.content, [assignee])
        previous.back = assignee

    extension = rule.back
    assignee.location = assignee.location + extension.location
    if extension.kind == NodeKind.Alternation:
        assignee.children.extend(extension.children)
    else:
        assignee.children.append(extension)

    _log.debug('Merge incremental alternation %s into rule %s', rule.location, get_rulename(previous.front))
    return previous
