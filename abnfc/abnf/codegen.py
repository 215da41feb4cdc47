# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
from typing import Callable, Iterable, Iterator, Mapping, Sequence

import attr

from abnfc.abnf.resolver import NameResolver, get_rulename
from abnfc.abnf.syntax import Node, NodeKind, NumericBase
from abnfc.exceptions import SemanticError

PREFIX = 'tao::pegtl::'
SEPARATOR = ', '


@attr.dataclass
class RepetitionError(SemanticError):
    pass


@attr.dataclass
class GeneratorError(SemanticError):
    pass


def escape_char(char: str) -> str:
    if char in ('\'', '\\'):
        return f"'\\{char}'"
    return f"'{char}'"


def escape_string(value: str) -> str:
    """ Convert string to list of quoted characters, e.g. `a'b` => `'a', '\\'', 'b'` """
    return SEPARATOR.join(map(escape_char, value))


def remove_leading_zeroes(value: str) -> str:
    """ Strip leading zeroes from decimal string, e.g. `007` => `7` and `000` => `` """
    return value.lstrip('0')


class Generator:
    """
    This class is generated PEGTL rule definitions from ABNF syntax tree.

    Generator doesn't change syntax tree. Forward declarations are emitted before first rule that references rule
    defined later in rulelist.
    """

    def __init__(self, rules: Iterable[Node], *, prefix: str = PREFIX):
        self.prefix = prefix
        self.resolver = NameResolver(get_rulename(rule.front) for rule in rules)
        self.__emitters: Mapping[NodeKind, Callable[[Node], str]] = {
            NodeKind.Rulename: self.emit_rulename,
            NodeKind.One: self.emit_literal,
            NodeKind.String: self.emit_literal,
            NodeKind.IString: self.emit_literal,
            NodeKind.Prose: self.emit_prose,
            NodeKind.Value: self.emit_value,
            NodeKind.Type: self.emit_type,
            NodeKind.Alternation: self.emit_alternation,
            NodeKind.Option: self.emit_option,
            NodeKind.Group: self.emit_group,
            NodeKind.Repetition: self.emit_repetition,
            NodeKind.AndPredicate: self.emit_and_predicate,
            NodeKind.NotPredicate: self.emit_not_predicate,
            NodeKind.Concatenation: self.emit_concatenation,
            NodeKind.Rule: self.emit_rule,
        }

    def emit(self, rule: Node) -> str:
        """ Returns rule definition statement prefixed with required forward declarations """
        statement = self.to_string(rule)
        lines = [f'struct {name};' for name in self.resolver.pop_declarations()]
        lines.append(statement)
        return '\n'.join(lines)

    def generate(self, rules: Iterable[Node]) -> Iterator[str]:
        for rule in rules:
            yield self.emit(rule)

    def to_string(self, node: Node) -> str:
        emitter = self.__emitters.get(node.kind)
        if not emitter:
            raise GeneratorError(node.location, f"missing code generation for node kind '{node.kind}'")
        return emitter(node)

    def to_strings(self, nodes: Sequence[Node]) -> str:
        return SEPARATOR.join(self.to_string(node) for node in nodes)

    def make_rule(self, name: str, *arguments: str) -> str:
        return f'{self.prefix}{name}< {SEPARATOR.join(arguments)} >'

    def emit_rulename(self, node: Node) -> str:
        return self.resolver.resolve(node, is_forward=True)

    def emit_literal(self, node: Node) -> str:
        names = {NodeKind.One: 'one', NodeKind.String: 'string', NodeKind.IString: 'istring'}
        return self.make_rule(names[node.kind], escape_string(node.content))

    def emit_prose(self, node: Node) -> str:
        return f'/* {node.content} */'

    def emit_value(self, node: Node) -> str:
        if node.base == NumericBase.Hexadecimal:
            return '0x' + node.content
        if node.base == NumericBase.Binary:
            return str(int(node.content, 2))
        return node.content

    def emit_type(self, node: Node) -> str:
        if len(node.children) == 2 and node.back.kind == NodeKind.Range:
            return self.make_rule('range', self.to_string(node.front), self.to_string(node.back.front))
        if len(node.children) == 1:
            return self.make_rule('one', self.to_strings(node.children))
        return self.make_rule('string', self.to_strings(node.children))

    def emit_alternation(self, node: Node) -> str:
        return self.make_rule('sor', self.to_strings(node.children))

    def emit_option(self, node: Node) -> str:
        return self.make_rule('opt', self.to_strings(node.children))

    def emit_group(self, node: Node) -> str:
        return self.make_rule('seq', self.to_strings(node.children))

    def emit_and_predicate(self, node: Node) -> str:
        assert len(node.children) == 1
        return self.make_rule('at', self.to_string(node.front))

    def emit_not_predicate(self, node: Node) -> str:
        assert len(node.children) == 1
        return self.make_rule('not_at', self.to_string(node.front))

    def emit_concatenation(self, node: Node) -> str:
        assert node.children
        return self.make_rule('seq', self.to_strings(node.children))

    def emit_repetition(self, node: Node) -> str:
        assert len(node.children) == 2
        content = self.to_string(node.back)
        repeat = node.front.content
        star = repeat.find('*')

        # exactly N
        if star == -1:
            value = remove_leading_zeroes(repeat)
            if not value:
                raise RepetitionError(node.location, 'repetition of zero not allowed')
            return self.make_rule('rep', value, content)

        min_value = remove_leading_zeroes(repeat[:star])
        max_value = remove_leading_zeroes(repeat[star + 1:])
        if star != len(repeat) - 1 and not max_value:
            raise RepetitionError(node.location, 'repetition maximum of zero not allowed')

        if not min_value and not max_value:
            return self.make_rule('star', content)
        if not max_value:
            if min_value == '1':
                return self.make_rule('plus', content)
            return self.make_rule('rep_min', min_value, content)
        if not min_value:
            if max_value == '1':
                return self.make_rule('opt', content)
            return self.make_rule('rep_max', max_value, content)

        min_count = int(min_value)
        max_count = int(max_value)
        if min_count > max_count:
            raise RepetitionError(
                node.location, 'repetition minimum which is greater than the repetition maximum not allowed')

        min_element = content if min_count == 1 else self.make_rule('rep', min_value, content)
        if min_count == max_count:
            return min_element

        if max_count - min_count == 1:
            max_element = self.make_rule('opt', content)
        else:
            max_element = self.make_rule('rep_opt', str(max_count - min_count), content)
        return self.make_rule('seq', min_element, max_element)

    def emit_rule(self, node: Node) -> str:
        name = self.resolver.resolve(node.front)
        return f'struct {name} : {self.to_string(node.back)} {{}};'
