# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
"""
Grammar of ABNF (RFC 5234 and RFC 7405) with PEG extensions: and-predicate (`&`) and not-predicate (`!`).

Grammar is scannerless: terminals are regular expressions matched at current position of input. Once opening
token of construct is matched, the remainder of construct is required (`must`) and failure is fatal for parsing.
"""
from typing import Sequence

from abnfc.abnf import core
from abnfc.abnf.syntax import Node, NodeKind, NumericBase
from abnfc.abnf.transform import create_node, fold_one, make_node, transform_case_sensitive_string, \
    transform_quoted_string
from abnfc.language.actions import make_call
from abnfc.language.combinators import make_choice, make_if_must, make_iliteral, make_list, make_list_must, \
    make_must, make_optional, make_pad, make_pattern, make_plus, make_repeat, make_sequence, make_until
from abnfc.language.grammar import Grammar
from abnfc.language.parser import Parser

NUMERIC_BASES = (
    # base, specifier, digit pattern
    (NumericBase.Binary, 'b', core.RE_BIT),
    (NumericBase.Decimal, 'd', core.RE_DIGIT),
    (NumericBase.Hexadecimal, 'x', core.RE_HEXDIG),
)

BASE_NAMES = {
    NumericBase.Binary: 'binary',
    NumericBase.Decimal: 'decimal',
    NumericBase.Hexadecimal: 'hexadecimal',
}


def append_rule(parser: Parser, begin: int, children: Sequence[Node]) -> None:
    """ Create rule node and append it to rulelist, e.g. state of parser """
    node = create_node(parser, NodeKind.Rule, begin, parser.position, children)
    parser.state.append(node)


def create_abnf_grammar() -> Grammar:
    grammar = Grammar()

    # core rules
    dquote_id = grammar.add_parselet('dquote')
    wsp_id = grammar.add_parselet('wsp')
    vchar_id = grammar.add_parselet('vchar')
    print_id = grammar.add_parselet('print')
    crlf_id = grammar.add_parselet('crlf')
    eof_id = grammar.add_parselet('eof')

    grammar.add_parser(dquote_id, make_pattern(core.RE_DQUOTE, 'DQUOTE'))
    grammar.add_parser(wsp_id, make_pattern(core.RE_WSP, 'WSP'))
    grammar.add_parser(vchar_id, make_pattern(core.RE_VCHAR, 'VCHAR'))
    grammar.add_parser(print_id, make_pattern(core.RE_PRINT, 'printable character'))
    grammar.add_parser(crlf_id, make_pattern(core.RE_CRLF, 'CRLF'))
    grammar.add_parser(eof_id, make_pattern(core.RE_EOF, 'end of file'))

    # comments and white spaces
    comment_cont_id = grammar.add_parselet('comment_cont', message='unterminated comment')
    comment_id = grammar.add_parselet('comment')
    c_nl_id = grammar.add_parselet('c_nl', message='unterminated rule')
    c_wsp_id = grammar.add_parselet('c_wsp')

    # comment_cont := until( CRLF, WSP | VCHAR )
    grammar.add_parser(comment_cont_id, make_until(crlf_id, make_choice(wsp_id, vchar_id)))

    # comment := ';' must( comment_cont )
    grammar.add_parser(comment_id, make_if_must(';', comment_cont_id))

    # c_nl := comment | CRLF
    grammar.add_parser(c_nl_id, make_choice(comment_id, crlf_id))

    # c_wsp := WSP | c_nl WSP
    grammar.add_parser(c_wsp_id, make_choice(wsp_id, make_sequence(c_nl_id, wsp_id)))

    # rulename := ALPHA { ALPHA | DIGIT | '-' }
    rulename_id = grammar.add_parselet('rulename')
    grammar.add_parser(rulename_id, make_pattern(core.RE_RULENAME, 'rulename'), make_call(make_node(NodeKind.Rulename)))

    # quoted strings
    quoted_string_cont_id = grammar.add_parselet('quoted_string_cont', message='unterminated string (missing \'"\')')
    quoted_string_id = grammar.add_parselet('quoted_string')
    case_insensitive_string_id = grammar.add_parselet('case_insensitive_string')
    case_sensitive_string_id = grammar.add_parselet('case_sensitive_string')
    char_val_id = grammar.add_parselet('char_val')

    # quoted_string_cont := until( DQUOTE, print )
    grammar.add_parser(quoted_string_cont_id, make_until(dquote_id, print_id))

    # quoted_string := DQUOTE must( quoted_string_cont )
    grammar.add_parser(
        quoted_string_id, make_if_must(dquote_id, quoted_string_cont_id), make_call(transform_quoted_string))

    # case_insensitive_string := [ '%i' ] quoted_string
    grammar.add_parser(case_insensitive_string_id, make_sequence(make_optional(make_iliteral('%i')), quoted_string_id))

    # case_sensitive_string := '%s' quoted_string
    grammar.add_parser(
        case_sensitive_string_id,
        make_sequence(make_iliteral('%s'), quoted_string_id),
        make_call(transform_case_sensitive_string)
    )

    # char_val := case_insensitive_string | case_sensitive_string
    grammar.add_parser(char_val_id, make_choice(case_insensitive_string_id, case_sensitive_string_id))

    # prose_val := '<' must( until( '>', print ) )
    prose_val_cont_id = grammar.add_parselet(
        'prose_val_cont', message="unterminated prose description (missing '>')")
    prose_val_id = grammar.add_parselet('prose_val')
    grammar.add_parser(prose_val_cont_id, make_until('>', print_id))
    grammar.add_parser(prose_val_id, make_if_must('<', prose_val_cont_id), make_call(make_node(NodeKind.Prose)))

    # numeric values
    num_val_choice_id = grammar.add_parselet(
        'num_val_choice', message="expected base specifier (one of 'bBdDxX')")
    num_val_id = grammar.add_parselet('num_val')

    for base, specifier, digit in NUMERIC_BASES:
        name = BASE_NAMES[base]
        prefix = name[:3]
        value_id = grammar.add_parselet(f'{prefix}_value', message=f'expected {name} value')
        range_id = grammar.add_parselet(f'{prefix}_range')
        type_id = grammar.add_parselet(f'{prefix}_type')

        # X_value := X_digit { X_digit }
        grammar.add_parser(value_id, make_pattern(f'(?:{digit})+', f'{name} digit'),
                           make_call(make_node(NodeKind.Value, base)))

        # X_range := '-' must( X_value )
        grammar.add_parser(range_id, make_if_must('-', value_id), make_call(make_node(NodeKind.Range, base)))

        # X_type := X_specifier must( X_value ) ( X_range | { '.' must( X_value ) } )
        grammar.add_parser(
            type_id,
            make_sequence(
                make_iliteral(specifier),
                make_must(value_id),
                make_choice(range_id, make_repeat('.', make_must(value_id)))
            ),
            make_call(make_node(NodeKind.Type, base))
        )

        # num_val_choice := bin_type | dec_type | hex_type
        grammar.add_parser(num_val_choice_id, type_id)

    # num_val := '%' must( num_val_choice )
    grammar.add_parser(num_val_id, make_if_must('%', num_val_choice_id))

    # elements
    alternation_id = grammar.add_parselet('alternation', message='expected element')
    concatenation_id = grammar.add_parselet('concatenation', message='expected element')
    repetition_id = grammar.add_parselet('repetition', message='expected element')
    option_close_id = grammar.add_parselet('option_close', message="unterminated option (missing ']')")
    group_close_id = grammar.add_parselet('group_close', message="unterminated group (missing ')')")
    option_id = grammar.add_parselet('option')
    group_id = grammar.add_parselet('group')
    element_id = grammar.add_parselet('element')
    repeat_id = grammar.add_parselet('repeat')
    and_predicate_id = grammar.add_parselet('and_predicate')
    not_predicate_id = grammar.add_parselet('not_predicate')
    predicate_id = grammar.add_parselet('predicate')

    # option := '[' { c_wsp } must( alternation ) { c_wsp } must( ']' )
    grammar.add_parser(option_close_id, ']')
    grammar.add_parser(
        option_id,
        make_sequence('[', make_pad(make_must(alternation_id), c_wsp_id), make_must(option_close_id)),
        make_call(make_node(NodeKind.Option))
    )

    # group := '(' { c_wsp } must( alternation ) { c_wsp } must( ')' )
    grammar.add_parser(group_close_id, ')')
    grammar.add_parser(
        group_id,
        make_sequence('(', make_pad(make_must(alternation_id), c_wsp_id), make_must(group_close_id)),
        make_call(fold_one(NodeKind.Group))
    )

    # element := rulename | group | option | char_val | num_val | prose_val
    grammar.add_parser(
        element_id, make_choice(rulename_id, group_id, option_id, char_val_id, num_val_id, prose_val_id))

    # repeat := DIGIT+ | DIGIT* '*' DIGIT*
    grammar.add_parser(repeat_id, make_pattern(core.RE_REPEAT, 'repeat'), make_call(make_node(NodeKind.Repeat)))

    # repetition := [ repeat ] element
    grammar.add_parser(
        repetition_id, make_sequence(make_optional(repeat_id), element_id), make_call(fold_one(NodeKind.Repetition)))

    # and_predicate := '&' must( repetition )
    grammar.add_parser(
        and_predicate_id, make_if_must('&', repetition_id), make_call(make_node(NodeKind.AndPredicate)))

    # not_predicate := '!' must( repetition )
    grammar.add_parser(
        not_predicate_id, make_if_must('!', repetition_id), make_call(make_node(NodeKind.NotPredicate)))

    # predicate := and_predicate | not_predicate | repetition
    grammar.add_parser(predicate_id, make_choice(and_predicate_id, not_predicate_id, repetition_id))

    # concatenation := predicate { c_wsp+ predicate }
    grammar.add_parser(
        concatenation_id,
        make_list(predicate_id, make_plus(c_wsp_id)),
        make_call(fold_one(NodeKind.Concatenation))
    )

    # alternation := concatenation { { c_wsp } '/' { c_wsp } must( concatenation ) }
    grammar.add_parser(
        alternation_id,
        make_list_must(concatenation_id, make_pad('/', c_wsp_id)),
        make_call(fold_one(NodeKind.Alternation))
    )

    # rules
    defined_as_op_id = grammar.add_parselet('defined_as_op')
    defined_as_id = grammar.add_parselet('defined_as', message="expected '=' or '=/'")
    rule_id = grammar.add_parselet('rule', message='expected rule')
    rulelist_id = grammar.add_parselet('rulelist')

    # defined_as_op := '=/' | '='
    grammar.add_parser(defined_as_op_id, make_choice('=/', '='), make_call(make_node(NodeKind.DefinedAs)))

    # defined_as := { c_wsp } defined_as_op { c_wsp }
    grammar.add_parser(defined_as_id, make_pad(defined_as_op_id, c_wsp_id))

    # rule := rulename must( defined_as ) must( alternation ) { c_wsp } must( c_nl )
    grammar.add_parser(
        rule_id,
        make_sequence(
            make_if_must(rulename_id, defined_as_id, alternation_id),
            make_repeat(c_wsp_id),
            make_must(c_nl_id)
        ),
        make_call(append_rule)
    )

    # rulelist := until( EOF, { c_wsp } c_nl | must( rule ) )
    grammar.add_parser(
        rulelist_id,
        make_until(eof_id, make_choice(make_sequence(make_repeat(c_wsp_id), c_nl_id), make_must(rule_id)))
    )

    return grammar
