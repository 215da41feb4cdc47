# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
import pytest

from abnfc.abnf import compile_rulelist, parse_rulelist
from abnfc.abnf.resolver import DuplicateRuleError
from abnfc.language.parser import ParseError


def test_compile_rulelist():
    statements = compile_rulelist('rule1 = "ab" / %x41\r\n')
    assert statements == [
        "struct rule1 : tao::pegtl::sor< tao::pegtl::istring< 'a', 'b' >, tao::pegtl::one< 0x41 > > {};"
    ]


def test_compile_rulelist_with_prefix():
    content = (
        '; postal address\n'
        'postal-address = name-part street zip-part\n'
        'name-part = *(personal-part SP) last-name [SP suffix] CRLF\n'
        'zip-part = town-name "," SP state 1*2SP zip-code CRLF\n'
    )
    statements = compile_rulelist(content, prefix='')
    assert statements == [
        'struct name_part;\n'
        'struct zip_part;\n'
        'struct postal_address : seq< name_part, street, zip_part > {};',

        'struct name_part : seq< star< seq< personal_part, SP > >, last_name, opt< seq< SP, suffix > >, CRLF > {};',

        "struct zip_part : seq< town_name, one< ',' >, SP, state, seq< SP, opt< SP > >, zip_code, CRLF > {};",
    ]


def test_parse_rulelist_filename():
    with pytest.raises(ParseError) as ex:
        parse_rulelist('rule = (a\n', 'grammar.abnf')
    assert ex.value.location.filename == 'grammar.abnf'
    assert ex.value.content == 'rule = (a\n'


def test_compile_without_partial_results():
    with pytest.raises(DuplicateRuleError):
        compile_rulelist('a = "1"\nb = "2"\na = "3"\n')


def test_compilations_are_independent():
    assert compile_rulelist('Rule = "1"\n', prefix='') == ["struct Rule : one< '1' > {};"]
    assert compile_rulelist('rule = "1"\n', prefix='') == ["struct rule : one< '1' > {};"]


def test_compile_nested_groups():
    depth = 50
    content = 'r = ' + '(' * depth + 'a b' + ')' * depth + '\n'
    assert compile_rulelist(content, prefix='') == ['struct r : seq< a, b > {};']


def test_compile_nested_alternations():
    depth = 50
    content = 'r = ' + '(x / ' * depth + 'y' + ')' * depth + '\n'
    expected = 'sor< x, ' * depth + 'y' + ' >' * depth
    assert compile_rulelist(content, prefix='') == [f'struct r : {expected} {{}};']


def test_compile_too_deeply_nested_groups():
    depth = 1000
    content = 'r = ' + '(' * depth + 'a' + ')' * depth + '\n'
    with pytest.raises(ParseError) as ex:
        compile_rulelist(content)
    assert ex.value.message == 'grammar is nested too deeply'
