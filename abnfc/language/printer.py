# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
import functools
from io import StringIO
from typing import TypeVar, Callable, TextIO, Union

from multimethod import multimethod

from abnfc.language.combinators import Combinator, PatternCombinator, ParseletCombinator, SequenceCombinator, \
    ChoiceCombinator, OptionalCombinator, RepeatCombinator, MustCombinator, UntilCombinator, CollectionCombinator
from abnfc.language.grammar import Grammar, ParseletID, Parselet
from abnfc.writers import Color, Writer, create_writer

T = TypeVar('T')


def _make_to__string(functor: Callable[[Writer, T], None]) -> Callable[[T], str]:
    def to_string(value: T):
        stream = StringIO()
        functor(create_writer(stream), value)
        return stream.getvalue()

    return to_string


def dumper(func) -> Callable[[Union[Writer, TextIO], T], None]:
    @functools.wraps(func)
    def inner_wrapper(stream: Union[Writer, TextIO], value: T):
        func(stream if isinstance(stream, Writer) else create_writer(stream), value)

    inner_wrapper.to_string = _make_to__string(inner_wrapper)
    return inner_wrapper


@dumper
def dump_grammar(stream: Writer, grammar: Grammar):
    for parser_id in grammar.parselets.values():
        for parselet in grammar.tables[parser_id].parselets:
            dump_parselet(stream, parselet)
            stream.write("\n")


@dumper
def dump_parselet_id(stream: Writer, parser_id: ParseletID):
    stream.write(parser_id.name, color=Color.Blue)


@dumper
def dump_parselet(stream: Writer, parselet: Parselet):
    dump_parselet_id(stream, parselet.parser_id)
    stream.write(' := ')
    write_combinator(stream, parselet.combinator)


@dumper
def dump_combinator(stream: Writer, combinator: Combinator):
    write_combinator(stream, combinator)


def write_nested(stream: Writer, combinator: Combinator):
    """ Write nested combinator, collections are enclosed in parenthesis """
    if isinstance(combinator, CollectionCombinator):
        stream.write('( ')
        write_combinator(stream, combinator)
        stream.write(' )')
    else:
        write_combinator(stream, combinator)


@multimethod
def write_combinator(stream: Writer, combinator: Combinator):
    raise NotImplementedError(f'Writing combinator to stream is not implemented: {type(combinator).__name__}')


@write_combinator.register
def _(stream: Writer, combinator: PatternCombinator):
    stream.write(combinator.description, color=Color.Red)


@write_combinator.register
def _(stream: Writer, combinator: ParseletCombinator):
    dump_parselet_id(stream, combinator.parser_id)


@write_combinator.register
def _(stream: Writer, combinator: OptionalCombinator):
    stream.write('[ ')
    write_combinator(stream, combinator.combinator)
    stream.write(' ]')


@write_combinator.register
def _(stream: Writer, combinator: RepeatCombinator):
    stream.write('{ ')
    write_combinator(stream, combinator.combinator)
    stream.write(' }')


@write_combinator.register
def _(stream: Writer, combinator: MustCombinator):
    stream.write('must', color=Color.Grey)
    stream.write('( ')
    write_combinator(stream, combinator.combinator)
    stream.write(' )')


@write_combinator.register
def _(stream: Writer, combinator: UntilCombinator):
    stream.write('until', color=Color.Grey)
    stream.write('( ')
    write_combinator(stream, combinator.condition)
    stream.write(', ')
    write_combinator(stream, combinator.combinator)
    stream.write(' )')


@write_combinator.register
def _(stream: Writer, combinator: SequenceCombinator):
    for idx, child in enumerate(combinator.combinators):
        if idx:
            stream.write(' ')
        write_nested(stream, child)


@write_combinator.register
def _(stream: Writer, combinator: ChoiceCombinator):
    for idx, child in enumerate(combinator.combinators):
        if idx:
            stream.write(' | ')
        write_nested(stream, child)
