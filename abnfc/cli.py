# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
"""
Command line interface of ABNF compiler.

Exit codes:
    0 - rules are compiled and printed to standard output
    1 - wrong usage, source file can not be read, or source file is malformed
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from abnfc.abnf.codegen import PREFIX
from abnfc.abnf.compiler import abnf_grammar, compile_rulelist
from abnfc.exceptions import DiagnosticError
from abnfc.language.analysis import analyze_grammar
from abnfc.language.parser import ParserError
from abnfc.writers import create_writer

_log = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def _configure_logging(verbosity: int) -> None:
    """ Set up the root `abnfc` logger: 0 => WARNING, 1 => INFO, 2+ => DEBUG """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt="[%(levelname)-5.5s] %(name)s: %(message)s"))

    root = logging.getLogger("abnfc")
    for previous in list(root.handlers):
        root.removeHandler(previous)
    root.setLevel(level)
    root.addHandler(handler)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='abnfc',
        description='Compile ABNF grammar (RFC 5234, RFC 7405) to PEGTL rule definitions.',
    )
    parser.add_argument(
        'sources',
        metavar='SOURCE',
        nargs='*',
        help='ABNF source file',
    )
    parser.add_argument(
        '--prefix',
        default=PREFIX,
        help=f'namespace prefix of generated rules (default: {PREFIX})',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v info, -vv debug).',
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if len(args.sources) != 1:
        for issue in analyze_grammar(abnf_grammar):
            print(issue, file=sys.stderr)
        parser.print_usage(sys.stderr)
        return EXIT_FAILURE

    filename = args.sources[0]
    try:
        with open(filename, 'r', encoding='utf-8', newline='') as stream:
            content = stream.read()
    except (OSError, UnicodeDecodeError) as ex:
        _log.error('Can not read source file %s: %s', filename, ex)
        return EXIT_FAILURE

    _log.info('Compile %s', filename)
    try:
        statements = compile_rulelist(content, filename, prefix=args.prefix)
    except (ParserError, DiagnosticError) as ex:
        ex.to_stream(create_writer(sys.stderr), content)
        return EXIT_FAILURE

    for statement in statements:
        print(statement)
    return EXIT_SUCCESS
