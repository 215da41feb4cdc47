# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
from __future__ import annotations

import io
import itertools
from io import StringIO
from typing import TextIO, Tuple, Sequence, Optional

import attr

from abnfc.locations import Location
from abnfc.writers import Color, Writer, create_writer

DiagnosticLines = Sequence[Tuple[int, str]]


class ABNFError(Exception):
    pass


@attr.dataclass
class DiagnosticError(ABNFError):
    """
    The DiagnosticError class is represented a diagnostic, such as a grammar or compiler error.

    Attributes:
        location - The location at which the message applies
        message  - The diagnostic's message.
        content  - The source text, used for show source lines of diagnostic
    """
    location: Location
    message: str
    content: Optional[str] = None

    def to_stream(self, stream: Writer, content: str = None):
        dump_source_string(stream, self.location, self.message, content or self.content)

    def __str__(self) -> str:
        stream = StringIO()
        self.to_stream(create_writer(stream))
        return stream.getvalue()


@attr.dataclass
class SemanticError(DiagnosticError):
    """ Base for errors found in well-formed syntax tree, e.g. reserved or duplicated rule names """
    pass


def load_source_lines(location: Location, before: int = 2, after: int = 2) -> DiagnosticLines:
    """ Load selected line and it's neighborhood lines """
    try:
        with open(location.filename, 'r', encoding='utf-8') as stream:
            return select_source_lines(stream, location, before, after)
    except (IOError, UnicodeDecodeError):
        return []


def select_source_lines(stream: TextIO, location: Location, before: int = 2, after: int = 2) -> DiagnosticLines:
    at_before = max(0, location.begin.line - before)
    at_after = location.end.line + after

    results = []
    for idx, line in itertools.islice(enumerate(stream), at_before, at_after):
        line = line.rstrip("\r\n")
        results.append((idx + 1, line))

    begin = next((i for i, (_, x) in enumerate(results) if x.strip()), 0)
    end = len(results) - next((i for i, (_, x) in enumerate(reversed(results)) if x.strip()), 0)

    return results[begin: end]


def is_error_column(location: Location, line: int, column: int) -> bool:
    """ Returns True if character at line and column is covered by location """
    if location.is_empty:
        return location.begin.line == line and location.begin.column == column
    if not location.begin.line <= line <= location.end.line:
        return False
    if location.begin.line == line and column < location.begin.column:
        return False
    if location.end.line == line and column >= location.end.column:
        return False
    return True


def dump_source_lines(stream: Writer, strings: DiagnosticLines, location: Location):
    """
    Convert selected lines to error message, e.g.:

    ```
        1 : rule = "abc
          :         ^
    ```
    """
    if not strings:
        return

    width = 5
    for idx, _ in strings:
        width = max(len(str(idx)), width)

    for line, string in strings:
        s_line = str(line).rjust(width)

        stream.write(s_line, " : ", color=Color.Cyan)
        for column, char in enumerate(string, 1):
            if is_error_column(location, line, column):
                stream.write(char, color=Color.Red)
            else:
                stream.write(char, color=Color.Green)
        stream.write("\n")

        # write error line
        if location.begin.line <= line <= location.end.line:
            stream.write(" " * width)
            stream.write(" : ", color=Color.Cyan)

            for column, char in itertools.chain(enumerate(string, 1), ((len(string) + 1, None),)):
                if is_error_column(location, line, column):
                    stream.write("^", color=Color.Red)
                elif char is not None:
                    stream.write(" ")
            stream.write("\n")


def dump_source_string(stream: Writer, location: Location, message: str, content: str = None):
    stream.write('[')
    stream.write(str(location))
    stream.write('] ')
    stream.write(message, color=Color.Red)
    stream.write('\n')

    if content:
        lines = select_source_lines(io.StringIO(content, newline=None), location)
    else:
        lines = load_source_lines(location)
    if lines:
        dump_source_lines(stream, lines, location)
