# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
from __future__ import annotations

import bisect
import re
from typing import List

from abnfc.locations import Location, Position

RE_NEWLINE = re.compile(r'\r\n|\r|\n')


class Source:
    """
    This class is represented input text of parser.

    Source maps character offsets to line and column positions. Any conventional line terminator
    (CRLF, CR or LF) starts a new line.
    """

    def __init__(self, filename: str, content: str):
        self.filename = filename
        self.content = content
        self.length = len(content)

        # offsets of first characters of all lines
        self.line_offsets: List[int] = [0]
        self.line_offsets.extend(match.end() for match in RE_NEWLINE.finditer(content))

    def position(self, offset: int) -> Position:
        line = bisect.bisect_right(self.line_offsets, offset)
        column = offset - self.line_offsets[line - 1] + 1
        return Position(line, column, offset)

    def location(self, begin: int, end: int = None) -> Location:
        end = begin if end is None else end
        return Location(self.filename, self.position(begin), self.position(end))

    def slice(self, begin: int, end: int) -> str:
        return self.content[begin:end]

    def __repr__(self) -> str:
        return f'<Source: {self.filename}>'
