# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
import enum
from typing import TextIO

RESET = '\033[0m'


@enum.unique
class Color(enum.IntEnum):
    Grey = 30
    Red = 31
    Green = 32
    Blue = 34
    Cyan = 36

    @property
    def term_color(self) -> str:
        return f'\033[{int(self)}m'


class Writer:
    """ Writer of diagnostics and dumps. Colors are ignored """

    def __init__(self, stream: TextIO):
        self.stream = stream

    def write(self, *messages: str, color: Color = None):
        for message in messages:
            self.stream.write(message)


class ColorWriter(Writer):
    """ Writer of diagnostics and dumps to terminal. Messages are highlighted with ANSI escape sequences """

    def write(self, *messages: str, color: Color = None):
        if not color:
            return super().write(*messages)

        self.stream.write(color.term_color)
        super().write(*messages)
        self.stream.write(RESET)


def create_writer(stream: TextIO) -> Writer:
    return ColorWriter(stream) if stream.isatty() else Writer(stream)
