# Copyright (C) 2019-2020 Vasiliy Sheredeko
#
# This software may be modified and distributed under the terms
# of the MIT license. See the LICENSE file for details.
import pytest

from abnfc.language.source import Source
from abnfc.locations import Location, Position


@pytest.mark.parametrize('content', ['ab\ncd\nef', 'ab\r\ncd\r\nef', 'ab\rcd\ref'])
def test_line_endings(content):
    source = Source('<example>', content)
    assert len(source.line_offsets) == 3

    offset = content.index('d')
    assert source.position(offset) == Position(2, 2, offset)

    offset = content.index('e')
    assert source.position(offset) == Position(3, 1, offset)


def test_position_at_end_of_file():
    source = Source('<example>', 'ab\n')
    assert source.position(3) == Position(2, 1, 3)


def test_location():
    source = Source('<example>', 'rule = "a"\n')

    location = source.location(7, 10)
    assert location == Location('<example>', Position(1, 8, 7), Position(1, 11, 10))
    assert str(location) == '<example>:1:8-11'
    assert source.slice(7, 10) == '"a"'

    location = source.location(5)
    assert location.is_empty
    assert str(location) == '<example>:1:6'


def test_location_add():
    source = Source('<example>', 'a = b\na =/ c\n')
    location = source.location(4, 5) + source.location(11, 12)

    assert location.begin == Position(1, 5, 4)
    assert location.end == Position(2, 7, 12)
    assert str(location) == '<example>:1:5-2:7'
