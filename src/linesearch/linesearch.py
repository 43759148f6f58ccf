from __future__ import annotations

import logging
from collections import deque
from enum import IntEnum
from typing import Callable, Deque, Optional

from .errors import NoLineAtPositionError
from .sources import RandomAccessSource

logger = logging.getLogger("linesearch")


class Ordering(IntEnum):
    """How the key of a line compares to the target key."""

    LESS = -1
    EQUAL = 0
    GREATER = 1

    @classmethod
    def from_value(cls, value: int) -> "Ordering":
        return cls((value > 0) - (value < 0))

    @classmethod
    def compare(cls, a: object, b: object) -> "Ordering":
        return cls((a > b) - (a < b))  # type: ignore[operator]


Comparator = Callable[[str], int]


def locate_line(source: RandomAccessSource, position: int) -> Optional[str]:
    """Return the line (without the line feed) that contains position.

    Characters are read forward from position up to the next line feed or the
    end of the source, then backward from just before position down to the
    previous line feed or the start of the source. If position is on the line
    feed that ends a line, that line is returned. Returns None if there is no
    line there, i.e. position is beyond the end or on an empty line.
    """
    position = source.character_start(position)
    chars: Deque[str] = deque()

    i = position
    while True:
        char = source.read_at(i)
        if char is None or char == "\n":
            break
        chars.append(char)
        i += source.width(char)

    i = position
    while i > 0:
        char = source.read_at(i - 1)
        if char is None or char == "\n":
            break
        chars.appendleft(char)
        i -= source.width(char)

    if not chars:
        return None
    return "".join(chars)


def search_line(
    source: RandomAccessSource, length: int, compare: Comparator
) -> Optional[str]:
    """Find a line for which compare(line) is zero.

    The lines of source must be sorted so that compare returns a negative
    value (Ordering.LESS) for lines before the target, zero for the target and
    a positive value after it. length is the number of positions to search,
    normally len(source).

    The search keeps an interval [base, base + size); each step looks at the
    line around base + size // 2, moves base there if the line is before the
    target, and always shrinks size by the half. Because the right edge is
    never moved, this converges like a partition point search. If more than
    one line compares equal, which one is returned is unspecified.

    Returns None if no line compares equal. Raises NoLineAtPositionError if a
    midpoint has no line, and propagates whatever compare raises.
    """
    if length == 0:
        return None

    base = 0
    size = length
    while size > 1:
        half = size // 2
        mid = base + half
        line = locate_line(source, mid)
        if line is None:
            raise NoLineAtPositionError(mid)
        ordering = Ordering.from_value(compare(line))
        logger.debug("Position %d: %r is %s", mid, line, ordering.name)
        if ordering == Ordering.LESS:
            base = mid
        elif ordering == Ordering.EQUAL:
            return line
        size -= half

    return None
