from __future__ import annotations

import datetime as dt
from typing import Any, Callable

import iso8601

from .errors import MalformedLineError, UnparsableKeyError
from .linesearch import Ordering

ISO8601 = "iso8601"


def split_key(line: str, delimiter: str) -> str:
    """Return the part of line before the first occurrence of delimiter."""
    key, found, _ = line.partition(delimiter)
    if not found:
        raise MalformedLineError(line, delimiter)
    return key


def parse_datetime(key: str, key_format: str) -> dt.datetime:
    """Parse key with a strptime format, or as ISO 8601 if key_format is
    ISO8601. ISO 8601 keys without a time zone are taken to be UTC."""
    try:
        if key_format == ISO8601:
            return iso8601.parse_date(key, default_timezone=dt.timezone.utc)
        return dt.datetime.strptime(key, key_format)
    except (ValueError, iso8601.ParseError) as e:
        raise UnparsableKeyError(key, key_format, str(e)) from None


def compare_by_datetime(
    line: str, delimiter: str, target: str, key_format: str
) -> Ordering:
    date = parse_datetime(split_key(line, delimiter), key_format)
    target_date = parse_datetime(target, key_format)
    return Ordering.compare(date, target_date)


class KeyComparator:
    """Compare lines to a target through a key function.

    key receives the whole line; a ValueError it raises means the line's key
    could not be parsed and becomes UnparsableKeyError.
    """

    def __init__(self, key: Callable[[str], Any], target: Any) -> None:
        self.key = key
        self.target = target

    def __call__(self, line: str) -> Ordering:
        try:
            value = self.key(line)
        except ValueError as e:
            key_name = getattr(self.key, "__name__", repr(self.key))
            raise UnparsableKeyError(line, key_name, str(e)) from e
        return Ordering.compare(value, self.target)


class DatetimeComparator(KeyComparator):
    def __init__(self, delimiter: str, target: str, key_format: str) -> None:
        self.delimiter = delimiter
        self.key_format = key_format
        super().__init__(self.parse_line, parse_datetime(target, key_format))

    def parse_line(self, line: str) -> dt.datetime:
        return parse_datetime(split_key(line, self.delimiter), self.key_format)
