from __future__ import annotations

from typing import Optional


class LineSearchError(Exception):
    pass


class MalformedLineError(LineSearchError):
    def __init__(self, line: str, delimiter: str) -> None:
        super().__init__(
            "Found badly formatted line (no {!r} delimiter): {}".format(
                delimiter, line
            )
        )
        self.line = line
        self.delimiter = delimiter


class UnparsableKeyError(LineSearchError):
    def __init__(self, key: str, key_format: str, reason: str = "") -> None:
        message = "Key {!r} does not match format {!r}".format(key, key_format)
        if reason:
            message += " ({})".format(reason)
        super().__init__(message)
        self.key = key
        self.key_format = key_format


class NoLineAtPositionError(LineSearchError):
    """Raised when the search lands on a position where no line can be
    recovered, which means the source is corrupt or has empty lines."""

    def __init__(self, position: int) -> None:
        super().__init__("Line not found for position {}".format(position))
        self.position = position


class SourceReadError(LineSearchError):
    def __init__(self, position: int, reason: Optional[str] = None) -> None:
        message = "Cannot read source at position {}".format(position)
        if reason:
            message += ": {}".format(reason)
        super().__init__(message)
        self.position = position
