from __future__ import annotations

import codecs
import io
import os
from abc import ABC, abstractmethod
from typing import IO, Any, Optional, Tuple, Union

from .errors import SourceReadError

PathLike = Union[str, bytes, "os.PathLike[Any]"]

_SINGLE_BYTE_PROBE = bytes(range(256))


class RandomAccessSource(ABC):
    """Something whose characters can be fetched by position.

    Positions run from 0 to len(source). A character may occupy more than one
    position (e.g. a multi-byte character in a file addressed by byte offset);
    in that case any position inside the character reads that character,
    character_start() returns the position where it begins and width() how
    many positions it occupies.
    """

    @abstractmethod
    def read_at(self, position: int) -> Optional[str]:
        """Return the character at position, or None at or beyond the end."""

    @abstractmethod
    def __len__(self) -> int:
        pass

    def character_start(self, position: int) -> int:
        return position

    def width(self, char: str) -> int:
        return 1

    def close(self) -> None:
        pass

    def __enter__(self) -> "RandomAccessSource":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class StringSource(RandomAccessSource):
    def __init__(self, text: str) -> None:
        self.text = text

    def read_at(self, position: int) -> Optional[str]:
        if 0 <= position < len(self.text):
            return self.text[position]
        return None

    def __len__(self) -> int:
        return len(self.text)


class FileSource(RandomAccessSource):
    """A binary file read one character at a time, addressed by byte offset.

    Each read is a separate positioned read on the file; nothing is cached.
    UTF-8 and single-byte encodings are supported. With UTF-8, a position that
    falls on a continuation byte reads the character that contains it. With
    utf-8-sig, the byte order mark at the start of the file is not part of the
    first line; positions inside it read as the start of the source.
    """

    def __init__(self, fp: IO[bytes], encoding: str = "utf-8") -> None:
        self.fp = fp
        self.encoding, self.max_width = self.check_encoding(encoding)
        self.length = fp.seek(0, os.SEEK_END)
        self._fileno = self._get_fileno(fp)
        self._owns_fp = False
        self.start = 0
        if self.encoding == "utf-8-sig":
            self.encoding = "utf-8"
            if self._read_bytes(0, len(codecs.BOM_UTF8)) == codecs.BOM_UTF8:
                self.start = len(codecs.BOM_UTF8)

    @classmethod
    def open(cls, path: PathLike, encoding: str = "utf-8") -> "FileSource":
        fp = open(path, "rb")
        try:
            source = cls(fp, encoding)
        except Exception:
            fp.close()
            raise
        source._owns_fp = True
        return source

    @staticmethod
    def check_encoding(encoding: str) -> Tuple[str, int]:
        """Return the canonical name of encoding and its maximum character
        width in bytes. Raise LookupError if encoding is unknown and
        ValueError if it is neither UTF-8 nor single-byte."""
        name = codecs.lookup(encoding).name
        if name in ("utf-8", "utf-8-sig"):
            return name, 4
        decoded = _SINGLE_BYTE_PROBE.decode(name, errors="replace")
        if len(decoded) == len(_SINGLE_BYTE_PROBE):
            return name, 1
        raise ValueError(
            "Encoding {} is neither UTF-8 nor a single-byte encoding".format(
                encoding
            )
        )

    @staticmethod
    def _get_fileno(fp: IO[bytes]) -> Optional[int]:
        if not hasattr(os, "pread"):
            return None
        try:
            return fp.fileno()
        except (AttributeError, io.UnsupportedOperation):
            return None

    def close(self) -> None:
        if self._owns_fp:
            self.fp.close()

    def __len__(self) -> int:
        return self.length

    def _read_bytes(self, position: int, size: int) -> bytes:
        try:
            if self._fileno is not None:
                return os.pread(self._fileno, size, position)
            self.fp.seek(position)
            return self.fp.read(size)
        except OSError as e:
            raise SourceReadError(position, str(e)) from e

    def read_at(self, position: int) -> Optional[str]:
        """Return the character at position, or None at the end of the file,
        before its start, or where the bytes are not a valid character."""
        if position < self.start:
            return None
        data = self._read_bytes(position, self.max_width)
        if not data:
            return None
        if self.max_width > 1 and _is_continuation_byte(data[0]):
            position = self.character_start(position)
            data = self._read_bytes(position, self.max_width)
            if not data:
                return None
        return self._decode_first_character(data)

    def _decode_first_character(self, data: bytes) -> Optional[str]:
        width = _utf8_width(data[0]) if self.max_width > 1 else 1
        if width is None or len(data) < width:
            return None
        try:
            return data[:width].decode(self.encoding)
        except UnicodeDecodeError:
            return None

    def character_start(self, position: int) -> int:
        if position <= self.start:
            return self.start if position >= 0 else position
        if self.max_width == 1:
            return position
        window_start = max(self.start, position - (self.max_width - 1))
        window = self._read_bytes(window_start, position - window_start + 1)
        start = window_start + len(window) - 1
        if start < position:
            # Beyond the end of the file
            return position
        while start > window_start and _is_continuation_byte(
            window[start - window_start]
        ):
            start -= 1
        return start

    def width(self, char: str) -> int:
        return len(char.encode(self.encoding))


def _is_continuation_byte(byte: int) -> bool:
    return byte & 0xC0 == 0x80


def _utf8_width(lead_byte: int) -> Optional[int]:
    if lead_byte < 0x80:
        return 1
    if 0xC2 <= lead_byte <= 0xDF:
        return 2
    if 0xE0 <= lead_byte <= 0xEF:
        return 3
    if 0xF0 <= lead_byte <= 0xF4:
        return 4
    return None
