"""Bounds-checked byte cursor shared by the SMF decoders."""
from __future__ import annotations

from .errors import MalformedVLQError

VLQ_MAX_BYTES = 4


class SafeStream:
    """Forward-only reader over a byte buffer.

    The primitives never raise on short input: ``peek``, ``advance`` and
    ``take`` return ``None`` when the requested bytes are not available, and
    ``take`` leaves the position untouched in that case.  Slices returned by
    ``take`` are views into the original buffer, not copies.
    """

    __slots__ = ("_data", "_length", "_position", "_base")

    def __init__(self, data: bytes | bytearray | memoryview, *, base_offset: int = 0):
        self._data = memoryview(data)
        self._length = len(self._data)
        self._position = 0
        self._base = base_offset

    @property
    def remaining(self) -> int:
        return self._length - self._position

    def is_exhausted(self) -> bool:
        return self._position >= self._length

    def tell(self) -> int:
        return self._position

    def absolute(self, position: int | None = None) -> int:
        """Translate a local position into an offset of the enclosing buffer."""

        return self._base + (self._position if position is None else position)

    def peek(self) -> int | None:
        if self._position >= self._length:
            return None
        return self._data[self._position]

    def advance(self) -> int | None:
        if self._position >= self._length:
            return None
        value = self._data[self._position]
        self._position += 1
        return value

    def take(self, size: int) -> memoryview | None:
        if size < 0:
            raise ValueError("Size must be non-negative.")
        if self.remaining < size:
            return None
        start = self._position
        self._position += size
        return self._data[start : start + size]

    def read_varlen(self, *, max_bytes: int = VLQ_MAX_BYTES) -> int:
        start = self.absolute()
        value = 0
        consumed = 0
        while True:
            byte = self.advance()
            if byte is None:
                raise MalformedVLQError(
                    "Malformed variable-length quantity in MIDI track.", offset=start
                )
            value = (value << 7) | (byte & 0x7F)
            consumed += 1
            if byte & 0x80 == 0:
                return value
            if consumed >= max_bytes:
                raise MalformedVLQError(
                    "Variable-length quantity exceeds maximum length.", offset=start
                )


__all__ = ["SafeStream", "VLQ_MAX_BYTES"]
