"""Exception hierarchy raised while decoding Standard MIDI Files."""
from __future__ import annotations


class MidiDecodeError(ValueError):
    """Base class for every failure raised by the SMF decoder."""

    def __init__(self, message: str, *, offset: int | None = None):
        super().__init__(message)
        self.offset = offset
        self.chunk_index: int | None = None


class TruncatedDataError(MidiDecodeError):
    """Fewer bytes remain than a field, VLQ, or declared length requires."""


class MalformedFieldError(MidiDecodeError):
    """A field's bytes do not decode to any valid value."""


class ProtocolViolationError(MidiDecodeError):
    """Valid fields that break a cross-field or stateful rule."""


class ShapeMismatchError(MidiDecodeError):
    """A fixed-shape payload has the wrong number of bytes."""


class IncompleteChunkPrefixError(TruncatedDataError):
    def __init__(self, available: int, *, offset: int | None = None):
        super().__init__(
            f"Incomplete chunk prefix: {available} byte(s) left, need 8.",
            offset=offset,
        )
        self.available = available


class TruncatedChunkDataError(TruncatedDataError):
    def __init__(self, tag: bytes, declared: int, available: int, *, offset: int | None = None):
        super().__init__(
            f"Truncated chunk data for {tag!r}: declared {declared} byte(s), "
            f"only {available} available.",
            offset=offset,
        )
        self.tag = tag
        self.declared = declared
        self.available = available


class TruncatedEventError(TruncatedDataError):
    """A track event ran past the end of its chunk."""


class MalformedVLQError(MalformedFieldError):
    """Variable-length quantity was cut short or used too many bytes."""


class MissingHeaderFieldError(MalformedFieldError):
    def __init__(self, field: str, *, offset: int | None = None):
        super().__init__(f"Header chunk ended before the {field} field.", offset=offset)
        self.field = field


class UnknownFormatError(MalformedFieldError):
    def __init__(self, raw: bytes, *, offset: int | None = None):
        super().__init__(f"Unknown MIDI file format bytes {raw.hex(' ')}.", offset=offset)
        self.raw = raw


class InvalidFrameRateError(MalformedFieldError):
    def __init__(self, value: int, *, offset: int | None = None):
        super().__init__(f"Invalid SMPTE frame rate byte 0x{value:02X}.", offset=offset)
        self.value = value


class InvalidStatusByteError(MalformedFieldError):
    def __init__(self, status: int, *, offset: int | None = None):
        super().__init__(
            f"Status byte 0x{status:02X} is not allowed inside a track chunk.",
            offset=offset,
        )
        self.status = status


class InvalidMetaTypeError(MalformedFieldError):
    def __init__(self, meta_type: int, *, offset: int | None = None):
        super().__init__(f"Invalid meta event type 0x{meta_type:02X}.", offset=offset)
        self.meta_type = meta_type


class UnexpectedChunkKindError(MalformedFieldError):
    def __init__(self, expected: bytes, actual: bytes):
        super().__init__(f"Expected a {expected!r} chunk, got {actual!r}.")
        self.expected = expected
        self.actual = actual


class TracksCountMismatchError(ProtocolViolationError):
    def __init__(self, tracks_count: int):
        super().__init__(
            f"Single multi-channel track format requires exactly 1 track, header declares {tracks_count}."
        )
        self.tracks_count = tracks_count


class RunningStatusError(ProtocolViolationError):
    def __init__(self, data_byte: int, *, offset: int | None = None):
        super().__init__(
            f"Running status encountered before any status byte (data byte 0x{data_byte:02X}).",
            offset=offset,
        )
        self.data_byte = data_byte


class MetaShapeError(ShapeMismatchError):
    def __init__(self, name: str, expected: int, actual: int):
        super().__init__(f"{name} payload must be {expected} byte(s), got {actual}.")
        self.name = name
        self.expected = expected
        self.actual = actual


__all__ = [
    "IncompleteChunkPrefixError",
    "InvalidFrameRateError",
    "InvalidMetaTypeError",
    "InvalidStatusByteError",
    "MalformedFieldError",
    "MalformedVLQError",
    "MetaShapeError",
    "MidiDecodeError",
    "MissingHeaderFieldError",
    "ProtocolViolationError",
    "RunningStatusError",
    "ShapeMismatchError",
    "TracksCountMismatchError",
    "TruncatedChunkDataError",
    "TruncatedDataError",
    "TruncatedEventError",
    "UnexpectedChunkKindError",
    "UnknownFormatError",
]
