"""Header chunk (``MThd``) model and decoder."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Union

from .chunks import HEADER_TAG, RawChunk
from .errors import (
    InvalidFrameRateError,
    MissingHeaderFieldError,
    TracksCountMismatchError,
    UnexpectedChunkKindError,
    UnknownFormatError,
)
from .streams import SafeStream

logger = logging.getLogger(__name__)


class MidiFormat(IntEnum):
    """Overall organisation of the file's tracks."""

    SINGLE_MULTI_CHANNEL_TRACK = 0
    SIMULTANEOUS_TRACKS = 1
    SEQUENTIALLY_INDEPENDENT_PATTERNS = 2


class FramesPerSecond(Enum):
    """SMPTE frame rates, keyed by their two's complement header byte."""

    FPS_24 = -24
    FPS_25 = -25
    FPS_29_97_DROP = -29
    FPS_30 = -30

    @property
    def rate(self) -> float:
        if self is FramesPerSecond.FPS_29_97_DROP:
            return 29.97
        return float(-self.value)


@dataclass(frozen=True)
class TicksPerQuarterNote:
    ticks: int


@dataclass(frozen=True)
class TimeCode:
    frames_per_second: FramesPerSecond
    ticks_per_frame: int

    @property
    def ticks_per_second(self) -> float:
        return self.frames_per_second.rate * self.ticks_per_frame


Division = Union[TicksPerQuarterNote, TimeCode]


@dataclass(frozen=True)
class HeaderChunk:
    """Basic information about the data in the file."""

    format: MidiFormat
    tracks_count: int
    division: Division


_FORMATS = {
    b"\x00\x00": MidiFormat.SINGLE_MULTI_CHANNEL_TRACK,
    b"\x00\x01": MidiFormat.SIMULTANEOUS_TRACKS,
    b"\x00\x02": MidiFormat.SEQUENTIALLY_INDEPENDENT_PATTERNS,
}


def decode_format(raw: bytes, *, offset: int | None = None) -> MidiFormat:
    try:
        return _FORMATS[bytes(raw)]
    except KeyError:
        raise UnknownFormatError(bytes(raw), offset=offset) from None


def decode_division(raw: bytes, *, offset: int | None = None) -> Division:
    """Decode the two division bytes.

    Bit 15 clear means metrical time (ticks per quarter note); bit 15 set
    means time-code based time, with the first byte holding a negative SMPTE
    frame rate and the second the ticks per frame.
    """

    high, low = raw[0], raw[1]
    if high & 0x80 == 0:
        return TicksPerQuarterNote(ticks=(high << 8) | low)
    signed = high - 0x100
    try:
        fps = FramesPerSecond(signed)
    except ValueError:
        raise InvalidFrameRateError(high, offset=offset) from None
    return TimeCode(frames_per_second=fps, ticks_per_frame=low)


def decode_header(chunk: RawChunk) -> HeaderChunk:
    if chunk.tag != HEADER_TAG:
        raise UnexpectedChunkKindError(HEADER_TAG, chunk.tag)

    stream = SafeStream(chunk.data, base_offset=chunk.data_offset)

    format_offset = stream.absolute()
    format_bytes = stream.take(2)
    if format_bytes is None:
        raise MissingHeaderFieldError("format", offset=format_offset)

    tracks_bytes = stream.take(2)
    if tracks_bytes is None:
        raise MissingHeaderFieldError("tracks_count", offset=stream.absolute())

    division_offset = stream.absolute()
    division_bytes = stream.take(2)
    if division_bytes is None:
        raise MissingHeaderFieldError("division", offset=division_offset)

    midi_format = decode_format(format_bytes, offset=format_offset)
    tracks_count = int.from_bytes(tracks_bytes, "big", signed=False)
    division = decode_division(division_bytes, offset=division_offset)

    if midi_format is MidiFormat.SINGLE_MULTI_CHANNEL_TRACK and tracks_count != 1:
        raise TracksCountMismatchError(tracks_count)

    if not stream.is_exhausted():
        logger.debug("Ignoring %d trailing header byte(s)", stream.remaining)

    return HeaderChunk(format=midi_format, tracks_count=tracks_count, division=division)


__all__ = [
    "Division",
    "FramesPerSecond",
    "HeaderChunk",
    "MidiFormat",
    "TicksPerQuarterNote",
    "TimeCode",
    "decode_division",
    "decode_format",
    "decode_header",
]
