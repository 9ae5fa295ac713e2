"""Interpretation of meta event payloads.

Meta events (status ``FF``) carry a type byte and a length-prefixed payload.
Each known type has either a free-form text payload or a fixed byte layout:

========  ======================  ===================================
type      message                 payload
========  ======================  ===================================
00        SequenceNumber          ``ssss`` (16-bit, MSB first)
01, 08-0F TextEvent               text
02        CopyrightNotice         text
03        SequenceOrTrackName     text
04        InstrumentName          text
05        Lyric                   text
06        Marker                  text
07        CuePoint                text
20        MidiChannelPrefix       ``cc``
21        MidiPort                ``pp``
2F        EndOfTrack              (nothing required)
51        SetTempo                ``tttttt`` microseconds per quarter
54        SmpteOffset             ``hr mn se fr ff``
58        TimeSignature           ``nn dd cc bb``
59        KeySignature            ``sf mi``
========  ======================  ===================================

Text is only promised to be printable ASCII, but bytes with the high bit set
show up in files written on systems with extended character sets, so text
payloads are decoded lossily instead of failing.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Union

from .errors import InvalidMetaTypeError, MetaShapeError
from .events import MetaEvent

TEXT_ENCODING = "utf-8"


@dataclass(frozen=True)
class SequenceNumber:
    number: int


@dataclass(frozen=True)
class TextEvent:
    text: str
    meta_type: int = 0x01


@dataclass(frozen=True)
class CopyrightNotice:
    text: str


@dataclass(frozen=True)
class SequenceOrTrackName:
    text: str


@dataclass(frozen=True)
class InstrumentName:
    text: str


@dataclass(frozen=True)
class Lyric:
    text: str


@dataclass(frozen=True)
class Marker:
    text: str


@dataclass(frozen=True)
class CuePoint:
    text: str


@dataclass(frozen=True)
class MidiChannelPrefix:
    channel: int


@dataclass(frozen=True)
class MidiPort:
    port: int


@dataclass(frozen=True)
class EndOfTrack:
    pass


@dataclass(frozen=True)
class SetTempo:
    microseconds_per_quarter: int

    @property
    def bpm(self) -> float:
        if self.microseconds_per_quarter <= 0:
            return 0.0
        return 60_000_000.0 / float(self.microseconds_per_quarter)


@dataclass(frozen=True)
class SmpteOffset:
    hours: int
    minutes: int
    seconds: int
    frames: int
    fractional_frames: int


@dataclass(frozen=True)
class TimeSignature:
    """``denominator`` is stored as the power-of-two exponent (3 means eighths)."""

    numerator: int
    denominator: int
    midi_clocks_per_metronome_click: int
    thirty_second_notes_per_quarter: int

    @property
    def denominator_value(self) -> int:
        return 2 ** self.denominator


@dataclass(frozen=True)
class KeySignature:
    sharps_flats: int
    major_minor: int

    @property
    def is_minor(self) -> bool:
        return self.major_minor == 1


MetaMessage = Union[
    SequenceNumber,
    TextEvent,
    CopyrightNotice,
    SequenceOrTrackName,
    InstrumentName,
    Lyric,
    Marker,
    CuePoint,
    MidiChannelPrefix,
    MidiPort,
    EndOfTrack,
    SetTempo,
    SmpteOffset,
    TimeSignature,
    KeySignature,
]


def _text(data: bytes) -> str:
    return data.decode(TEXT_ENCODING, errors="replace")


def _expect(name: str, data: bytes, size: int) -> bytes:
    if len(data) != size:
        raise MetaShapeError(name, size, len(data))
    return data


def _sequence_number(data: bytes) -> SequenceNumber:
    payload = _expect("SequenceNumber", data, 2)
    return SequenceNumber(number=int.from_bytes(payload, "big"))


def _channel_prefix(data: bytes) -> MidiChannelPrefix:
    return MidiChannelPrefix(channel=_expect("MidiChannelPrefix", data, 1)[0])


def _port(data: bytes) -> MidiPort:
    return MidiPort(port=_expect("MidiPort", data, 1)[0])


def _end_of_track(_data: bytes) -> EndOfTrack:
    return EndOfTrack()


def _set_tempo(data: bytes) -> SetTempo:
    payload = _expect("SetTempo", data, 3)
    return SetTempo(microseconds_per_quarter=int.from_bytes(payload, "big"))


def _smpte_offset(data: bytes) -> SmpteOffset:
    hours, minutes, seconds, frames, fractional = _expect("SmpteOffset", data, 5)
    return SmpteOffset(
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        frames=frames,
        fractional_frames=fractional,
    )


def _time_signature(data: bytes) -> TimeSignature:
    numerator, denominator, clocks, thirty_seconds = _expect("TimeSignature", data, 4)
    return TimeSignature(
        numerator=numerator,
        denominator=denominator,
        midi_clocks_per_metronome_click=clocks,
        thirty_second_notes_per_quarter=thirty_seconds,
    )


def _key_signature(data: bytes) -> KeySignature:
    sharps_flats, major_minor = _expect("KeySignature", data, 2)
    if sharps_flats > 0x7F:
        sharps_flats -= 0x100
    return KeySignature(sharps_flats=sharps_flats, major_minor=major_minor)


_DECODERS: Dict[int, Callable[[bytes], MetaMessage]] = {
    0x00: _sequence_number,
    0x02: lambda data: CopyrightNotice(_text(data)),
    0x03: lambda data: SequenceOrTrackName(_text(data)),
    0x04: lambda data: InstrumentName(_text(data)),
    0x05: lambda data: Lyric(_text(data)),
    0x06: lambda data: Marker(_text(data)),
    0x07: lambda data: CuePoint(_text(data)),
    0x20: _channel_prefix,
    0x21: _port,
    0x2F: _end_of_track,
    0x51: _set_tempo,
    0x54: _smpte_offset,
    0x58: _time_signature,
    0x59: _key_signature,
}

_GENERIC_TEXT_TYPES = frozenset({0x01, *range(0x08, 0x10)})


def decode_meta_event(meta_type: int | MetaEvent, data: bytes | None = None) -> MetaMessage:
    """Interpret a meta event's payload according to its type byte."""

    if isinstance(meta_type, MetaEvent):
        meta_type, data = meta_type.meta_type, meta_type.data
    payload = bytes(data or b"")
    if meta_type in _GENERIC_TEXT_TYPES:
        return TextEvent(text=_text(payload), meta_type=meta_type)
    decoder = _DECODERS.get(meta_type)
    if decoder is None:
        raise InvalidMetaTypeError(meta_type)
    return decoder(payload)


__all__ = [
    "CopyrightNotice",
    "CuePoint",
    "EndOfTrack",
    "InstrumentName",
    "KeySignature",
    "Lyric",
    "Marker",
    "MetaMessage",
    "MidiChannelPrefix",
    "MidiPort",
    "SequenceNumber",
    "SequenceOrTrackName",
    "SetTempo",
    "SmpteOffset",
    "TextEvent",
    "TimeSignature",
    "decode_meta_event",
]
