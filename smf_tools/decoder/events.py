"""Track event value types produced by the track decoder."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Union

META_STATUS = 0xFF
SYSEX_START_STATUS = 0xF0
SYSEX_CONTINUATION_STATUS = 0xF7
CHANNEL_STATUS_MIN = 0x80
CHANNEL_STATUS_MAX = 0xEF


class SysExVariant(IntEnum):
    START = SYSEX_START_STATUS
    CONTINUATION = SYSEX_CONTINUATION_STATUS


class ChannelMessageType(IntEnum):
    """High nibble of a channel voice status byte."""

    NOTE_OFF = 0x8
    NOTE_ON = 0x9
    POLYPHONIC_KEY_PRESSURE = 0xA
    CONTROL_CHANGE = 0xB
    PROGRAM_CHANGE = 0xC
    CHANNEL_PRESSURE = 0xD
    PITCH_BEND = 0xE


def channel_data_length(status: int) -> int:
    """Number of data bytes following a channel voice status."""

    if status >> 4 in (ChannelMessageType.PROGRAM_CHANGE, ChannelMessageType.CHANNEL_PRESSURE):
        return 1
    return 2


@dataclass(frozen=True)
class MetaEvent:
    """Meta event as framed in the track: type byte plus raw payload."""

    meta_type: int
    data: bytes

    @property
    def status(self) -> int:
        return META_STATUS


@dataclass(frozen=True)
class SysExEvent:
    variant: SysExVariant
    data: bytes

    @property
    def status(self) -> int:
        return int(self.variant)


@dataclass(frozen=True)
class ChannelVoiceEvent:
    status: int
    data: bytes
    running_status: bool = False

    @property
    def message_type(self) -> ChannelMessageType:
        return ChannelMessageType(self.status >> 4)

    @property
    def channel(self) -> int:
        return self.status & 0x0F


EventKind = Union[MetaEvent, SysExEvent, ChannelVoiceEvent]


@dataclass(frozen=True)
class TrackEvent:
    """An event preceded by the ticks elapsed since the previous one."""

    delta_time: int
    kind: EventKind


__all__ = [
    "CHANNEL_STATUS_MAX",
    "CHANNEL_STATUS_MIN",
    "ChannelMessageType",
    "ChannelVoiceEvent",
    "EventKind",
    "META_STATUS",
    "MetaEvent",
    "SYSEX_CONTINUATION_STATUS",
    "SYSEX_START_STATUS",
    "SysExEvent",
    "SysExVariant",
    "TrackEvent",
    "channel_data_length",
]
