from __future__ import annotations

import pytest

from smf_tools.decoder.chunks import split_chunks
from smf_tools.decoder.errors import (
    InvalidFrameRateError,
    MalformedFieldError,
    MissingHeaderFieldError,
    ProtocolViolationError,
    TracksCountMismatchError,
    UnexpectedChunkKindError,
    UnknownFormatError,
)
from smf_tools.decoder.header import (
    FramesPerSecond,
    MidiFormat,
    TicksPerQuarterNote,
    TimeCode,
    decode_division,
    decode_header,
)

from helpers import chunk


def _header(payload: bytes):
    (raw,) = split_chunks(chunk(b"MThd", payload))
    return raw


def test_decodes_metrical_header() -> None:
    header = decode_header(_header(bytes([0x00, 0x01, 0x00, 0x03, 0x01, 0xE0])))

    assert header.format is MidiFormat.SIMULTANEOUS_TRACKS
    assert header.tracks_count == 3
    assert header.division == TicksPerQuarterNote(ticks=480)


@pytest.mark.parametrize(
    ("format_bytes", "expected"),
    [
        pytest.param(b"\x00\x00", MidiFormat.SINGLE_MULTI_CHANNEL_TRACK, id="format-0"),
        pytest.param(b"\x00\x01", MidiFormat.SIMULTANEOUS_TRACKS, id="format-1"),
        pytest.param(b"\x00\x02", MidiFormat.SEQUENTIALLY_INDEPENDENT_PATTERNS, id="format-2"),
    ],
)
def test_decodes_each_format(format_bytes: bytes, expected: MidiFormat) -> None:
    header = decode_header(_header(format_bytes + b"\x00\x01\x00\x60"))

    assert header.format is expected


@pytest.mark.parametrize("format_bytes", [b"\x00\x03", b"\x01\x00", b"\xff\xff"])
def test_rejects_unknown_format(format_bytes: bytes) -> None:
    with pytest.raises(UnknownFormatError) as excinfo:
        decode_header(_header(format_bytes + b"\x00\x01\x00\x60"))

    assert excinfo.value.raw == format_bytes
    assert excinfo.value.offset == 8


@pytest.mark.parametrize(
    ("payload", "field"),
    [
        pytest.param(b"", "format", id="empty"),
        pytest.param(b"\x00", "format", id="half-format"),
        pytest.param(b"\x00\x01\x00", "tracks_count", id="half-tracks"),
        pytest.param(b"\x00\x01\x00\x02", "division", id="no-division"),
        pytest.param(b"\x00\x01\x00\x02\x01", "division", id="half-division"),
    ],
)
def test_short_header_names_missing_field(payload: bytes, field: str) -> None:
    with pytest.raises(MissingHeaderFieldError) as excinfo:
        decode_header(_header(payload))

    assert isinstance(excinfo.value, MalformedFieldError)
    assert excinfo.value.field == field


def test_trailing_header_bytes_are_tolerated() -> None:
    header = decode_header(_header(bytes([0x00, 0x00, 0x00, 0x01, 0x00, 0x60, 0xAA, 0xBB])))

    assert header.format is MidiFormat.SINGLE_MULTI_CHANNEL_TRACK
    assert header.division == TicksPerQuarterNote(ticks=96)


def test_single_track_format_requires_one_track() -> None:
    with pytest.raises(TracksCountMismatchError) as excinfo:
        decode_header(_header(bytes([0x00, 0x00, 0x00, 0x02, 0x00, 0x60])))

    assert isinstance(excinfo.value, ProtocolViolationError)
    assert not isinstance(excinfo.value, MalformedFieldError)
    assert excinfo.value.tracks_count == 2


def test_multi_track_formats_accept_any_track_count() -> None:
    header = decode_header(_header(bytes([0x00, 0x02, 0x00, 0x00, 0x00, 0x60])))

    assert header.tracks_count == 0


@pytest.mark.parametrize(
    ("first", "fps", "rate"),
    [
        pytest.param(0xE8, FramesPerSecond.FPS_24, 24.0, id="24"),
        pytest.param(0xE7, FramesPerSecond.FPS_25, 25.0, id="25"),
        pytest.param(0xE3, FramesPerSecond.FPS_29_97_DROP, 29.97, id="29.97-drop"),
        pytest.param(0xE2, FramesPerSecond.FPS_30, 30.0, id="30"),
    ],
)
def test_decodes_time_code_division(first: int, fps: FramesPerSecond, rate: float) -> None:
    division = decode_division(bytes([first, 40]))

    assert division == TimeCode(frames_per_second=fps, ticks_per_frame=40)
    assert division.frames_per_second.rate == pytest.approx(rate)


def test_time_code_ticks_per_second() -> None:
    division = decode_division(bytes([0xE7, 40]))

    assert division.ticks_per_second == pytest.approx(1000.0)


@pytest.mark.parametrize("first", [0x80, 0xE4, 0xE9, 0xFF])
def test_rejects_invalid_frame_rate(first: int) -> None:
    with pytest.raises(InvalidFrameRateError) as excinfo:
        decode_header(_header(bytes([0x00, 0x01, 0x00, 0x01, first, 0x04])))

    assert excinfo.value.value == first
    assert excinfo.value.offset == 12


def test_ticks_division_uses_fifteen_bits() -> None:
    assert decode_division(b"\x7f\xff") == TicksPerQuarterNote(ticks=0x7FFF)


def test_rejects_non_header_chunk() -> None:
    (raw,) = split_chunks(chunk(b"MTrk", b"\x00\x00\x00\x01\x00\x60"))

    with pytest.raises(UnexpectedChunkKindError):
        decode_header(raw)
