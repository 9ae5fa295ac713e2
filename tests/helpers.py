from __future__ import annotations

import struct


def vlq(value: int) -> bytes:
    """Encode ``value`` as a MIDI variable-length quantity."""

    buffer = [value & 0x7F]
    value >>= 7
    while value:
        buffer.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(buffer))


def chunk(tag: bytes, payload: bytes) -> bytes:
    return tag + struct.pack(">I", len(payload)) + payload


def header_chunk(format_type: int = 1, tracks: int = 1, division: int = 480) -> bytes:
    return chunk(b"MThd", struct.pack(">HHH", format_type, tracks, division))


def track_chunk(payload: bytes) -> bytes:
    return chunk(b"MTrk", payload)


def meta(meta_type: int, payload: bytes = b"", delta: int = 0) -> bytes:
    return vlq(delta) + bytes([0xFF, meta_type]) + vlq(len(payload)) + payload


def end_of_track(delta: int = 0) -> bytes:
    return meta(0x2F, delta=delta)
