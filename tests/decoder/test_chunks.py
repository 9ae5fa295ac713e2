from __future__ import annotations

import struct

import pytest

from smf_tools.decoder.chunks import ChunkKind, RawChunk, iter_chunks, split_chunks
from smf_tools.decoder.errors import (
    IncompleteChunkPrefixError,
    TruncatedChunkDataError,
    TruncatedDataError,
)

from helpers import chunk, header_chunk, track_chunk


def test_empty_buffer_has_no_chunks() -> None:
    assert split_chunks(b"") == ()


def test_splits_chunks_in_file_order() -> None:
    data = header_chunk(format_type=0, tracks=1) + track_chunk(b"\x00\xff\x2f\x00")

    chunks = split_chunks(data)

    assert [c.tag for c in chunks] == [b"MThd", b"MTrk"]
    assert [c.kind for c in chunks] == [ChunkKind.HEADER, ChunkKind.TRACK]
    assert chunks[0].length == 6
    assert chunks[1].length == 4
    assert bytes(chunks[1].data) == b"\x00\xff\x2f\x00"
    assert chunks[0].offset == 0
    assert chunks[1].offset == 14
    assert chunks[1].data_offset == 22


def test_chunk_data_length_matches_declared_length() -> None:
    data = chunk(b"MTrk", bytes(range(10))) + chunk(b"MTrk", b"")

    for raw in split_chunks(data):
        assert len(raw.data) == raw.length


def test_zero_length_chunk_is_valid() -> None:
    (raw,) = split_chunks(chunk(b"MTrk", b""))

    assert raw.length == 0
    assert raw.to_owned() == b""


def test_chunk_data_is_borrowed_until_promoted() -> None:
    buffer = bytearray(chunk(b"XYZZ", b"abc"))
    (raw,) = split_chunks(buffer)

    owned = raw.to_owned()
    buffer[-1] = ord("z")

    assert bytes(raw.data) == b"abz"
    assert owned == b"abc"


@pytest.mark.parametrize(
    "payload",
    [
        pytest.param(b"", id="empty"),
        pytest.param(b"\x00" * 3, id="short"),
        pytest.param(bytes(range(256)), id="binary"),
    ],
)
def test_unknown_tag_is_kept_as_alien(payload: bytes) -> None:
    (raw,) = split_chunks(chunk(b"XYZZ", payload))

    assert raw.kind is ChunkKind.ALIEN
    assert raw.tag == b"XYZZ"
    assert raw.to_owned() == payload


def test_non_ascii_tag_is_alien() -> None:
    (raw,) = split_chunks(chunk(b"\xff\x00Mt", b"\x01"))

    assert raw.kind is ChunkKind.ALIEN
    assert raw.tag == b"\xff\x00Mt"


@pytest.mark.parametrize("leftover", [1, 4, 7])
def test_incomplete_prefix_is_rejected(leftover: int) -> None:
    data = header_chunk() + b"MTrk\x00\x00\x00"[:leftover]

    with pytest.raises(IncompleteChunkPrefixError) as excinfo:
        split_chunks(data)

    assert excinfo.value.available == leftover
    assert excinfo.value.offset == 14


def test_truncated_chunk_data_is_rejected() -> None:
    data = b"MTrk" + struct.pack(">I", 10) + b"\x00" * 5

    with pytest.raises(TruncatedChunkDataError) as excinfo:
        split_chunks(data)

    assert isinstance(excinfo.value, TruncatedDataError)
    assert excinfo.value.declared == 10
    assert excinfo.value.available == 5
    assert excinfo.value.tag == b"MTrk"


def test_iter_chunks_yields_before_failing() -> None:
    data = header_chunk() + b"MTrk" + struct.pack(">I", 3)
    iterator = iter_chunks(data)

    first = next(iterator)
    assert isinstance(first, RawChunk)
    assert first.kind is ChunkKind.HEADER
    with pytest.raises(TruncatedChunkDataError):
        next(iterator)
