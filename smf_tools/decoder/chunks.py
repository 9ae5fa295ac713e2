"""Splitting an SMF buffer into its tagged, length-prefixed chunks."""
from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .errors import IncompleteChunkPrefixError, TruncatedChunkDataError
from .streams import SafeStream

logger = logging.getLogger(__name__)

HEADER_TAG = b"MThd"
TRACK_TAG = b"MTrk"
CHUNK_PREFIX_SIZE = 8


class ChunkKind(str, Enum):
    """Chunk categories derived from the four byte tag."""

    HEADER = "header"
    TRACK = "track"
    ALIEN = "alien"

    @classmethod
    def from_tag(cls, tag: bytes) -> "ChunkKind":
        if tag == HEADER_TAG:
            return cls.HEADER
        if tag == TRACK_TAG:
            return cls.TRACK
        return cls.ALIEN


@dataclass(frozen=True)
class RawChunk:
    """A chunk as it appears in the file, data borrowed from the source buffer."""

    tag: bytes
    length: int
    data: memoryview
    offset: int = 0

    @property
    def kind(self) -> ChunkKind:
        return ChunkKind.from_tag(self.tag)

    @property
    def data_offset(self) -> int:
        return self.offset + CHUNK_PREFIX_SIZE

    def to_owned(self) -> bytes:
        return bytes(self.data)


def iter_chunks(data: bytes | bytearray | memoryview) -> Iterator[RawChunk]:
    """Yield chunks in file order, raising at the first structural problem."""

    stream = SafeStream(data)
    while not stream.is_exhausted():
        offset = stream.tell()
        prefix = stream.take(CHUNK_PREFIX_SIZE)
        if prefix is None:
            raise IncompleteChunkPrefixError(stream.remaining, offset=offset)
        tag = bytes(prefix[:4])
        (length,) = struct.unpack(">I", prefix[4:])
        payload = stream.take(length)
        if payload is None:
            raise TruncatedChunkDataError(tag, length, stream.remaining, offset=offset)
        logger.debug("Chunk %r at offset %d (%d bytes)", tag, offset, length)
        yield RawChunk(tag=tag, length=length, data=payload, offset=offset)


def split_chunks(data: bytes | bytearray | memoryview) -> tuple[RawChunk, ...]:
    return tuple(iter_chunks(data))


__all__ = [
    "CHUNK_PREFIX_SIZE",
    "ChunkKind",
    "HEADER_TAG",
    "RawChunk",
    "TRACK_TAG",
    "iter_chunks",
    "split_chunks",
]
