"""Facade decoding a whole SMF buffer into header, track and alien chunks."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Union

from app.config import get_decoder_config

from .chunks import ChunkKind, RawChunk, iter_chunks
from .decoders import decode_track_with_report
from .errors import MidiDecodeError
from .events import MetaEvent, TrackEvent
from .header import HeaderChunk, decode_header
from .meta import EndOfTrack, MetaMessage, SetTempo, decode_meta_event
from .models import DecodeReport, StatusBytePolicy, TrackIssue, sort_issues

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimedMetaMessage:
    """Interpreted meta event positioned at an absolute tick."""

    tick: int
    message: MetaMessage


@dataclass(frozen=True)
class TrackChunk:
    events: Tuple[TrackEvent, ...]
    meta_messages: Tuple[TimedMetaMessage, ...]

    @property
    def has_end_of_track(self) -> bool:
        return bool(self.meta_messages) and isinstance(self.meta_messages[-1].message, EndOfTrack)

    def tempo_changes(self) -> List[Tuple[int, SetTempo]]:
        return [(timed.tick, timed.message) for timed in self.meta_messages if isinstance(timed.message, SetTempo)]


@dataclass(frozen=True)
class AlienChunk:
    """Chunk with an unrecognised tag, kept verbatim."""

    tag: bytes
    data: bytes


DecodedChunk = Union[HeaderChunk, TrackChunk, AlienChunk]


@dataclass(frozen=True)
class MidiFile:
    """Decoded contents of a Standard MIDI File, in file order."""

    chunks: Tuple[DecodedChunk, ...]
    report: DecodeReport

    @property
    def header(self) -> HeaderChunk | None:
        for chunk in self.chunks:
            if isinstance(chunk, HeaderChunk):
                return chunk
        return None

    @property
    def tracks(self) -> Tuple[TrackChunk, ...]:
        return tuple(chunk for chunk in self.chunks if isinstance(chunk, TrackChunk))

    @property
    def alien_chunks(self) -> Tuple[AlienChunk, ...]:
        return tuple(chunk for chunk in self.chunks if isinstance(chunk, AlienChunk))


def build_track_chunk(events: Tuple[TrackEvent, ...]) -> TrackChunk:
    """Interpret every meta event of a decoded track, tracking absolute ticks."""

    tick = 0
    timed: List[TimedMetaMessage] = []
    for event in events:
        tick += event.delta_time
        if isinstance(event.kind, MetaEvent):
            timed.append(TimedMetaMessage(tick=tick, message=decode_meta_event(event.kind)))
    return TrackChunk(events=events, meta_messages=tuple(timed))


def _decode_chunk(
    chunk: RawChunk, *, policy: StatusBytePolicy, track_index: int
) -> tuple[DecodedChunk, Tuple[TrackIssue, ...]]:
    kind = chunk.kind
    if kind is ChunkKind.HEADER:
        return decode_header(chunk), ()
    if kind is ChunkKind.TRACK:
        result = decode_track_with_report(chunk, policy=policy, track_index=track_index)
        return build_track_chunk(result.events), result.issues
    logger.debug("Passing through alien chunk %r (%d bytes)", chunk.tag, chunk.length)
    return AlienChunk(tag=chunk.tag, data=chunk.to_owned()), ()


def decode_midi(
    data: bytes | bytearray | memoryview, *, policy: StatusBytePolicy | str | None = None
) -> MidiFile:
    """Decode an in-memory SMF buffer.

    The buffer is only borrowed while decoding; everything in the returned
    :class:`MidiFile` owns its bytes.  The first error aborts the decode and
    carries the index of the chunk it came from in ``chunk_index``.
    """

    resolved = StatusBytePolicy.coerce(policy if policy is not None else get_decoder_config().status_policy)

    decoded: List[DecodedChunk] = []
    issues: List[TrackIssue] = []
    track_index = 0
    try:
        for chunk in iter_chunks(data):
            result, chunk_issues = _decode_chunk(chunk, policy=resolved, track_index=track_index)
            if isinstance(result, TrackChunk):
                track_index += 1
            decoded.append(result)
            issues.extend(chunk_issues)
    except MidiDecodeError as exc:
        exc.chunk_index = len(decoded)
        raise

    midi = MidiFile(chunks=tuple(decoded), report=DecodeReport(policy=resolved, issues=sort_issues(issues)))
    header = midi.header
    if header is not None and header.tracks_count != len(midi.tracks):
        logger.info(
            "Header declares %d track(s) but %d track chunk(s) were found",
            header.tracks_count,
            len(midi.tracks),
        )
    return midi


def read_midi(path: str | Path, *, policy: StatusBytePolicy | str | None = None) -> MidiFile:
    """Read ``path`` into memory and decode it."""

    file_path = Path(path)
    data = file_path.read_bytes()
    logger.info("Decoding MIDI file %s (%d bytes)", file_path, len(data))
    return decode_midi(data, policy=policy)


__all__ = [
    "AlienChunk",
    "DecodedChunk",
    "MidiFile",
    "TimedMetaMessage",
    "TrackChunk",
    "build_track_chunk",
    "decode_midi",
    "read_midi",
]
