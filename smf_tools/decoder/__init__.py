"""Public facade for the Standard MIDI File decoder."""

from .chunks import ChunkKind, RawChunk, iter_chunks, split_chunks
from .decoders import LenientTrackDecoder, StrictTrackDecoder, decode_track, decode_track_with_report
from .errors import (
    MalformedFieldError,
    MalformedVLQError,
    MidiDecodeError,
    ProtocolViolationError,
    ShapeMismatchError,
    TruncatedDataError,
)
from .events import ChannelVoiceEvent, MetaEvent, SysExEvent, SysExVariant, TrackEvent
from .header import (
    FramesPerSecond,
    HeaderChunk,
    MidiFormat,
    TicksPerQuarterNote,
    TimeCode,
    decode_header,
)
from .meta import decode_meta_event
from .models import DecodeReport, StatusBytePolicy, TrackDecodeResult, TrackIssue
from .reader import AlienChunk, MidiFile, TimedMetaMessage, TrackChunk, decode_midi, read_midi
from .streams import SafeStream

__all__ = [
    "AlienChunk",
    "ChannelVoiceEvent",
    "ChunkKind",
    "DecodeReport",
    "FramesPerSecond",
    "HeaderChunk",
    "LenientTrackDecoder",
    "MalformedFieldError",
    "MalformedVLQError",
    "MetaEvent",
    "MidiDecodeError",
    "MidiFile",
    "MidiFormat",
    "ProtocolViolationError",
    "RawChunk",
    "SafeStream",
    "ShapeMismatchError",
    "StatusBytePolicy",
    "StrictTrackDecoder",
    "SysExEvent",
    "SysExVariant",
    "TicksPerQuarterNote",
    "TimeCode",
    "TimedMetaMessage",
    "TrackChunk",
    "TrackDecodeResult",
    "TrackEvent",
    "TrackIssue",
    "TruncatedDataError",
    "decode_header",
    "decode_meta_event",
    "decode_midi",
    "decode_track",
    "decode_track_with_report",
    "iter_chunks",
    "read_midi",
    "split_chunks",
]
