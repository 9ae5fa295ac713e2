from .decoder import (
    MidiDecodeError,
    MidiFile,
    StatusBytePolicy,
    decode_header,
    decode_meta_event,
    decode_midi,
    decode_track,
    read_midi,
    split_chunks,
)

__all__ = [
    "MidiDecodeError",
    "MidiFile",
    "StatusBytePolicy",
    "decode_header",
    "decode_meta_event",
    "decode_midi",
    "decode_track",
    "read_midi",
    "split_chunks",
]
