"""Track chunk decoding with strict and lenient status-byte policies."""
from __future__ import annotations

import logging
from typing import List, Tuple

from .chunks import TRACK_TAG, RawChunk
from .errors import (
    InvalidStatusByteError,
    RunningStatusError,
    TruncatedEventError,
    UnexpectedChunkKindError,
)
from .events import (
    CHANNEL_STATUS_MAX,
    CHANNEL_STATUS_MIN,
    META_STATUS,
    SYSEX_CONTINUATION_STATUS,
    SYSEX_START_STATUS,
    ChannelVoiceEvent,
    EventKind,
    MetaEvent,
    SysExEvent,
    SysExVariant,
    TrackEvent,
    channel_data_length,
)
from .models import StatusBytePolicy, TrackDecodeResult, TrackIssue, sort_issues
from .streams import SafeStream

logger = logging.getLogger(__name__)


class StrictTrackDecoder:
    """Decode track bytes, failing on the first malformed position."""

    policy = StatusBytePolicy.STRICT

    def __init__(self, track_data: bytes | bytearray | memoryview, *, track_index: int = 0, base_offset: int = 0):
        self.stream = SafeStream(track_data, base_offset=base_offset)
        self.track_index = track_index
        self.tick = 0
        self._issues: List[TrackIssue] = []

    @classmethod
    def decode(cls, track_data: bytes | bytearray | memoryview, **kwargs) -> Tuple[TrackEvent, ...]:
        return cls.decode_with_report(track_data, **kwargs).events

    @classmethod
    def decode_with_report(
        cls, track_data: bytes | bytearray | memoryview, *, track_index: int = 0, base_offset: int = 0
    ) -> TrackDecodeResult:
        decoder = cls(track_data, track_index=track_index, base_offset=base_offset)
        events = decoder._decode()
        return TrackDecodeResult(events=events, issues=sort_issues(decoder._issues))

    def _decode(self) -> Tuple[TrackEvent, ...]:
        stream = self.stream
        events: List[TrackEvent] = []
        running_status: int | None = None

        while not stream.is_exhausted():
            delta = stream.read_varlen()
            self.tick += delta
            kind, running_status = self._decode_event(running_status)
            if kind is None:
                break
            events.append(TrackEvent(delta_time=delta, kind=kind))

        return tuple(events)

    def _decode_event(self, running_status: int | None) -> tuple[EventKind | None, int | None]:
        stream = self.stream
        skipped = False
        while True:
            status_offset = stream.absolute()
            status = stream.peek()
            if status is None:
                return self._on_missing_event(status_offset, skipped=skipped), running_status

            if status == META_STATUS:
                stream.advance()
                return self._read_meta(), None

            if status in (SYSEX_START_STATUS, SYSEX_CONTINUATION_STATUS):
                stream.advance()
                return self._read_sysex(SysExVariant(status)), None

            if CHANNEL_STATUS_MIN <= status <= CHANNEL_STATUS_MAX:
                stream.advance()
                return self._read_channel(status, running=False), status

            if status < CHANNEL_STATUS_MIN:
                if running_status is None:
                    raise RunningStatusError(status, offset=status_offset)
                return self._read_channel(running_status, running=True), running_status

            self._on_system_status(status, status_offset)
            skipped = True

    def _on_missing_event(self, offset: int, *, skipped: bool) -> EventKind | None:
        raise TruncatedEventError("Delta-time is not followed by an event.", offset=offset)

    def _on_system_status(self, status: int, offset: int) -> None:
        raise InvalidStatusByteError(status, offset=offset)

    def _read_meta(self) -> MetaEvent:
        stream = self.stream
        type_offset = stream.absolute()
        meta_type = stream.advance()
        if meta_type is None:
            raise TruncatedEventError("Meta event is missing its type byte.", offset=type_offset)
        payload = self._read_length_prefixed("meta event")
        return MetaEvent(meta_type=meta_type, data=payload)

    def _read_sysex(self, variant: SysExVariant) -> SysExEvent:
        return SysExEvent(variant=variant, data=self._read_length_prefixed("sysex event"))

    def _read_length_prefixed(self, what: str) -> bytes:
        stream = self.stream
        length = stream.read_varlen()
        payload_offset = stream.absolute()
        payload = stream.take(length)
        if payload is None:
            raise TruncatedEventError(
                f"Truncated {what} payload: need {length} byte(s), {stream.remaining} left.",
                offset=payload_offset,
            )
        return bytes(payload)

    def _read_channel(self, status: int, *, running: bool) -> ChannelVoiceEvent:
        stream = self.stream
        size = channel_data_length(status)
        data_offset = stream.absolute()
        data = stream.take(size)
        if data is None:
            raise TruncatedEventError(
                f"Channel event 0x{status:02X} needs {size} data byte(s), {stream.remaining} left.",
                offset=data_offset,
            )
        return ChannelVoiceEvent(status=status, data=bytes(data), running_status=running)


class LenientTrackDecoder(StrictTrackDecoder):
    """Skip stray System Common / Real-Time bytes instead of failing.

    The skipped byte does not touch running status, and the pending
    delta-time carries over to the next real event.  Every other malformed
    position still raises exactly as in strict mode.
    """

    policy = StatusBytePolicy.LENIENT

    def _record_issue(self, detail: str, offset: int) -> None:
        self._issues.append(
            TrackIssue(track_index=self.track_index, offset=offset, tick=self.tick, detail=detail)
        )

    def _on_system_status(self, status: int, offset: int) -> None:
        self.stream.advance()
        detail = f"Discarded system status byte 0x{status:02X}"
        logger.warning("Track %d: %s at offset %d", self.track_index, detail, offset)
        self._record_issue(detail, offset)

    def _on_missing_event(self, offset: int, *, skipped: bool) -> EventKind | None:
        if not skipped:
            return super()._on_missing_event(offset, skipped=skipped)
        self._record_issue("Dropped trailing delta-time without an event", offset)
        return None


_DECODERS = {
    StatusBytePolicy.STRICT: StrictTrackDecoder,
    StatusBytePolicy.LENIENT: LenientTrackDecoder,
}


def _track_payload(track: RawChunk | bytes | bytearray | memoryview) -> tuple[memoryview | bytes, int]:
    if isinstance(track, RawChunk):
        if track.tag != TRACK_TAG:
            raise UnexpectedChunkKindError(TRACK_TAG, track.tag)
        return track.data, track.data_offset
    return track, 0


def decode_track_with_report(
    track: RawChunk | bytes | bytearray | memoryview,
    *,
    policy: StatusBytePolicy | str = StatusBytePolicy.STRICT,
    track_index: int = 0,
) -> TrackDecodeResult:
    data, base_offset = _track_payload(track)
    decoder_cls = _DECODERS[StatusBytePolicy.coerce(policy)]
    return decoder_cls.decode_with_report(data, track_index=track_index, base_offset=base_offset)


def decode_track(
    track: RawChunk | bytes | bytearray | memoryview,
    *,
    policy: StatusBytePolicy | str = StatusBytePolicy.STRICT,
    track_index: int = 0,
) -> Tuple[TrackEvent, ...]:
    """Decode a track chunk (or its raw payload) into delta-time/event pairs."""

    return decode_track_with_report(track, policy=policy, track_index=track_index).events


__all__ = [
    "LenientTrackDecoder",
    "StrictTrackDecoder",
    "decode_track",
    "decode_track_with_report",
]
