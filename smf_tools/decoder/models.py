"""Decode policies and reporting models shared by the decoders."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .events import TrackEvent


class StatusBytePolicy(str, Enum):
    """How System Common / Real-Time bytes (0xF1-0xFE) inside a track are handled."""

    STRICT = "strict"
    LENIENT = "lenient"

    @classmethod
    def coerce(cls, value: "StatusBytePolicy | str") -> "StatusBytePolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unsupported status byte policy: {value}") from None


@dataclass(frozen=True)
class TrackIssue:
    """A recoverable problem skipped over while decoding a track."""

    track_index: int
    offset: int
    tick: int
    detail: str


@dataclass(frozen=True)
class TrackDecodeResult:
    """Decoded events together with any issues recorded on the way."""

    events: Tuple[TrackEvent, ...]
    issues: Tuple[TrackIssue, ...]


@dataclass(frozen=True)
class DecodeReport:
    """Aggregated outcome of a whole-file decode."""

    policy: StatusBytePolicy
    issues: Tuple[TrackIssue, ...]

    @property
    def clean(self) -> bool:
        return not self.issues


def sort_issues(issues) -> Tuple[TrackIssue, ...]:
    return tuple(
        sorted(issues, key=lambda issue: (issue.track_index, issue.offset, issue.tick, issue.detail))
    )


__all__ = [
    "DecodeReport",
    "StatusBytePolicy",
    "TrackDecodeResult",
    "TrackIssue",
    "sort_issues",
]
