from __future__ import annotations

from typing import Any

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from smf_tools.decoder import ChannelVoiceEvent, MidiDecodeError, StatusBytePolicy, decode_track_with_report

scenarios("features/track_decoding.feature")


@pytest.fixture
def track_context() -> dict[str, Any]:
    return {"policy": StatusBytePolicy.STRICT}


@given(parsers.parse('the track bytes "{hex_bytes}"'))
def track_bytes(track_context: dict[str, Any], hex_bytes: str) -> None:
    track_context["data"] = bytes.fromhex(hex_bytes)


@given("the lenient status policy")
def lenient_policy(track_context: dict[str, Any]) -> None:
    track_context["policy"] = StatusBytePolicy.LENIENT


@when("the track is decoded")
def decode(track_context: dict[str, Any]) -> None:
    try:
        track_context["result"] = decode_track_with_report(
            track_context["data"], policy=track_context["policy"]
        )
    except MidiDecodeError as exc:
        track_context["error"] = exc


@then(parsers.parse("{count:d} events are produced"))
def events_produced(track_context: dict[str, Any], count: int) -> None:
    assert "error" not in track_context, track_context.get("error")
    assert len(track_context["result"].events) == count


@then(parsers.parse("every channel event has status 0x{status:x}"))
def channel_status(track_context: dict[str, Any], status: int) -> None:
    kinds = [event.kind for event in track_context["result"].events]
    assert kinds
    assert all(isinstance(kind, ChannelVoiceEvent) and kind.status == status for kind in kinds)


@then(parsers.parse("{count:d} issues are reported"))
def issues_reported(track_context: dict[str, Any], count: int) -> None:
    assert len(track_context["result"].issues) == count


@then(parsers.parse("decoding fails with {error_name}"))
def decoding_fails(track_context: dict[str, Any], error_name: str) -> None:
    error = track_context.get("error")
    assert error is not None, "Expected decoding to fail"
    assert type(error).__name__ == error_name
