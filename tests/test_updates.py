"""Tests for staged light updates."""
from __future__ import annotations

import pytest

from tradfri.properties import LightProperties
from tradfri.transport import Response, TradfriTransportError
from tradfri.updates import UpdateQueue

ENDPOINT = "15001/65537"


def _make_queue(transport) -> UpdateQueue:
    return UpdateQueue(ENDPOINT, transport)


def test_stage_hex_clears_hue_and_saturation(transport) -> None:
    queue = _make_queue(transport)
    queue.stage("hue", 1000)
    queue.stage("saturation", 200)
    queue.stage("color_hex", "f5faf6")
    assert queue.pending == LightProperties(color_hex="f5faf6")


def test_stage_same_mode_keeps_partner_field(transport) -> None:
    queue = _make_queue(transport)
    queue.stage("hue", 1000)
    queue.stage("saturation", 200)
    assert queue.pending == LightProperties(hue=1000, saturation=200)


def test_stage_xy_clears_temperature_and_hex(transport) -> None:
    queue = _make_queue(transport)
    queue.stage("color_temperature", 250)
    queue.stage("color_x", 30000)
    assert queue.pending == LightProperties(color_x=30000)
    queue.stage("color_hex", "efd275")
    assert queue.pending == LightProperties(color_hex="efd275")


def test_stage_non_color_fields_keep_color(transport) -> None:
    queue = _make_queue(transport)
    queue.stage("color_temperature", 250)
    queue.stage("brightness", 10)
    queue.stage("on", True)
    queue.stage("transition_time", 3)
    assert queue.pending == LightProperties(
        on=True, brightness=10, color_temperature=250, transition_time=3
    )


def test_stage_unknown_field(transport) -> None:
    queue = _make_queue(transport)
    with pytest.raises(ValueError):
        queue.stage("colour", 1)


@pytest.mark.asyncio
async def test_flush_sends_single_merged_update(transport) -> None:
    queue = _make_queue(transport)
    queue.stage("brightness", 100)
    queue.stage("on", True)
    assert await queue.flush() is True
    assert transport.puts == [(ENDPOINT, {"3311": [{"5850": 1, "5851": 100}]})]
    assert queue.pending.is_empty()


@pytest.mark.asyncio
async def test_flush_with_transition_time(transport) -> None:
    queue = _make_queue(transport)
    queue.stage("brightness", 100)
    assert await queue.flush(transition_time=10) is True
    assert transport.puts == [(ENDPOINT, {"3311": [{"5851": 100, "5712": 10}]})]


@pytest.mark.asyncio
async def test_flush_failure_still_resets(transport) -> None:
    transport.put_result = None
    queue = _make_queue(transport)
    queue.stage("brightness", 100)
    queue.stage("on", True)
    assert await queue.flush() is False
    assert len(transport.puts) == 1
    assert queue.pending.is_empty()


@pytest.mark.asyncio
async def test_flush_rejected_response(transport) -> None:
    transport.put_result = Response(success=False, payload="4.05")
    queue = _make_queue(transport)
    queue.stage("on", False)
    assert await queue.flush() is False
    assert queue.pending.is_empty()


@pytest.mark.asyncio
async def test_flush_transport_error_is_not_raised(transport) -> None:
    transport.put_error = TradfriTransportError("gateway unreachable")
    queue = _make_queue(transport)
    queue.stage("on", False)
    assert await queue.flush() is False
    assert queue.pending.is_empty()


@pytest.mark.asyncio
async def test_send_leaves_pending_alone(transport) -> None:
    queue = _make_queue(transport)
    queue.stage("hue", 5)
    assert await queue.send(LightProperties(on=True)) is True
    assert transport.puts == [(ENDPOINT, {"3311": [{"5850": 1}]})]
    assert queue.pending == LightProperties(hue=5)


@pytest.mark.asyncio
async def test_flush_unexpected_transport_fault_is_not_raised(transport) -> None:
    transport.put_error = ConnectionResetError("connection reset by peer")
    queue = _make_queue(transport)
    queue.stage("on", True)
    assert await queue.flush() is False
    assert len(transport.puts) == 1
    assert queue.pending.is_empty()
