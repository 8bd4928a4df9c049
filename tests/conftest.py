"""Shared fixtures for the TRÅDFRI client tests."""
from __future__ import annotations

import json
from typing import Any

import pytest

from tradfri.transport import Response, ResponseHandler, Subscription


class FakeTransport:
    """In-memory transport recording writes and pushing observations."""

    def __init__(self) -> None:
        self.puts: list[tuple[str, dict[str, Any]]] = []
        self.put_result: Response | None = Response(success=True, payload="")
        self.put_error: Exception | None = None
        self.fail_subscribe = False
        self.subscribe_error: Exception | None = None
        self.subscriptions: list[tuple[Subscription, ResponseHandler]] = []

    async def subscribe(
        self, endpoint: str, handler: ResponseHandler
    ) -> Subscription | None:
        if self.subscribe_error is not None:
            raise self.subscribe_error
        if self.fail_subscribe:
            return None
        subscription = Subscription(endpoint)
        self.subscriptions.append((subscription, handler))
        return subscription

    async def cancel(self, subscription: Subscription) -> None:
        subscription.cancelled = True

    def is_cancelled(self, subscription: Subscription) -> bool:
        return subscription.cancelled

    async def put(self, endpoint: str, body: dict[str, Any]) -> Response | None:
        self.puts.append((endpoint, body))
        if self.put_error is not None:
            raise self.put_error
        return self.put_result

    def push(self, payload: Any, success: bool = True) -> None:
        subscription, handler = self.subscriptions[-1]
        assert not subscription.cancelled
        text = payload if isinstance(payload, str) else json.dumps(payload)
        handler(Response(success=success, payload=text))


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
