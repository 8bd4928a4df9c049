"""Transport layer between the light model and a TRÅDFRI gateway.

Observers and update queues only depend on the :class:`Transport` protocol.
:class:`GatewayBridgeTransport` implements it on top of aiohttp for a JSON
bridge in front of the gateway: observations arrive over a websocket and
writes are plain HTTP PUT requests.
"""
from __future__ import annotations

import asyncio
import itertools
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from aiohttp import ClientError, ClientSession, ClientTimeout, WSMsgType

from tradfri import config, const

_LOGGER = logging.getLogger(__name__)


class TradfriError(Exception):
    """Base error for the TRÅDFRI client."""


class TradfriTransportError(TradfriError):
    """Communication with the gateway failed."""


@dataclass(slots=True)
class Response:
    """A gateway response or pushed observation."""

    success: bool
    payload: str | None = None


@dataclass(slots=True, eq=False)
class Subscription:
    """Handle for an active observation."""

    endpoint: str
    cancelled: bool = False
    task: asyncio.Task[None] | None = None


ResponseHandler = Callable[[Response], None]


class Transport(Protocol):
    """What the client needs from a gateway connection."""

    async def subscribe(
        self, endpoint: str, handler: ResponseHandler
    ) -> Subscription | None:
        """Start pushing observations of ``endpoint`` to ``handler``."""

    async def cancel(self, subscription: Subscription) -> None:
        """Stop an observation."""

    def is_cancelled(self, subscription: Subscription) -> bool:
        """Return whether ``subscription`` is no longer delivering."""

    async def put(self, endpoint: str, body: dict[str, Any]) -> Response | None:
        """Write ``body`` to ``endpoint``.

        Return ``None`` on transport failure. Callers also treat a raised
        exception as a failed write.
        """


class GatewayBridgeTransport:
    """aiohttp transport for a JSON gateway bridge."""

    def __init__(
        self,
        host: str,
        port: int = const.DEFAULT_PORT,
        *,
        session: ClientSession | None = None,
        heartbeat: float | None = None,
        reconnect_delay: float | None = None,
        request_timeout: float = const.DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._host = host
        self._port = port
        self._session = session
        self._owns_session = session is None
        self._heartbeat = config.heartbeat() if heartbeat is None else heartbeat
        self._reconnect_delay = (
            config.reconnect_delay() if reconnect_delay is None else reconnect_delay
        )
        self._request_timeout = request_timeout
        self._tan = itertools.count(1)
        self._subscriptions: set[Subscription] = set()

    async def __aenter__(self) -> GatewayBridgeTransport:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def ws_url(self) -> str:
        return f"ws://{self._host}:{self._port}/ws"

    def endpoint_url(self, endpoint: str) -> str:
        return f"http://{self._host}:{self._port}/{endpoint.lstrip('/')}"

    def _get_session(self) -> ClientSession:
        if self._session is None or self._session.closed:
            self._session = ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Cancel all observations and close an owned session."""
        for subscription in list(self._subscriptions):
            await self.cancel(subscription)
        if self._owns_session and self._session is not None:
            await self._session.close()
        self._session = None

    async def subscribe(
        self, endpoint: str, handler: ResponseHandler
    ) -> Subscription | None:
        subscription = Subscription(endpoint)
        subscription.task = asyncio.create_task(
            self._observe_worker(subscription, handler)
        )
        self._subscriptions.add(subscription)
        return subscription

    async def cancel(self, subscription: Subscription) -> None:
        subscription.cancelled = True
        self._subscriptions.discard(subscription)
        task = subscription.task
        subscription.task = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def is_cancelled(self, subscription: Subscription) -> bool:
        return subscription.cancelled

    async def put(self, endpoint: str, body: dict[str, Any]) -> Response | None:
        url = self.endpoint_url(endpoint)
        try:
            async with self._get_session().put(
                url,
                json=body,
                timeout=ClientTimeout(total=self._request_timeout),
            ) as resp:
                text = await resp.text(errors="replace")
                if resp.status >= 400:
                    _LOGGER.debug("PUT %s returned %s: %s", url, resp.status, text)
                return Response(success=resp.status < 400, payload=text)
        except (ClientError, OSError, asyncio.TimeoutError) as err:
            _LOGGER.warning("PUT %s failed: %s", url, err)
            return None

    def _handle_text(self, endpoint: str, msg: str) -> Response | None:
        """Turn a bridge message into a :class:`Response` for ``endpoint``."""
        try:
            message = json.loads(msg)
        except json.JSONDecodeError:
            _LOGGER.debug("Gateway bridge returned non-JSON text: %s", msg)
            return None
        if not isinstance(message, dict):
            return None
        if message.get(const.KEY_COMMAND) != const.KEY_OBSERVE_UPDATE:
            _LOGGER.debug("Gateway bridge text: %s", msg)
            return None
        if message.get(const.KEY_ENDPOINT) not in (None, endpoint):
            return None

        error = message.get(const.KEY_ERROR)
        if error or not message.get(const.KEY_SUCCESS, True):
            return Response(success=False, payload=str(error) if error else None)
        payload = message.get(const.KEY_PAYLOAD)
        if payload is None:
            return Response(success=False)
        if not isinstance(payload, str):
            payload = json.dumps(payload)
        return Response(success=True, payload=payload)

    async def _observe_worker(
        self, subscription: Subscription, handler: ResponseHandler
    ) -> None:
        """Keep an observe websocket open and forward its updates."""
        endpoint = subscription.endpoint
        while not subscription.cancelled:
            try:
                async with self._get_session().ws_connect(
                    self.ws_url, heartbeat=self._heartbeat
                ) as ws:
                    _LOGGER.debug("Observing %s at %s", endpoint, self.ws_url)
                    await ws.send_json(
                        {
                            const.KEY_COMMAND: const.KEY_OBSERVE,
                            const.KEY_ENDPOINT: endpoint,
                            const.KEY_TAN: next(self._tan),
                        }
                    )
                    async for msg in ws:
                        if msg.type == WSMsgType.TEXT:
                            response = self._handle_text(endpoint, msg.data)
                            if response is not None:
                                handler(response)
                        elif msg.type == WSMsgType.CLOSED:
                            _LOGGER.warning(
                                "Observe connection for %s closed", endpoint
                            )
                            break
                        elif msg.type == WSMsgType.ERROR:
                            _LOGGER.warning(
                                "Observe websocket error for %s: %s",
                                endpoint,
                                ws.exception(),
                            )
                            break
            except asyncio.CancelledError:
                raise
            except Exception as err:  # pylint: disable=broad-except
                _LOGGER.error("Observe connection for %s failed: %s", endpoint, err)

            if subscription.cancelled:
                return

            _LOGGER.debug(
                "Observe worker for %s waiting %.1fs before reconnect",
                endpoint,
                self._reconnect_delay,
            )
            await asyncio.sleep(self._reconnect_delay)
