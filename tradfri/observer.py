"""Observers that turn gateway observations into device events."""
from __future__ import annotations

import abc
import asyncio
import json
import logging
from typing import Any, Iterable

from tradfri import config, const
from tradfri.events import DeviceEvent, EventDispatcher, EventHandler, EventKind
from tradfri.properties import LightProperties, decode_light_state
from tradfri.transport import Response, Subscription, Transport

_LOGGER = logging.getLogger(__name__)

# Tracked light fields in reporting order. color_hex has no event of its own.
_LIGHT_FIELD_EVENTS: dict[str, EventKind | None] = {
    "on": EventKind.ON_OFF_CHANGED,
    "brightness": EventKind.BRIGHTNESS_CHANGED,
    "color_hex": None,
    "hue": EventKind.HUE_CHANGED,
    "saturation": EventKind.SATURATION_CHANGED,
    "color_x": EventKind.COLOR_X_CHANGED,
    "color_y": EventKind.COLOR_Y_CHANGED,
    "color_temperature": EventKind.COLOR_TEMPERATURE_CHANGED,
}


def has_changed(old: Any, new: Any) -> bool:
    """Null-aware inequality: two ``None`` values are equal."""
    if old is None or new is None:
        return old is not new
    return old != new


class Observer(abc.ABC):
    """Observe one gateway endpoint and dispatch events for its changes.

    Notifications are queued and handled one at a time by a single consumer
    task, each after ``delay`` seconds so the echo of a write we just issued
    has settled. Handlers therefore run on that task, not on the caller's.
    """

    def __init__(
        self,
        endpoint: str,
        transport: Transport,
        *,
        delay: float | None = None,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._transport = transport
        self._delay = config.observe_delay() if delay is None else delay
        self._dispatcher = dispatcher if dispatcher is not None else EventDispatcher()
        self._subscription: Subscription | None = None
        self._queue: asyncio.Queue[tuple[float, str]] | None = None
        self._worker: asyncio.Task[None] | None = None

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def dispatcher(self) -> EventDispatcher:
        return self._dispatcher

    @property
    def observing(self) -> bool:
        return self._subscription is not None and not self._transport.is_cancelled(
            self._subscription
        )

    def register(self, kind: EventKind, handler: EventHandler) -> None:
        self._dispatcher.register(kind, handler)

    async def start(self) -> bool:
        """Start observing; ``False`` if already observing or subscribing failed."""
        if self.observing:
            return False
        await self._stop_worker()
        self._subscription = None
        self._queue = asyncio.Queue()
        try:
            subscription = await self._transport.subscribe(
                self._endpoint, self._on_response
            )
        except Exception:  # pylint: disable=broad-except
            _LOGGER.exception("Error subscribing to %s", self._endpoint)
            subscription = None
        if subscription is None:
            _LOGGER.warning("Could not observe %s", self._endpoint)
            self._queue = None
            return False
        self._subscription = subscription
        self._worker = asyncio.create_task(self._consume(self._queue))
        return True

    async def stop(self) -> bool:
        """Stop observing; notifications still waiting are discarded."""
        if not self.observing:
            self._subscription = None
            await self._stop_worker()
            return False
        subscription, self._subscription = self._subscription, None
        await self._transport.cancel(subscription)
        await self._stop_worker()
        return True

    async def _stop_worker(self) -> None:
        worker, self._worker = self._worker, None
        self._queue = None
        if worker is None:
            return
        worker.cancel()
        try:
            await worker
        except asyncio.CancelledError:
            pass

    def _on_response(self, response: Response) -> None:
        """Queue a pushed observation; called by the transport."""
        queue = self._queue
        if queue is None:
            return
        if not response.success or response.payload is None:
            _LOGGER.debug(
                "Dropping error observation of %s: %s",
                self._endpoint,
                response.payload,
            )
            return
        due = asyncio.get_running_loop().time() + self._delay
        queue.put_nowait((due, response.payload))

    async def _consume(self, queue: asyncio.Queue[tuple[float, str]]) -> None:
        loop = asyncio.get_running_loop()
        while True:
            due, payload = await queue.get()
            try:
                remaining = due - loop.time()
                if remaining > 0:
                    await asyncio.sleep(remaining)
                self._process(payload)
            except Exception:  # pylint: disable=broad-except
                _LOGGER.exception("Error handling observation of %s", self._endpoint)
            finally:
                queue.task_done()

    def _process(self, payload: str) -> None:
        try:
            data = json.loads(payload)
        except json.JSONDecodeError:
            _LOGGER.debug("Dropping non-JSON observation of %s", self._endpoint)
            return
        try:
            events = self._diff(data)
        except ValueError as err:
            _LOGGER.debug(
                "Dropping malformed observation of %s: %s", self._endpoint, err
            )
            return
        for event in events:
            self._dispatcher.dispatch(event)

    @abc.abstractmethod
    def _diff(self, data: Any) -> list[DeviceEvent]:
        """Update the cached state from ``data`` and return the changes.

        Raise ``ValueError`` for payloads that cannot be understood; the
        cached state must then be left untouched.
        """


class LightObserver(Observer):
    """Reports attribute changes of a single light."""

    def __init__(
        self,
        instance_id: int,
        transport: Transport,
        *,
        properties: LightProperties | None = None,
        delay: float | None = None,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        super().__init__(
            const.device_endpoint(instance_id),
            transport,
            delay=delay,
            dispatcher=dispatcher,
        )
        self._instance_id = instance_id
        self._snapshot = properties if properties is not None else LightProperties()

    @property
    def instance_id(self) -> int:
        return self._instance_id

    @property
    def snapshot(self) -> LightProperties:
        return self._snapshot

    def _diff(self, data: Any) -> list[DeviceEvent]:
        fields = decode_light_state(data)
        changes: dict[str, Any] = {}
        events: list[DeviceEvent] = []
        for name, kind in _LIGHT_FIELD_EVENTS.items():
            if name not in fields:
                continue
            old = getattr(self._snapshot, name)
            new = fields[name]
            if not has_changed(old, new):
                continue
            changes[name] = new
            if kind is not None:
                events.append(DeviceEvent(kind, self._instance_id, old, new))
        if changes:
            self._snapshot = self._snapshot.merge(changes)
        return events


class GatewayObserver(Observer):
    """Reports devices joining or leaving the gateway."""

    def __init__(
        self,
        transport: Transport,
        *,
        instance_ids: Iterable[int] | None = None,
        delay: float | None = None,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        super().__init__(
            const.ENDPOINT_DEVICES, transport, delay=delay, dispatcher=dispatcher
        )
        self._instance_ids = None if instance_ids is None else frozenset(instance_ids)

    @property
    def instance_ids(self) -> frozenset[int] | None:
        return self._instance_ids

    def _diff(self, data: Any) -> list[DeviceEvent]:
        if not isinstance(data, list) or not all(
            isinstance(i, int) and not isinstance(i, bool) for i in data
        ):
            raise ValueError("Expected a list of instance ids")
        current = frozenset(data)
        previous, self._instance_ids = self._instance_ids, current
        if previous is None:
            return []
        events = [
            DeviceEvent(EventKind.DEVICE_ADDED, instance_id)
            for instance_id in sorted(current - previous)
        ]
        events.extend(
            DeviceEvent(EventKind.DEVICE_REMOVED, instance_id)
            for instance_id in sorted(previous - current)
        )
        return events
