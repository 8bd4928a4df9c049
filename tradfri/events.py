"""Device change events and their handler registry."""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

_LOGGER = logging.getLogger(__name__)


class EventKind(Enum):
    """Kinds of change an observer can report."""

    ON_OFF_CHANGED = "on_off_changed"
    BRIGHTNESS_CHANGED = "brightness_changed"
    HUE_CHANGED = "hue_changed"
    SATURATION_CHANGED = "saturation_changed"
    COLOR_X_CHANGED = "color_x_changed"
    COLOR_Y_CHANGED = "color_y_changed"
    COLOR_TEMPERATURE_CHANGED = "color_temperature_changed"
    DEVICE_ADDED = "device_added"
    DEVICE_REMOVED = "device_removed"


@dataclass(frozen=True, slots=True)
class DeviceEvent:
    """A single detected change.

    Attribute events carry the previous and current value. Gateway events
    carry the affected device in ``instance_id`` and leave ``old``/``new``
    unset.
    """

    kind: EventKind
    instance_id: int | None = None
    old: Any = None
    new: Any = None


EventHandler = Callable[[DeviceEvent], Any]


class EventDispatcher:
    """Ordered handler lists keyed by :class:`EventKind`."""

    def __init__(self) -> None:
        self._handlers: defaultdict[EventKind, list[EventHandler]] = defaultdict(list)

    def register(self, kind: EventKind, handler: EventHandler) -> None:
        """Append ``handler`` for ``kind``; the same handler may be added twice."""
        self._handlers[kind].append(handler)

    def handlers(self, kind: EventKind) -> list[EventHandler]:
        return list(self._handlers.get(kind, ()))

    def dispatch(self, event: DeviceEvent) -> None:
        """Call every handler for ``event.kind`` in registration order."""
        for handler in self.handlers(event.kind):
            try:
                handler(event)
            except Exception:  # pylint: disable=broad-except
                _LOGGER.exception(
                    "Error in %s handler %r", event.kind.value, handler
                )
