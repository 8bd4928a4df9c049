"""Staged light updates sent to the gateway as one request."""
from __future__ import annotations

import logging
from typing import Any

from tradfri import const
from tradfri.properties import COLOR_MODES, FIELD_KEYS, LightProperties, color_mode_of
from tradfri.transport import Transport

_LOGGER = logging.getLogger(__name__)


class UpdateQueue:
    """Collects partial property changes for one light.

    Staging is synchronous and not locked: if several tasks or threads stage
    on the same queue, the last write to a field wins and a flush may send a
    mix of their changes. Coordinating that is up to the caller.
    """

    def __init__(self, endpoint: str, transport: Transport) -> None:
        self._endpoint = endpoint
        self._transport = transport
        self._pending = LightProperties()

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def pending(self) -> LightProperties:
        return self._pending

    def stage(self, field: str, value: Any) -> None:
        """Set ``field`` on the pending update.

        A color field clears the fields of every other color mode, so at
        most one color representation is ever sent.
        """
        if field not in FIELD_KEYS:
            raise ValueError(f"Unknown light property: {field}")
        changes: dict[str, Any] = {field: value}
        mode = color_mode_of(field)
        if mode is not None:
            for other, fields in COLOR_MODES.items():
                if other != mode:
                    changes.update(dict.fromkeys(fields))
        self._pending = self._pending.merge(changes)

    async def flush(self, transition_time: int | None = None) -> bool:
        """Send all staged changes and start over with an empty update.

        The staged changes are dropped even when sending fails.
        """
        if transition_time is not None:
            self.stage("transition_time", transition_time)
        pending, self._pending = self._pending, LightProperties()
        return await self.send(pending)

    async def send(self, properties: LightProperties) -> bool:
        """Send ``properties`` directly, leaving the staged update alone."""
        body = {const.KEY_LIGHT: [properties.to_payload()]}
        try:
            response = await self._transport.put(self._endpoint, body)
        except Exception as err:  # pylint: disable=broad-except
            _LOGGER.warning("Update of %s failed: %s", self._endpoint, err)
            return False
        if response is None:
            _LOGGER.warning("Update of %s failed: no response", self._endpoint)
            return False
        if not response.success:
            _LOGGER.warning(
                "Update of %s rejected: %s", self._endpoint, response.payload
            )
            return False
        return True
