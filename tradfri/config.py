"""Environment overrides for observer and transport defaults."""
from __future__ import annotations

import logging
import os

from tradfri import const

_LOGGER = logging.getLogger(__name__)

OBSERVE_DELAY_ENV = "TRADFRI_OBSERVE_DELAY"
RECONNECT_DELAY_ENV = "TRADFRI_RECONNECT_DELAY"
HEARTBEAT_ENV = "TRADFRI_HEARTBEAT"


def env_float(name: str, default: float) -> float:
    """Return a non-negative float from the environment, or ``default``."""
    val = os.environ.get(name)
    if val is None or not val.strip():
        return default
    try:
        number = float(val.strip())
    except ValueError:
        _LOGGER.warning("Invalid %s=%s; defaulting to %s", name, val, default)
        return default
    if number < 0:
        _LOGGER.warning("Negative %s=%s; defaulting to %s", name, val, default)
        return default
    return number


def observe_delay() -> float:
    return env_float(OBSERVE_DELAY_ENV, const.DEFAULT_OBSERVE_DELAY)


def reconnect_delay() -> float:
    return env_float(RECONNECT_DELAY_ENV, const.DEFAULT_RECONNECT_DELAY)


def heartbeat() -> float:
    return env_float(HEARTBEAT_ENV, const.DEFAULT_HEARTBEAT)
