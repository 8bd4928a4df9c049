"""Sparse light property sets and their gateway payload mapping."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from tradfri import const

# Attribute code for every field, in the order changes are reported.
FIELD_KEYS: dict[str, str] = {
    "on": const.KEY_ON_OFF,
    "brightness": const.KEY_BRIGHTNESS,
    "color_hex": const.KEY_COLOR_HEX,
    "hue": const.KEY_HUE,
    "saturation": const.KEY_SATURATION,
    "color_x": const.KEY_COLOR_X,
    "color_y": const.KEY_COLOR_Y,
    "color_temperature": const.KEY_COLOR_TEMPERATURE,
    "transition_time": const.KEY_TRANSITION_TIME,
}

COLOR_MODES: dict[str, tuple[str, ...]] = {
    "hex": ("color_hex",),
    "hs": ("hue", "saturation"),
    "xy": ("color_x", "color_y"),
    "temperature": ("color_temperature",),
}


def color_mode_of(field: str) -> str | None:
    """Return the color mode ``field`` belongs to, if any."""
    for mode, fields in COLOR_MODES.items():
        if field in fields:
            return mode
    return None


@dataclass(frozen=True, slots=True)
class LightProperties:
    """A subset of a light's controllable attributes.

    ``None`` means "not set". Instances are immutable; use :meth:`merge` to
    derive a changed copy.
    """

    on: bool | None = None
    brightness: int | None = None
    color_hex: str | None = None
    hue: int | None = None
    saturation: int | None = None
    color_x: int | None = None
    color_y: int | None = None
    color_temperature: int | None = None
    transition_time: int | None = None

    def merge(self, changes: dict[str, Any]) -> LightProperties:
        return dataclasses.replace(self, **changes)

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in FIELD_KEYS)

    def to_payload(self) -> dict[str, Any]:
        """Return the gateway attribute dict, skipping unset fields."""
        payload: dict[str, Any] = {}
        for name, key in FIELD_KEYS.items():
            value = getattr(self, name)
            if value is None:
                continue
            if name == "on":
                value = int(value)
            payload[key] = value
        return payload


def decode_light_state(data: Any) -> dict[str, Any]:
    """Map a device payload to the light fields it actually contains.

    Attributes missing from the payload are left out of the result, while an
    explicit ``null`` is kept as ``None``.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    lights = data.get(const.KEY_LIGHT)
    if not isinstance(lights, list) or not lights or not isinstance(lights[0], dict):
        raise ValueError(f"Missing light state ({const.KEY_LIGHT})")
    state = lights[0]

    fields: dict[str, Any] = {}
    for name, key in FIELD_KEYS.items():
        if key not in state:
            continue
        value = state[key]
        if name == "on" and value is not None:
            value = bool(value)
        fields[name] = value
    return fields
