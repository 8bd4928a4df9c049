"""Color model conversions for TRÅDFRI lights.

The gateway accepts color in three forms: a named hex string, a hue and
saturation pair, or CIE 1931 xy chromaticity scaled to 0-65535. This module
converts between those forms and plain 8-bit RGB.

Brightness is a separate light attribute, so none of the conversions carry a
value/luminance component: RGB results are always at full brightness.
"""
from __future__ import annotations

import colorsys
from dataclasses import dataclass
from enum import Enum

from tradfri.const import MAX_COLOR_XY, MAX_HUE, MAX_SATURATION

Point = tuple[float, float]

# Wide gamut RGB D65 -> XYZ
_RGB_TO_XYZ = (
    (0.649926, 0.103455, 0.197109),
    (0.234327, 0.743075, 0.022598),
    (0.000000, 0.053077, 1.035763),
)

_D65_WHITE: Point = (0.3127, 0.3290)


def _invert(m: tuple[tuple[float, ...], ...]) -> tuple[tuple[float, ...], ...]:
    (a, b, c), (d, e, f), (g, h, i) = m
    det = a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g)
    return (
        ((e * i - f * h) / det, (c * h - b * i) / det, (b * f - c * e) / det),
        ((f * g - d * i) / det, (a * i - c * g) / det, (c * d - a * f) / det),
        ((d * h - e * g) / det, (b * g - a * h) / det, (a * e - b * d) / det),
    )


_XYZ_TO_RGB = _invert(_RGB_TO_XYZ)


@dataclass(frozen=True, slots=True)
class ColorRGB:
    """An 8-bit RGB color."""

    red: int
    green: int
    blue: int

    @classmethod
    def from_hex(cls, value: str) -> ColorRGB:
        """Parse a 6-digit hex string such as ``dc4b31`` or ``#dc4b31``."""
        value = value.removeprefix("#")
        if len(value) != 6:
            raise ValueError(f"Expected 6 hex digits, got {value!r}")
        return cls(int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))

    def to_hex(self) -> str:
        return "".join(
            f"{_clamp_channel(c):02x}" for c in (self.red, self.green, self.blue)
        )

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)


@dataclass(frozen=True, slots=True)
class ColorXY:
    """A chromaticity coordinate in gateway units (0-65535 per axis)."""

    x: int
    y: int

    @classmethod
    def from_rgb(cls, color: ColorRGB) -> ColorXY:
        return rgb_to_xy(color)

    def as_float(self) -> Point:
        """Return the coordinate in CIE 1931 units (0.0-1.0)."""
        return (self.x / MAX_COLOR_XY, self.y / MAX_COLOR_XY)


@dataclass(frozen=True, slots=True)
class Gamut:
    """Triangle of chromaticities a light can reproduce."""

    red: Point
    green: Point
    blue: Point

    def contains(self, point: Point) -> bool:
        d1 = _cross(point, self.red, self.green)
        d2 = _cross(point, self.green, self.blue)
        d3 = _cross(point, self.blue, self.red)
        has_neg = d1 < 0 or d2 < 0 or d3 < 0
        has_pos = d1 > 0 or d2 > 0 or d3 > 0
        return not (has_neg and has_pos)

    def clamp(self, point: Point) -> Point:
        """Return ``point`` or, when outside, the closest point on an edge."""
        if self.contains(point):
            return point
        candidates = (
            _closest_on_segment(self.red, self.green, point),
            _closest_on_segment(self.green, self.blue, point),
            _closest_on_segment(self.blue, self.red, point),
        )
        return min(candidates, key=lambda c: _distance_sq(c, point))


DEFAULT_GAMUT = Gamut(
    red=(0.6915, 0.3083),
    green=(0.1700, 0.7000),
    blue=(0.1532, 0.0475),
)


class ColorHex(str, Enum):
    """Named colors accepted by the gateway's hex attribute."""

    BLUE = "4a418a"
    LIGHT_BLUE = "6c83ba"
    SATURATED_PURPLE = "8f2686"
    LIME = "a9d62b"
    LIGHT_PURPLE = "c984bb"
    YELLOW = "d6e44b"
    SATURATED_PINK = "d9337c"
    DARK_PEACH = "da5d41"
    SATURATED_RED = "dc4b31"
    COLD_SKY = "dcf0f8"
    PINK = "e491af"
    PEACH = "e57345"
    WARM_AMBER = "e78834"
    LIGHT_PINK = "e8bedd"
    COOL_DAYLIGHT = "eaf6fb"
    CANDLELIGHT = "ebb63e"
    WARM_GLOW = "efd275"
    WARM_WHITE = "f1e0b5"
    SUNRISE = "f2eccf"
    COOL_WHITE = "f5faf6"


class ColorTemperatureHex(str, Enum):
    """Named white points for lights that only support color temperature."""

    COLD = "f5faf6"
    NORMAL = "f1e0b5"
    WARM = "efd275"


def _cross(p: Point, a: Point, b: Point) -> float:
    return (p[0] - b[0]) * (a[1] - b[1]) - (a[0] - b[0]) * (p[1] - b[1])


def _distance_sq(a: Point, b: Point) -> float:
    return (a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2


def _closest_on_segment(a: Point, b: Point, p: Point) -> Point:
    ab = (b[0] - a[0], b[1] - a[1])
    ap = (p[0] - a[0], p[1] - a[1])
    t = (ap[0] * ab[0] + ap[1] * ab[1]) / (ab[0] ** 2 + ab[1] ** 2)
    t = max(0.0, min(1.0, t))
    return (a[0] + t * ab[0], a[1] + t * ab[1])


def _clamp_channel(value: int) -> int:
    return max(0, min(255, int(value)))


def _gamma_expand(component: float) -> float:
    if component > 0.04045:
        return ((component + 0.055) / 1.055) ** 2.4
    return component / 12.92


def _gamma_compress(component: float) -> float:
    if component <= 0.0031308:
        return 12.92 * component
    return 1.055 * component ** (1 / 2.4) - 0.055


def _to_device(point: Point) -> ColorXY:
    return ColorXY(round(point[0] * MAX_COLOR_XY), round(point[1] * MAX_COLOR_XY))


def rgb_to_xy(color: ColorRGB, gamut: Gamut = DEFAULT_GAMUT) -> ColorXY:
    """Convert RGB to gateway xy, projected into ``gamut``."""
    linear = [
        _gamma_expand(_clamp_channel(c) / 255)
        for c in (color.red, color.green, color.blue)
    ]
    x_, y_, z_ = (sum(k * c for k, c in zip(row, linear)) for row in _RGB_TO_XYZ)
    total = x_ + y_ + z_
    if total == 0:
        return _to_device(gamut.clamp(_D65_WHITE))
    return _to_device(gamut.clamp((x_ / total, y_ / total)))


def xy_to_rgb(color: ColorXY, gamut: Gamut = DEFAULT_GAMUT) -> ColorRGB:
    """Convert gateway xy to RGB at full brightness."""
    x, y = gamut.clamp(color.as_float())
    if y <= 0:
        return ColorRGB(0, 0, 0)
    xyz = (x / y, 1.0, (1.0 - x - y) / y)
    linear = [max(0.0, sum(k * c for k, c in zip(row, xyz))) for row in _XYZ_TO_RGB]
    peak = max(linear)
    if peak > 0:
        linear = [c / peak for c in linear]
    r, g, b = (_clamp_channel(round(_gamma_compress(c) * 255)) for c in linear)
    return ColorRGB(r, g, b)


def hs_to_rgb(hue: int, saturation: int) -> ColorRGB:
    """Convert gateway hue (0-65535) and saturation (0-254) to RGB."""
    h = max(0, min(MAX_HUE, hue)) / MAX_HUE
    s = max(0, min(MAX_SATURATION, saturation)) / MAX_SATURATION
    r, g, b = colorsys.hsv_to_rgb(h, s, 1.0)
    return ColorRGB(round(r * 255), round(g * 255), round(b * 255))


def rgb_to_hs(color: ColorRGB) -> tuple[int, int]:
    """Convert RGB to gateway hue and saturation."""
    h, s, _ = colorsys.rgb_to_hsv(
        *(_clamp_channel(c) / 255 for c in (color.red, color.green, color.blue))
    )
    return round(h * MAX_HUE), round(s * MAX_SATURATION)
