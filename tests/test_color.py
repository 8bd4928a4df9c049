"""Tests for color conversions."""
from __future__ import annotations

import pytest

from tradfri.color import (
    DEFAULT_GAMUT,
    ColorHex,
    ColorRGB,
    ColorTemperatureHex,
    ColorXY,
    hs_to_rgb,
    rgb_to_hs,
    rgb_to_xy,
    xy_to_rgb,
)
from tradfri.const import MAX_COLOR_XY


def _assert_close(actual: ColorRGB, expected: ColorRGB, tolerance: int) -> None:
    for a, e in zip(actual.as_tuple(), expected.as_tuple()):
        assert abs(a - e) <= tolerance, (actual, expected)


def test_hs_to_rgb_full_saturation_red() -> None:
    assert hs_to_rgb(0, 254) == ColorRGB(255, 0, 0)


@pytest.mark.parametrize("hue", [0, 12000, 40000, 65535])
def test_hs_to_rgb_zero_saturation_is_gray(hue: int) -> None:
    color = hs_to_rgb(hue, 0)
    assert color.red == color.green == color.blue


def test_rgb_to_hs() -> None:
    assert rgb_to_hs(ColorRGB(255, 0, 0)) == (0, 254)
    assert rgb_to_hs(ColorRGB(0, 255, 0)) == (21845, 254)
    assert rgb_to_hs(ColorRGB(0, 0, 0)) == (0, 0)


def test_hs_round_trip() -> None:
    color = ColorRGB(255, 128, 0)
    _assert_close(hs_to_rgb(*rgb_to_hs(color)), color, 1)


@pytest.mark.parametrize(
    "color", [ColorRGB(255, 128, 64), ColorRGB(64, 128, 255), ColorRGB(255, 240, 230)]
)
def test_xy_round_trip_inside_gamut(color: ColorRGB) -> None:
    xy = rgb_to_xy(color)
    assert DEFAULT_GAMUT.contains(xy.as_float())
    _assert_close(xy_to_rgb(xy), color, 2)


def test_rgb_to_xy_out_of_gamut_clamps_to_boundary() -> None:
    red_vertex = ColorXY(
        round(DEFAULT_GAMUT.red[0] * MAX_COLOR_XY),
        round(DEFAULT_GAMUT.red[1] * MAX_COLOR_XY),
    )
    assert rgb_to_xy(ColorRGB(255, 0, 0)) == red_vertex


def test_gamut_clamp_projects_onto_edge() -> None:
    # Just outside the middle of the red-green edge.
    mid = (
        (DEFAULT_GAMUT.red[0] + DEFAULT_GAMUT.green[0]) / 2,
        (DEFAULT_GAMUT.red[1] + DEFAULT_GAMUT.green[1]) / 2,
    )
    outside = (mid[0] + 0.05, mid[1] + 0.05)
    assert not DEFAULT_GAMUT.contains(outside)
    clamped = DEFAULT_GAMUT.clamp(outside)
    assert clamped != outside
    assert clamped[0] == pytest.approx(mid[0], abs=0.05)
    assert clamped[1] == pytest.approx(mid[1], abs=0.05)


def test_gamut_clamp_keeps_inside_point() -> None:
    point = (0.35, 0.35)
    assert DEFAULT_GAMUT.clamp(point) == point


def test_rgb_to_xy_black_is_white_point() -> None:
    assert rgb_to_xy(ColorRGB(0, 0, 0)) == ColorXY(
        round(0.3127 * MAX_COLOR_XY), round(0.3290 * MAX_COLOR_XY)
    )


def test_rgb_to_xy_clamps_channels() -> None:
    assert rgb_to_xy(ColorRGB(300, -5, 0)) == rgb_to_xy(ColorRGB(255, 0, 0))


def test_color_xy_from_rgb() -> None:
    color = ColorRGB(255, 128, 64)
    assert ColorXY.from_rgb(color) == rgb_to_xy(color)


def test_hex_encode_decode() -> None:
    assert ColorRGB.from_hex("dc4b31") == ColorRGB(220, 75, 49)
    assert ColorRGB.from_hex("#dc4b31").to_hex() == "dc4b31"
    with pytest.raises(ValueError):
        ColorRGB.from_hex("abc")


def test_hex_palette_lookup() -> None:
    assert ColorHex("f5faf6") is ColorHex.COOL_WHITE
    assert ColorHex.SATURATED_RED.value == "dc4b31"
    assert ColorTemperatureHex.WARM.value == ColorHex.WARM_GLOW.value
    assert ColorTemperatureHex("f1e0b5") is ColorTemperatureHex.NORMAL
