from __future__ import annotations

import math

import numpy as np
import pytest

from aurora_field.field.types import Hemisphere
from aurora_field.render.projection import (
    EARTH_CIRCUMFERENCE_M,
    MercatorViewport,
    hemisphere_limits,
    mercator_latitude,
    mercator_xy,
    physical_radius,
    screen_radius,
)


class _FixedScaleView:
    """View with the same meters-per-pixel everywhere."""

    def __init__(self, mpp: float):
        self.mpp = mpp

    def meters_per_pixel(self, latitude):
        return np.full(np.shape(latitude), self.mpp, dtype=np.float64)

    def to_pixels(self, longitude, latitude):
        return np.asarray(longitude, dtype=np.float64), np.asarray(latitude, dtype=np.float64)


def test_physical_radius_endpoints_and_monotonicity() -> None:
    assert physical_radius(0) == 60_000
    assert physical_radius(100) == 110_000
    radii = physical_radius(np.linspace(0.0, 100.0, 101))
    assert np.all(np.diff(radii) > 0)


def test_screen_radius_uses_injected_scale() -> None:
    view = _FixedScaleView(1000.0)
    out = screen_radius(np.array([60_000.0, 110_000.0]), np.array([60.0, 70.0]), view)
    assert out == pytest.approx([60.0, 110.0])


def test_viewport_meters_per_pixel_at_equator() -> None:
    view = MercatorViewport(zoom=0.0)
    assert float(view.meters_per_pixel(0.0)) == pytest.approx(EARTH_CIRCUMFERENCE_M / 256.0)
    assert float(view.meters_per_pixel(60.0)) == pytest.approx(EARTH_CIRCUMFERENCE_M / 512.0)


def test_zooming_in_grows_screen_radius() -> None:
    view = MercatorViewport(zoom=3.0)
    base = float(screen_radius(physical_radius(50.0), 65.0, view))
    closer = float(screen_radius(physical_radius(50.0), 65.0, view.zoomed(4.0)))
    assert closer == pytest.approx(2.0 * base)


def test_same_radius_is_larger_on_screen_poleward() -> None:
    view = MercatorViewport(zoom=3.0)
    low, high = screen_radius(np.array([80_000.0, 80_000.0]), np.array([50.0, 75.0]), view)
    assert high > low


def test_viewport_center_maps_to_middle_of_canvas() -> None:
    view = MercatorViewport(center_longitude=10.0, center_latitude=65.0, zoom=2.0)
    x, y = view.to_pixels(10.0, 65.0)
    assert (float(x), float(y)) == pytest.approx((400.0, 300.0))
    x_east, _ = view.to_pixels(20.0, 65.0)
    _, y_north = view.to_pixels(10.0, 70.0)
    assert float(x_east) > 400.0
    assert float(y_north) < 300.0


def test_viewport_for_hemisphere() -> None:
    north = MercatorViewport.for_hemisphere(Hemisphere.NORTH, width_px=1024, height_px=512)
    south = MercatorViewport.for_hemisphere(Hemisphere.SOUTH, width_px=1024, height_px=512)
    assert north.center_latitude == 65.0
    assert south.center_latitude == -65.0
    assert north.zoom == pytest.approx(2.0)
    assert north.world_size_px == pytest.approx(1024.0)


def test_mercator_round_trip_latitude() -> None:
    _, y = mercator_xy(0.0, np.array([-60.0, 0.0, 45.0, 80.0]))
    assert mercator_latitude(y) == pytest.approx([-60.0, 0.0, 45.0, 80.0])


def test_mercator_clamps_polar_latitude() -> None:
    _, y_pole = mercator_xy(0.0, 90.0)
    assert math.isfinite(float(y_pole))


def test_hemisphere_limits_follow_canvas_aspect() -> None:
    xlim, ylim = hemisphere_limits(Hemisphere.NORTH, 1200, 600)
    assert xlim == pytest.approx((-EARTH_CIRCUMFERENCE_M / 2.0, EARTH_CIRCUMFERENCE_M / 2.0))
    assert ylim[1] - ylim[0] == pytest.approx(EARTH_CIRCUMFERENCE_M / 2.0)
    _, s_ylim = hemisphere_limits(Hemisphere.SOUTH, 1200, 600)
    assert s_ylim == pytest.approx((-ylim[1], -ylim[0]))
    _, y_top = mercator_xy(0.0, 85.05112878)
    assert ylim[1] <= float(y_top) + 1e-6
