"""Physical-radius to screen-radius projection on Web Mercator views.

A circle's size is defined on the ground (meters) and converted to pixels
with the view's meters-per-pixel at the sample's own latitude, because the
Mercator scale varies with latitude.  Views are injected through the
:class:`ViewTransform` protocol so the math can be exercised without a real
drawing surface.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Protocol

import numpy as np

from aurora_field.constants import (
    BASE_RADIUS_M,
    EARTH_RADIUS_M,
    HEMISPHERE_CENTER_LAT,
    MERCATOR_MAX_LAT,
    RADIUS_SPAN_M,
    TILE_SIZE_PX,
)
from aurora_field.field.types import Hemisphere

EARTH_CIRCUMFERENCE_M = 2.0 * math.pi * EARTH_RADIUS_M


class ViewTransform(Protocol):
    """Geographic-to-pixel mapping supplied by the host view on every draw."""

    def meters_per_pixel(self, latitude): ...

    def to_pixels(self, longitude, latitude): ...


def physical_radius(probability, *, base_m: float = BASE_RADIUS_M, span_m: float = RADIUS_SPAN_M):
    """Ground radius in meters: 60 km at probability 0 growing to 110 km at 100."""
    if isinstance(probability, np.ndarray):
        return base_m + probability.astype(np.float64) / 100.0 * span_m
    return base_m + float(probability) / 100.0 * span_m


def clamp_latitude(latitude):
    return np.clip(latitude, -MERCATOR_MAX_LAT, MERCATOR_MAX_LAT)


def mercator_xy(longitude, latitude) -> tuple[np.ndarray, np.ndarray]:
    """Project degrees to Web Mercator meters."""
    lon = np.radians(np.asarray(longitude, dtype=np.float64))
    lat = np.radians(clamp_latitude(np.asarray(latitude, dtype=np.float64)))
    x = EARTH_RADIUS_M * lon
    y = EARTH_RADIUS_M * np.log(np.tan(np.pi / 4.0 + lat / 2.0))
    return x, y


def mercator_latitude(y) -> np.ndarray:
    """Inverse of the ``y`` half of :func:`mercator_xy`, in degrees."""
    y = np.asarray(y, dtype=np.float64)
    return np.degrees(2.0 * np.arctan(np.exp(y / EARTH_RADIUS_M)) - np.pi / 2.0)


def screen_radius(radius_m, latitude, view: ViewTransform):
    """Convert a ground radius to pixels at *latitude* for the current *view*."""
    return np.asarray(radius_m, dtype=np.float64) / np.asarray(
        view.meters_per_pixel(latitude), dtype=np.float64
    )


@dataclass(frozen=True)
class MercatorViewport:
    """A slippy-map style viewport: center, fractional zoom and pixel size.

    Pixel coordinates grow right and down from the viewport's top-left
    corner.
    """

    center_longitude: float = 0.0
    center_latitude: float = 0.0
    zoom: float = 2.0
    width_px: int = 800
    height_px: int = 600
    tile_size: int = TILE_SIZE_PX

    @property
    def world_size_px(self) -> float:
        return self.tile_size * 2.0 ** self.zoom

    def _world_pixels(self, longitude, latitude) -> tuple[np.ndarray, np.ndarray]:
        x, y = mercator_xy(longitude, latitude)
        scale = self.world_size_px / EARTH_CIRCUMFERENCE_M
        return (x + EARTH_CIRCUMFERENCE_M / 2.0) * scale, (EARTH_CIRCUMFERENCE_M / 2.0 - y) * scale

    def meters_per_pixel(self, latitude):
        lat = np.radians(clamp_latitude(np.asarray(latitude, dtype=np.float64)))
        return EARTH_CIRCUMFERENCE_M * np.cos(lat) / self.world_size_px

    def to_pixels(self, longitude, latitude) -> tuple[np.ndarray, np.ndarray]:
        px, py = self._world_pixels(longitude, latitude)
        cx, cy = self._world_pixels(self.center_longitude, self.center_latitude)
        return px - cx + self.width_px / 2.0, py - cy + self.height_px / 2.0

    def zoomed(self, zoom: float) -> MercatorViewport:
        return replace(self, zoom=float(zoom))

    def centered(self, longitude: float, latitude: float) -> MercatorViewport:
        return replace(self, center_longitude=float(longitude), center_latitude=float(latitude))

    @classmethod
    def for_hemisphere(
        cls, hemisphere: Hemisphere, width_px: int = 800, height_px: int = 600
    ) -> MercatorViewport:
        """Frame a hemisphere's auroral zone with the whole globe's width in view."""
        lat = HEMISPHERE_CENTER_LAT if hemisphere is Hemisphere.NORTH else -HEMISPHERE_CENTER_LAT
        zoom = math.log2(max(width_px, 1) / TILE_SIZE_PX)
        return cls(0.0, lat, zoom, width_px, height_px)


class AxesViewTransform:
    """View transform for a matplotlib ``Axes`` whose data units are Web Mercator meters.

    Reads the axes' current limits and pixel size, so a fresh instance (or a
    fresh call) reflects every pan, zoom and resize.
    """

    def __init__(self, ax):
        self.ax = ax

    def data_per_pixel(self) -> float:
        x0, x1 = self.ax.get_xlim()
        width = self.ax.bbox.width
        if width <= 0:
            return math.inf
        return abs(x1 - x0) / width

    def meters_per_pixel(self, latitude):
        lat = np.radians(clamp_latitude(np.asarray(latitude, dtype=np.float64)))
        return self.data_per_pixel() * np.cos(lat)

    def to_pixels(self, longitude, latitude) -> tuple[np.ndarray, np.ndarray]:
        x, y = mercator_xy(longitude, latitude)
        pts = self.ax.transData.transform(np.column_stack([np.ravel(x), np.ravel(y)]))
        return pts[:, 0], pts[:, 1]


def hemisphere_limits(
    hemisphere: Hemisphere,
    width_px: float,
    height_px: float,
) -> tuple[tuple[float, float], tuple[float, float]]:
    """Mercator ``(xlim, ylim)`` spanning all longitudes at a uniform scale.

    The vertical extent follows the canvas aspect ratio and is centered on
    the hemisphere's auroral zone, shifted equatorward if it would cross the
    Mercator latitude limit.
    """
    half = EARTH_CIRCUMFERENCE_M / 2.0
    y_span = 2.0 * half * float(height_px) / max(float(width_px), 1.0)
    _, y_max = mercator_xy(0.0, MERCATOR_MAX_LAT)
    _, y_center = mercator_xy(0.0, HEMISPHERE_CENTER_LAT)
    top = min(float(y_center) + y_span / 2.0, float(y_max))
    bottom = top - y_span
    if hemisphere is Hemisphere.NORTH:
        return (-half, half), (bottom, top)
    return (-half, half), (-top, -bottom)
