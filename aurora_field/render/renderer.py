"""Draw retained samples as filled circles sized in physical units."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence

import numpy as np
from matplotlib.collections import EllipseCollection
from matplotlib.transforms import IdentityTransform

from aurora_field.constants import BASE_RADIUS_M, MIN_SCREEN_RADIUS_PX, RADIUS_SPAN_M
from aurora_field.field.types import Sample

from .colors import DEFAULT_STOPS, ColorStop, build_color_stops, colors_for
from .projection import ViewTransform, physical_radius, screen_radius


@dataclass
class CircleBatch:
    """Screen-space circles for one frame.  Valid only for the view it was built from."""

    x: np.ndarray
    y: np.ndarray
    radius_px: np.ndarray
    rgba: np.ndarray
    samples: list[Sample] = field(default_factory=list)

    def __len__(self) -> int:
        return int(self.x.size)

    @classmethod
    def empty(cls) -> CircleBatch:
        z = np.empty(0, dtype=np.float64)
        return cls(z, z.copy(), z.copy(), np.empty((0, 4), dtype=np.float64))


class CircleSurface(Protocol):
    def clear(self) -> None: ...

    def fill_circles(self, batch: CircleBatch) -> None: ...


class FieldRenderer:
    """Project samples through a view transform and hand the circles to a surface.

    Nothing in screen space is cached: every call recomputes pixel radii from
    the physical radius and the view's current meters-per-pixel.
    """

    def __init__(
        self,
        *,
        boost: bool = True,
        min_radius_px: float = MIN_SCREEN_RADIUS_PX,
        base_radius_m: float = BASE_RADIUS_M,
        radius_span_m: float = RADIUS_SPAN_M,
        stops: Sequence[ColorStop] = DEFAULT_STOPS,
    ):
        self.boost = boost
        self.min_radius_px = float(min_radius_px)
        self.base_radius_m = float(base_radius_m)
        self.radius_span_m = float(radius_span_m)
        self.stops = tuple(stops)

    @classmethod
    def from_settings(cls, settings, *, boost: bool | None = None) -> FieldRenderer:
        """Build a renderer from a :class:`~aurora_field.config.RenderSettings`."""
        return cls(
            boost=settings.boost if boost is None else boost,
            min_radius_px=settings.min_screen_radius_px,
            base_radius_m=settings.base_radius_m,
            radius_span_m=settings.radius_span_m,
            stops=build_color_stops(settings.color_stops),
        )

    def project(self, samples: Sequence[Sample], view: ViewTransform) -> CircleBatch:
        if not samples:
            return CircleBatch.empty()

        n = len(samples)
        lon = np.fromiter((s.longitude for s in samples), dtype=np.float64, count=n)
        lat = np.fromiter((s.latitude for s in samples), dtype=np.float64, count=n)
        prob = np.fromiter((s.probability for s in samples), dtype=np.float64, count=n)

        radius_m = physical_radius(prob, base_m=self.base_radius_m, span_m=self.radius_span_m)
        radius_px = screen_radius(radius_m, lat, view)
        visible = np.isfinite(radius_px) & (radius_px > self.min_radius_px)
        if not visible.any():
            return CircleBatch.empty()

        x, y = view.to_pixels(lon[visible], lat[visible])
        rgba = colors_for(prob[visible], boost=self.boost, stops=self.stops)
        kept = [s for s, v in zip(samples, visible) if v]
        return CircleBatch(
            np.asarray(x, dtype=np.float64),
            np.asarray(y, dtype=np.float64),
            radius_px[visible],
            rgba,
            kept,
        )

    def draw(self, samples: Sequence[Sample], view: ViewTransform, surface: CircleSurface) -> int:
        """Replace the surface's circles with a fresh projection; return the number drawn."""
        batch = self.project(samples, view)
        surface.clear()
        if len(batch):
            surface.fill_circles(batch)
        return len(batch)


class MatplotlibSurface:
    """Draws a :class:`CircleBatch` onto an ``Axes`` as one pixel-space collection.

    Offsets and sizes are in display pixels, so the collection must be
    rebuilt whenever the axes limits or the canvas size change.
    """

    def __init__(self, ax, *, zorder: float = 3.0):
        self.ax = ax
        self.zorder = zorder
        self.collection: EllipseCollection | None = None

    def clear(self) -> None:
        if self.collection is not None:
            self.collection.remove()
            self.collection = None

    def fill_circles(self, batch: CircleBatch) -> None:
        diameters = 2.0 * batch.radius_px
        collection = EllipseCollection(
            diameters,
            diameters,
            np.zeros_like(diameters),
            units="dots",
            offsets=np.column_stack([batch.x, batch.y]),
            offset_transform=IdentityTransform(),
            facecolors=batch.rgba,
            edgecolors="none",
            linewidths=0.0,
            antialiased=True,
            zorder=self.zorder,
        )
        self.ax.add_collection(collection, autolim=False)
        self.collection = collection
