"""Summary statistics over a resolved field: visibility, local maxima, bounds."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from aurora_field.constants import VISIBILITY_THRESHOLD

from .types import AuroraIntensity, Hemisphere, Sample


def _arrays(samples: Sequence[Sample]) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    n = len(samples)
    lon = np.fromiter((s.longitude for s in samples), dtype=np.float64, count=n)
    lat = np.fromiter((s.latitude for s in samples), dtype=np.float64, count=n)
    prob = np.fromiter((s.probability for s in samples), dtype=np.float64, count=n)
    return lon, lat, prob


def hemisphere_samples(samples: Sequence[Sample], hemisphere: Hemisphere) -> list[Sample]:
    return [s for s in samples if Hemisphere.of(s.latitude) is hemisphere]


def visibility_latitude(
    samples: Sequence[Sample],
    hemisphere: Hemisphere,
    threshold: float = VISIBILITY_THRESHOLD,
) -> int | None:
    """Equatorward-most latitude (rounded, in degrees from the equator) where
    the probability reaches *threshold*.

    ``None`` when no sample in the hemisphere qualifies.
    """
    qualifying = [
        s.latitude
        for s in hemisphere_samples(samples, hemisphere)
        if s.probability >= threshold
    ]
    if not qualifying:
        return None
    if hemisphere is Hemisphere.NORTH:
        return int(round(min(qualifying)))
    return int(round(abs(max(qualifying))))


def max_probability_near(
    latitude: float,
    samples: Sequence[Sample],
    *,
    lat_window: float = 2.0,
) -> float:
    """Highest probability among samples within *lat_window* degrees of *latitude*."""
    if not samples:
        return 0.0
    _, lat, prob = _arrays(samples)
    mask = np.abs(lat - latitude) < lat_window
    return float(prob[mask].max()) if mask.any() else 0.0


def visibility_at(
    latitude: float,
    longitude: float,
    samples: Sequence[Sample],
    *,
    lat_window: float = 2.0,
    lon_window: float = 5.0,
) -> AuroraIntensity:
    """Intensity class of the strongest sample in a small box around a location."""
    if not samples:
        return AuroraIntensity.NONE
    lon, lat, prob = _arrays(samples)
    mask = (np.abs(lat - latitude) < lat_window) & (np.abs(lon - longitude) < lon_window)
    best = float(prob[mask].max()) if mask.any() else 0.0
    return AuroraIntensity.from_probability(best)


@dataclass(frozen=True)
class FieldBounds:
    south: float
    north: float
    west: float
    east: float

    @property
    def center(self) -> tuple[float, float]:
        """``(latitude, longitude)`` of the box center."""
        return ((self.south + self.north) / 2.0, (self.west + self.east) / 2.0)


def field_bounds(samples: Sequence[Sample]) -> FieldBounds | None:
    if not samples:
        return None
    lon, lat, _ = _arrays(samples)
    return FieldBounds(
        south=float(lat.min()),
        north=float(lat.max()),
        west=float(lon.min()),
        east=float(lon.max()),
    )


@dataclass(frozen=True)
class HemisphereSummary:
    hemisphere: Hemisphere
    count: int
    max_probability: float
    visibility_latitude: int | None


def summarize(
    samples: Sequence[Sample],
    hemisphere: Hemisphere,
    threshold: float = VISIBILITY_THRESHOLD,
) -> HemisphereSummary:
    own = hemisphere_samples(samples, hemisphere)
    return HemisphereSummary(
        hemisphere=hemisphere,
        count=len(own),
        max_probability=max((s.probability for s in own), default=0.0),
        visibility_latitude=visibility_latitude(own, hemisphere, threshold),
    )
