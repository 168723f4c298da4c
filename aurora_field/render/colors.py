"""Probability to color/opacity mapping shared by the renderer and the legend.

Eleven control colors sit at probability deciles and are linearly
interpolated.  Opacity stays within 0.12 .. 0.30 and overlapping circles
accumulate into a smooth field.  The optional *boost* multiplies
faint opacities by four for display on a dark background; the legend and
tabular exports use the unboosted value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from matplotlib.colors import LinearSegmentedColormap

from aurora_field.constants import (
    BASE_OPACITY,
    BOOST_FACTOR,
    BOOST_THRESHOLD,
    COLOR_STOPS,
    OPACITY_SPAN,
)

RGBA = tuple[float, float, float, float]


@dataclass(frozen=True)
class ColorStop:
    probability: float
    r: float
    g: float
    b: float

    @property
    def rgb(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)


def build_color_stops(rgb_values: Sequence[Sequence[float]] = COLOR_STOPS) -> tuple[ColorStop, ...]:
    """Place ``len(rgb_values)`` colors evenly over probability 0..100."""
    count = len(rgb_values)
    if count < 2:
        raise ValueError("At least two color stops are required")
    step = 100.0 / (count - 1)
    return tuple(
        ColorStop(i * step, float(r), float(g), float(b)) for i, (r, g, b) in enumerate(rgb_values)
    )


DEFAULT_STOPS = build_color_stops()


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def base_opacity(probability: float) -> float:
    p = min(max(float(probability), 0.0), 100.0) / 100.0
    return BASE_OPACITY + p * OPACITY_SPAN


def boost_opacity(alpha: float) -> float:
    if alpha < BOOST_THRESHOLD:
        return min(1.0, alpha * BOOST_FACTOR)
    return alpha


def color_for(
    probability: float,
    *,
    boost: bool = False,
    stops: Sequence[ColorStop] = DEFAULT_STOPS,
) -> RGBA:
    """Return ``(r, g, b, alpha)`` for a probability in percent."""
    prob = min(max(float(probability), 0.0), 100.0)
    p = prob / 100.0

    last = len(stops) - 1
    exact = p * last
    idx = int(math.floor(exact))
    frac = exact - idx
    lower = stops[min(max(idx, 0), last)]
    upper = stops[min(max(idx + 1, 0), last)]

    alpha = BASE_OPACITY + p * OPACITY_SPAN
    if boost:
        alpha = boost_opacity(alpha)
    return (
        _lerp(lower.r, upper.r, frac),
        _lerp(lower.g, upper.g, frac),
        _lerp(lower.b, upper.b, frac),
        alpha,
    )


def colors_for(
    probabilities,
    *,
    boost: bool = False,
    stops: Sequence[ColorStop] = DEFAULT_STOPS,
) -> np.ndarray:
    """Vectorized :func:`color_for`; returns an ``(N, 4)`` float array."""
    prob = np.clip(np.asarray(probabilities, dtype=np.float64).reshape(-1), 0.0, 100.0)
    p = prob / 100.0
    table = np.array([s.rgb for s in stops], dtype=np.float64)
    last = table.shape[0] - 1

    exact = p * last
    idx = np.floor(exact).astype(np.int64)
    frac = (exact - idx)[:, None]
    lower = table[np.clip(idx, 0, last)]
    upper = table[np.clip(idx + 1, 0, last)]

    out = np.empty((prob.size, 4), dtype=np.float64)
    out[:, :3] = lower + (upper - lower) * frac
    alpha = BASE_OPACITY + p * OPACITY_SPAN
    if boost:
        alpha = np.where(alpha < BOOST_THRESHOLD, np.minimum(1.0, alpha * BOOST_FACTOR), alpha)
    out[:, 3] = alpha
    return out


@dataclass(frozen=True)
class LegendEntry:
    label: str
    low: int
    high: int
    color: RGBA


def legend_entries(
    *,
    boost: bool = False,
    stops: Sequence[ColorStop] = DEFAULT_STOPS,
) -> list[LegendEntry]:
    """Ten 10-point bins colored at their midpoint."""
    entries = []
    for i in range(10):
        low = i * 10
        high = 100 if i == 9 else low + 10
        label = "0-10%" if i == 0 else f"{low}-{high}%"
        mid = low + (high - low) // 2
        entries.append(LegendEntry(label, low, high, color_for(mid, boost=boost, stops=stops)))
    return entries


def probability_colormap(
    stops: Sequence[ColorStop] = DEFAULT_STOPS,
    name: str = "aurora_probability",
) -> LinearSegmentedColormap:
    """Opaque matplotlib colormap over 0..1 (probability / 100) for colorbars."""
    return LinearSegmentedColormap.from_list(
        name, [(s.probability / 100.0, s.rgb) for s in stops]
    )
