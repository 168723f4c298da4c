"""Tabular export of a downsampled field."""

from __future__ import annotations

import os
from typing import Sequence

import numpy as np
import pandas as pd

from aurora_field.constants import BASE_RADIUS_M, RADIUS_SPAN_M
from aurora_field.field.types import DownsampledField, Hemisphere
from aurora_field.render.colors import DEFAULT_STOPS, ColorStop, colors_for
from aurora_field.render.projection import physical_radius

COLUMNS = [
    "hemisphere",
    "longitude",
    "latitude",
    "probability",
    "intensity",
    "red",
    "green",
    "blue",
    "alpha",
    "radius_m",
]


def field_to_frame(
    field: DownsampledField,
    *,
    stops: Sequence[ColorStop] = DEFAULT_STOPS,
    base_radius_m: float = BASE_RADIUS_M,
    radius_span_m: float = RADIUS_SPAN_M,
) -> pd.DataFrame:
    """One row per retained sample, northern hemisphere first.

    Colors are the unboosted values so the table is reproducible.
    """
    rows = []
    for hemisphere in (Hemisphere.NORTH, Hemisphere.SOUTH):
        for s in field.for_hemisphere(hemisphere):
            rows.append(
                (hemisphere.value, s.longitude, s.latitude, s.probability, s.intensity.value)
            )
    if not rows:
        return pd.DataFrame(columns=COLUMNS)

    frame = pd.DataFrame(
        rows, columns=["hemisphere", "longitude", "latitude", "probability", "intensity"]
    )
    prob = frame["probability"].to_numpy(dtype=np.float64)
    rgba = colors_for(prob, boost=False, stops=stops)
    frame["red"] = rgba[:, 0]
    frame["green"] = rgba[:, 1]
    frame["blue"] = rgba[:, 2]
    frame["alpha"] = rgba[:, 3]
    frame["radius_m"] = physical_radius(prob, base_m=base_radius_m, span_m=radius_span_m)
    return frame[COLUMNS]


def write_field_csv(field: DownsampledField, path: str | os.PathLike, **kwargs) -> int:
    """Write :func:`field_to_frame` to *path*; returns the number of rows."""
    frame = field_to_frame(field, **kwargs)
    frame.to_csv(path, index=False, float_format="%.6g")
    return len(frame)
