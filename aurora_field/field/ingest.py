"""Resolve raw feed tuples of unknown axis order into typed samples.

The OVATION feed documents ``[longitude, latitude, probability]`` but the
order is not guaranteed, and longitudes may come as ``0..360``.  The axis
order is inferred once for the whole document from the observed value ranges;
nothing outside this module ever sees an unresolved tuple.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from aurora_field.debug_utils import debug_print

from .types import AxisOrder, RawFieldEntry, Sample

# Documented OVATION convention, used when the ranges cannot decide.
DEFAULT_AXIS_ORDER = AxisOrder(latitude_index=1, longitude_index=0, ambiguous=True)


def normalize_longitude(value: float) -> float:
    """Map a ``0..360`` longitude onto ``-180..180``; other values pass through."""
    if 0.0 <= value <= 360.0:
        return value - 360.0 if value > 180.0 else value
    return value


def _coerce_entry(entry: RawFieldEntry) -> tuple[float, float, float] | None:
    try:
        if len(entry) < 3:
            return None
        values = (float(entry[0]), float(entry[1]), float(entry[2]))
    except (TypeError, ValueError):
        return None
    if not all(math.isfinite(v) for v in values):
        return None
    return values


def _well_formed(entries: Iterable[RawFieldEntry]) -> list[tuple[float, float, float]]:
    out = []
    for entry in entries:
        values = _coerce_entry(entry)
        if values is not None:
            out.append(values)
    return out


def _resolve(rows: Sequence[tuple[float, float, float]]) -> AxisOrder:
    if not rows:
        return DEFAULT_AXIS_ORDER
    idx0_is_lat = all(abs(row[0]) <= 90.0 for row in rows)
    idx1_is_lat = all(abs(row[1]) <= 90.0 for row in rows)
    if idx1_is_lat and not idx0_is_lat:
        return AxisOrder(latitude_index=1, longitude_index=0)
    if idx0_is_lat and not idx1_is_lat:
        return AxisOrder(latitude_index=0, longitude_index=1)
    return DEFAULT_AXIS_ORDER


def resolve_axes(entries: Iterable[RawFieldEntry]) -> AxisOrder:
    """Decide which of the first two fields holds latitude.

    A field is a latitude candidate when every observed value lies within
    ``[-90, 90]``.  If both or neither qualify the documented default is
    returned with ``ambiguous=True``; a field confined near the equator can
    therefore be misread.
    """
    return _resolve(_well_formed(entries))


def ingest(entries: Iterable[RawFieldEntry]) -> list[Sample]:
    """Turn raw feed entries into :class:`Sample` objects.

    Entries with fewer than three numeric fields, non-finite values or a
    probability ``<= 0`` are dropped.  An empty input yields an empty list.
    """
    raw = list(entries)
    rows = _well_formed(raw)
    if not rows:
        if raw:
            debug_print(f"ingest: no well-formed entries among {len(raw)} raw entries")
        return []

    order = _resolve(rows)
    debug_print(
        "ingest: index0 range {:.2f} .. {:.2f}, index1 range {:.2f} .. {:.2f}".format(
            min(r[0] for r in rows),
            max(r[0] for r in rows),
            min(r[1] for r in rows),
            max(r[1] for r in rows),
        )
    )
    if order.ambiguous:
        debug_print("ingest: ambiguous axis order, defaulting to index 1 as latitude")
    else:
        debug_print(f"ingest: detected index {order.latitude_index} as latitude")

    samples = []
    for row in rows:
        probability = row[2]
        if probability <= 0:
            continue
        samples.append(
            Sample(
                longitude=normalize_longitude(row[order.longitude_index]),
                latitude=row[order.latitude_index],
                probability=probability,
            )
        )

    dropped = len(raw) - len(rows)
    if dropped:
        debug_print(f"ingest: dropped {dropped} malformed entries")
    return samples
