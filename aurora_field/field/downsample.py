"""Budget-bounded, probability-biased spatial downsampling per hemisphere.

The raw OVATION field holds tens of thousands of points.  Each hemisphere is
reduced independently:

1. samples below ``min_probability`` are dropped;
2. if what remains fits in ``target_count`` it is returned untouched;
3. otherwise samples are binned on a 2.5 deg x 6 deg lat/lon grid (cells are
   elongated in longitude to offset meridian convergence near the poles) and
   each cell keeps its ``max(1, target_count // cells)`` most probable
   samples;
4. if the ``max(1, ...)`` floor still overshoots the budget, the survivors
   are sorted by probability and truncated to exactly ``target_count``.

All sorts break probability ties by input order, so a given input sequence
always yields the same output.
"""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

import numpy as np
from numba import njit

from aurora_field.constants import DEFAULT_MIN_PROBABILITY, POLE_EPSILON_DEG
from aurora_field.debug_utils import debug_print, debug_timer

from .ingest import ingest
from .types import DownsampledField, GridSpec, Hemisphere, RawFieldEntry, Sample

CancelCheck = Callable[[], bool]

DEFAULT_GRID = GridSpec()

# Offset keeping longitude band indices positive when packed into one key.
_LON_KEY_OFFSET = 1 << 31


@njit
def _rank_within_cells(sorted_cells):
    """Return each element's position inside its run of equal cell ids."""
    n = sorted_cells.shape[0]
    ranks = np.empty(n, dtype=np.int64)
    rank = 0
    for i in range(n):
        if i > 0 and sorted_cells[i] == sorted_cells[i - 1]:
            rank += 1
        else:
            rank = 0
        ranks[i] = rank
    return ranks


def _is_cancelled(cancelled: CancelCheck | None) -> bool:
    return cancelled is not None and bool(cancelled())


def cell_indices(latitudes: np.ndarray, longitudes: np.ndarray, grid: GridSpec = DEFAULT_GRID):
    """Return ``(cell_index, n_cells)`` for parallel latitude/longitude arrays.

    ``cell_index`` numbers the non-empty cells ``0 .. n_cells - 1``.
    """
    lat_band = np.floor(np.asarray(latitudes, dtype=np.float64) / grid.lat_deg).astype(np.int64)
    lon_band = np.floor(np.asarray(longitudes, dtype=np.float64) / grid.lon_deg).astype(np.int64)
    keys = (lat_band << 32) + (lon_band + _LON_KEY_OFFSET)
    unique_keys, inverse = np.unique(keys, return_inverse=True)
    return inverse.reshape(-1).astype(np.int64), int(unique_keys.size)


def sample_hemisphere(
    samples: Sequence[Sample],
    target_count: int,
    min_probability: float = DEFAULT_MIN_PROBABILITY,
    *,
    grid: GridSpec = DEFAULT_GRID,
    cancelled: CancelCheck | None = None,
) -> list[Sample] | None:
    """Select at most *target_count* samples from one hemisphere.

    Returns ``None`` when *cancelled* reports true at one of the checkpoints
    (after partitioning, and after per-cell selection ahead of the global
    trim).
    """
    if target_count < 1:
        raise ValueError(f"target_count must be >= 1, got {target_count}")

    filtered = [s for s in samples if s.probability >= min_probability]
    if len(filtered) <= target_count:
        return filtered

    n = len(filtered)
    lat = np.fromiter((s.latitude for s in filtered), dtype=np.float64, count=n)
    lon = np.fromiter((s.longitude for s in filtered), dtype=np.float64, count=n)
    prob = np.fromiter((s.probability for s in filtered), dtype=np.float64, count=n)
    order_in = np.arange(n, dtype=np.int64)

    cells, n_cells = cell_indices(lat, lon, grid)
    if _is_cancelled(cancelled):
        return None

    points_per_cell = max(1, target_count // n_cells)

    # Last key is primary: cell, then probability descending, then input order.
    order = np.lexsort((order_in, -prob, cells))
    ranks = _rank_within_cells(cells[order])
    kept = order[ranks < points_per_cell]
    debug_print(
        f"downsample: {n} samples in {n_cells} cells, "
        f"{points_per_cell} per cell -> {kept.size} kept"
    )
    if _is_cancelled(cancelled):
        return None

    if kept.size > target_count:
        kept = kept[np.lexsort((kept, -prob[kept]))][:target_count]

    return [filtered[i] for i in kept]


def _partition(samples: Iterable[Sample], pole_epsilon: float) -> tuple[list[Sample], list[Sample]]:
    north: list[Sample] = []
    south: list[Sample] = []
    for s in samples:
        if abs(abs(s.latitude) - 90.0) < pole_epsilon:
            continue
        hemisphere = Hemisphere.of(s.latitude)
        if hemisphere is Hemisphere.NORTH:
            north.append(s)
        elif hemisphere is Hemisphere.SOUTH:
            south.append(s)
    return north, south


def downsample(
    samples: Iterable[Sample],
    target_count: int,
    min_probability: float = DEFAULT_MIN_PROBABILITY,
    *,
    grid: GridSpec = DEFAULT_GRID,
    pole_epsilon: float = POLE_EPSILON_DEG,
    cancelled: CancelCheck | None = None,
) -> DownsampledField | None:
    """Build a :class:`DownsampledField` with each hemisphere bounded by *target_count*.

    Samples on the equator belong to neither hemisphere and samples within
    *pole_epsilon* degrees of a pole are left out.  Returns ``None`` if the
    computation was cancelled.
    """
    if target_count < 1:
        raise ValueError(f"target_count must be >= 1, got {target_count}")

    north_raw, south_raw = _partition(samples, pole_epsilon)
    northern = sample_hemisphere(
        north_raw, target_count, min_probability, grid=grid, cancelled=cancelled
    )
    if northern is None:
        return None
    southern = sample_hemisphere(
        south_raw, target_count, min_probability, grid=grid, cancelled=cancelled
    )
    if southern is None:
        return None

    return DownsampledField(
        northern=tuple(northern),
        southern=tuple(southern),
        target_count=int(target_count),
        min_probability=float(min_probability),
    )


def compute_field(
    raw_entries: Iterable[RawFieldEntry],
    target_count: int,
    *,
    min_probability: float = DEFAULT_MIN_PROBABILITY,
    grid: GridSpec = DEFAULT_GRID,
    pole_epsilon: float = POLE_EPSILON_DEG,
    cancelled: CancelCheck | None = None,
) -> DownsampledField | None:
    """Ingest raw feed entries and downsample them in one pass."""
    with debug_timer(f"compute_field(target_count={target_count})"):
        samples = ingest(raw_entries)
        if _is_cancelled(cancelled):
            return None
        return downsample(
            samples,
            target_count,
            min_probability,
            grid=grid,
            pole_epsilon=pole_epsilon,
            cancelled=cancelled,
        )
