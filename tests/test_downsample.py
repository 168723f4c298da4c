from __future__ import annotations

import numpy as np
import pytest

from aurora_field.field.downsample import cell_indices, compute_field, downsample, sample_hemisphere
from aurora_field.field.types import GridSpec, Sample


def _random_samples(count: int, *, seed: int = 0, south: bool = False) -> list[Sample]:
    rng = np.random.default_rng(seed)
    lat = rng.uniform(45.0, 85.0, count)
    if south:
        lat = -lat
    lon = rng.uniform(-180.0, 180.0, count)
    prob = rng.uniform(3.0, 100.0, count)
    return [Sample(float(a), float(b), float(c)) for a, b, c in zip(lon, lat, prob)]


def test_small_field_scenario() -> None:
    raw = [
        (10.0, 60.0, 80.0),
        (20.0, 62.0, 40.0),
        (30.0, 64.0, 5.0),
        (40.0, -60.0, 90.0),
        (50.0, -62.0, 2.0),
    ]
    field = compute_field(raw, 1000, min_probability=3.0)
    assert sorted(s.probability for s in field.northern) == [5.0, 40.0, 80.0]
    assert [s.probability for s in field.southern] == [90.0]


def test_oversized_field_is_trimmed_and_keeps_the_peak() -> None:
    samples = _random_samples(10_000, seed=42)
    out = sample_hemisphere(samples, 500)
    assert out is not None
    assert len(out) <= 500
    peak = max(samples, key=lambda s: s.probability)
    assert peak in out


@pytest.mark.parametrize("target_count", [1, 7, 64, 999, 5000])
def test_budget_invariant(target_count: int) -> None:
    samples = _random_samples(3000, seed=target_count) + _random_samples(
        2000, seed=target_count + 1, south=True
    )
    field = downsample(samples, target_count)
    assert len(field.northern) <= target_count
    assert len(field.southern) <= target_count


def test_pass_through_under_budget_keeps_filtered_input() -> None:
    samples = _random_samples(200, seed=3)
    samples += [Sample(5.0, 70.0, 1.0), Sample(6.0, 71.0, 2.9)]
    out = sample_hemisphere(samples, 500, 3.0)
    assert set(out) == {s for s in samples if s.probability >= 3.0}


def test_zero_probability_never_appears() -> None:
    raw = [(float(i % 360), 50.0 + (i % 30), float(i % 5)) for i in range(2000)]
    field = compute_field(raw, 100, min_probability=0.0)
    assert all(s.probability > 0 for s in field.northern)
    assert all(s.probability > 0 for s in field.southern)


def test_equator_and_poles_are_excluded() -> None:
    samples = [
        Sample(0.0, 0.0, 50.0),
        Sample(10.0, 90.0, 50.0),
        Sample(10.0, -89.995, 50.0),
        Sample(10.0, 89.5, 50.0),
        Sample(10.0, -0.5, 50.0),
    ]
    field = downsample(samples, 10)
    assert field.northern == (Sample(10.0, 89.5, 50.0),)
    assert field.southern == (Sample(10.0, -0.5, 50.0),)


def test_per_cell_cap_prefers_high_probability() -> None:
    # Two cells, budget 2: each cell keeps only its best sample.
    samples = [
        Sample(1.0, 60.5, 10.0),
        Sample(2.0, 61.0, 90.0),
        Sample(3.0, 61.5, 20.0),
        Sample(100.0, 70.5, 30.0),
        Sample(101.0, 71.0, 35.0),
    ]
    out = sample_hemisphere(samples, 2)
    assert out == [Sample(2.0, 61.0, 90.0), Sample(101.0, 71.0, 35.0)]


def test_ties_break_by_input_order() -> None:
    samples = [Sample(float(i), 60.1, 50.0) for i in range(5)]
    out = sample_hemisphere(samples, 2, grid=GridSpec(lat_deg=10.0, lon_deg=360.0))
    assert out == samples[:2]


def test_downsample_is_deterministic() -> None:
    samples = _random_samples(4000, seed=11)
    first = downsample(samples, 300)
    second = downsample(list(samples), 300)
    assert first == second


def test_empty_input() -> None:
    field = compute_field([], 100)
    assert field.northern == () and field.southern == ()
    assert len(field) == 0


def test_non_positive_target_count_raises() -> None:
    with pytest.raises(ValueError):
        downsample([Sample(0.0, 60.0, 50.0)], 0)


def test_cancelled_run_returns_none() -> None:
    samples = _random_samples(2000, seed=5)
    assert downsample(samples, 100, cancelled=lambda: True) is None
    assert compute_field([(0.0, 60.0, 50.0)], 10, cancelled=lambda: True) is None


def test_cancellation_after_first_checkpoint() -> None:
    calls = []

    def cancelled() -> bool:
        calls.append(1)
        return len(calls) > 1

    assert sample_hemisphere(_random_samples(2000, seed=6), 100, cancelled=cancelled) is None
    assert len(calls) == 2


def test_cell_indices_separate_bands() -> None:
    lat = np.array([60.1, 60.2, 62.6, 60.1, -60.1])
    lon = np.array([1.0, 5.9, 1.0, 6.1, 1.0])
    cells, n_cells = cell_indices(lat, lon)
    assert n_cells == 4
    assert cells[0] == cells[1]
    assert len({cells[0], cells[2], cells[3], cells[4]}) == 4
