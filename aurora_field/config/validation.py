"""Validation helpers for configuration payloads."""

from __future__ import annotations

import math
from typing import Any


def ensure_mapping(value: Any, *, name: str) -> dict[str, Any]:
    """Return *value* as ``dict`` or raise a descriptive ``TypeError``."""

    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f"{name} must be a mapping, got {type(value).__name__}")
    return value


def ensure_positive(value: Any, *, name: str) -> float:
    """Return *value* as a finite ``float`` > 0 or raise ``ValueError``."""

    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number) or number <= 0:
        raise ValueError(f"{name} must be > 0, got {value!r}")
    return number


def ensure_color_stops(value: Any, *, name: str, count: int = 11) -> tuple[tuple[float, float, float], ...]:
    """Validate a list of ``count`` RGB triples with channels in ``[0, 1]``."""

    if not isinstance(value, (list, tuple)) or len(value) != count:
        raise ValueError(f"{name} must list exactly {count} colors")
    stops = []
    for i, rgb in enumerate(value):
        if not isinstance(rgb, (list, tuple)) or len(rgb) != 3:
            raise ValueError(f"{name}[{i}] must be an [r, g, b] triple, got {rgb!r}")
        try:
            channels = tuple(float(c) for c in rgb)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{name}[{i}] must contain numbers, got {rgb!r}") from exc
        if not all(0.0 <= c <= 1.0 for c in channels):
            raise ValueError(f"{name}[{i}] channels must lie in [0, 1], got {rgb!r}")
        stops.append(channels)
    return tuple(stops)
