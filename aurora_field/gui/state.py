"""Shared GUI state containers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from aurora_field.constants import DEFAULT_TARGET_COUNT, VISIBILITY_THRESHOLD
from aurora_field.field.types import Hemisphere, RawFieldEntry
from aurora_field.io.feed import AuroraForecast


@dataclass
class AppState:
    """Mutable state shared between the viewer's widgets and callbacks."""

    hemisphere: Hemisphere = Hemisphere.NORTH
    target_count: int = DEFAULT_TARGET_COUNT
    feed_source: Optional[str] = None
    forecast: Optional[AuroraForecast] = None
    raw_entries: list[RawFieldEntry] = field(default_factory=list)
    visibility_threshold: float = VISIBILITY_THRESHOLD
    loading: bool = False
