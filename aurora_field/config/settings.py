"""Typed pipeline and rendering settings built from the config bundle."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from aurora_field import constants
from aurora_field.field.types import GridSpec

from .loader import get_config_bundle
from .models import ConfigBundle
from .validation import ensure_color_stops, ensure_mapping, ensure_positive


@dataclass(frozen=True)
class PipelineSettings:
    target_count: int = constants.DEFAULT_TARGET_COUNT
    min_probability: float = constants.DEFAULT_MIN_PROBABILITY
    cell_lat_deg: float = constants.CELL_LAT_DEG
    cell_lon_deg: float = constants.CELL_LON_DEG
    pole_epsilon_deg: float = constants.POLE_EPSILON_DEG
    visibility_threshold: float = constants.VISIBILITY_THRESHOLD

    @property
    def grid(self) -> GridSpec:
        return GridSpec(lat_deg=self.cell_lat_deg, lon_deg=self.cell_lon_deg)

    def compute_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for :func:`~aurora_field.field.downsample.compute_field`."""
        return {"grid": self.grid, "pole_epsilon": self.pole_epsilon_deg}


@dataclass(frozen=True)
class RenderSettings:
    base_radius_m: float = constants.BASE_RADIUS_M
    radius_span_m: float = constants.RADIUS_SPAN_M
    min_screen_radius_px: float = constants.MIN_SCREEN_RADIUS_PX
    boost: bool = True
    width_px: int = 1200
    height_px: int = 600
    background: str = "#05070d"
    color_stops: tuple[tuple[float, float, float], ...] = field(
        default_factory=lambda: tuple(constants.COLOR_STOPS)
    )


def _pipeline_from(data: dict[str, Any]) -> PipelineSettings:
    defaults = PipelineSettings()
    downsample = ensure_mapping(data.get("downsample"), name="pipeline.downsample")
    grid = ensure_mapping(downsample.get("grid"), name="pipeline.downsample.grid")

    target_count = int(downsample.get("target_count", defaults.target_count))
    if target_count < 1:
        raise ValueError(f"pipeline.downsample.target_count must be >= 1, got {target_count}")

    return PipelineSettings(
        target_count=target_count,
        min_probability=float(downsample.get("min_probability", defaults.min_probability)),
        cell_lat_deg=ensure_positive(
            grid.get("lat_deg", defaults.cell_lat_deg), name="pipeline.downsample.grid.lat_deg"
        ),
        cell_lon_deg=ensure_positive(
            grid.get("lon_deg", defaults.cell_lon_deg), name="pipeline.downsample.grid.lon_deg"
        ),
        pole_epsilon_deg=float(downsample.get("pole_epsilon_deg", defaults.pole_epsilon_deg)),
        visibility_threshold=float(
            data.get("visibility_threshold", defaults.visibility_threshold)
        ),
    )


def _render_from(data: dict[str, Any], colors: dict[str, Any]) -> RenderSettings:
    defaults = RenderSettings()
    radius = ensure_mapping(data.get("radius"), name="rendering.radius")
    canvas = ensure_mapping(data.get("canvas"), name="rendering.canvas")

    stops = defaults.color_stops
    if "stops" in colors:
        stops = ensure_color_stops(colors["stops"], name="colors.stops")

    return RenderSettings(
        base_radius_m=ensure_positive(
            radius.get("base_m", defaults.base_radius_m), name="rendering.radius.base_m"
        ),
        radius_span_m=ensure_positive(
            radius.get("span_m", defaults.radius_span_m), name="rendering.radius.span_m"
        ),
        min_screen_radius_px=float(
            data.get("min_screen_radius_px", defaults.min_screen_radius_px)
        ),
        boost=bool(data.get("boost", defaults.boost)),
        width_px=int(canvas.get("width_px", defaults.width_px)),
        height_px=int(canvas.get("height_px", defaults.height_px)),
        background=str(canvas.get("background", defaults.background)),
        color_stops=stops,
    )


def load_settings(
    config_dir: Path | None = None,
    *,
    bundle: ConfigBundle | None = None,
) -> tuple[PipelineSettings, RenderSettings]:
    """Return ``(pipeline, render)`` settings for the active config directory."""

    bundle = bundle or get_config_bundle(config_dir)
    return _pipeline_from(bundle.pipeline), _render_from(bundle.rendering, bundle.colors)
