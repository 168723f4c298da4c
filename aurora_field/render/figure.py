"""Map axes styling and headless rendering of a field to an image file."""

from __future__ import annotations

import os
from typing import Sequence

import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.patches import Patch

from aurora_field.field.types import DownsampledField, Hemisphere

from .colors import DEFAULT_STOPS, ColorStop, legend_entries
from .projection import AxesViewTransform, hemisphere_limits, mercator_latitude, mercator_xy
from .renderer import FieldRenderer, MatplotlibSurface

GRATICULE_COLOR = "#2a3245"


def style_map_axes(ax, hemisphere: Hemisphere, *, width_px: float, height_px: float, background: str) -> None:
    """Frame *ax* on *hemisphere* in Web Mercator meters with a lat/lon graticule."""
    xlim, ylim = hemisphere_limits(hemisphere, width_px, height_px)
    ax.set_facecolor(background)
    ax.set_xlim(*xlim)
    ax.set_ylim(*ylim)
    ax.set_xticks([])
    ax.set_yticks([])
    for spine in ax.spines.values():
        spine.set_visible(False)
    draw_graticule(ax)


def draw_graticule(ax, *, lat_step: float = 10.0, lon_step: float = 30.0) -> None:
    """Thin parallels and meridians under the field."""
    x0, x1 = ax.get_xlim()
    y0, y1 = ax.get_ylim()
    lat_lo, lat_hi = sorted(float(v) for v in mercator_latitude([y0, y1]))

    first = np.ceil(lat_lo / lat_step) * lat_step
    for lat in np.arange(first, lat_hi + 1e-9, lat_step):
        _, y = mercator_xy(0.0, lat)
        ax.axhline(float(y), color=GRATICULE_COLOR, linewidth=0.5, zorder=1)
    for lon in np.arange(-180.0, 180.0 + 1e-9, lon_step):
        x, _ = mercator_xy(lon, 0.0)
        if x0 <= float(x) <= x1:
            ax.axvline(float(x), color=GRATICULE_COLOR, linewidth=0.5, zorder=1)


def add_probability_legend(ax, *, stops: Sequence[ColorStop] = DEFAULT_STOPS):
    """Legend of the ten probability bins, drawn with unboosted opacity."""
    handles = [
        Patch(facecolor=entry.color[:3], alpha=entry.color[3], label=entry.label)
        for entry in legend_entries(boost=False, stops=stops)
    ]
    return ax.legend(
        handles=handles,
        title="Aurora probability",
        loc="lower left",
        fontsize=7,
        title_fontsize=8,
        frameon=True,
        facecolor="#10141f",
        edgecolor="none",
        labelcolor="white",
    )


def render_field_image(
    field: DownsampledField,
    out_path: str | os.PathLike,
    *,
    hemisphere: Hemisphere = Hemisphere.NORTH,
    renderer: FieldRenderer | None = None,
    width_px: int = 1200,
    height_px: int = 600,
    background: str = "#05070d",
    dpi: float = 100.0,
    legend: bool = True,
) -> int:
    """Draw one hemisphere of *field* to *out_path*; returns the number of circles drawn.

    The circles are laid out in display pixels of this figure, so the image
    is saved at the figure's own dpi.
    """
    renderer = renderer or FieldRenderer()
    fig = Figure(figsize=(width_px / dpi, height_px / dpi), dpi=dpi, facecolor=background)
    FigureCanvasAgg(fig)
    ax = fig.add_axes([0.0, 0.0, 1.0, 1.0])
    style_map_axes(ax, hemisphere, width_px=width_px, height_px=height_px, background=background)
    if legend:
        add_probability_legend(ax, stops=renderer.stops)

    surface = MatplotlibSurface(ax)
    drawn = renderer.draw(field.for_hemisphere(hemisphere), AxesViewTransform(ax), surface)
    fig.savefig(out_path, dpi=fig.dpi, facecolor=background)
    return drawn
