"""Color mapping, projection math and circle rendering."""

from .colors import color_for, colors_for, legend_entries
from .figure import render_field_image, style_map_axes
from .projection import AxesViewTransform, MercatorViewport, physical_radius, screen_radius
from .renderer import CircleBatch, FieldRenderer, MatplotlibSurface

__all__ = [
    "AxesViewTransform",
    "CircleBatch",
    "FieldRenderer",
    "MatplotlibSurface",
    "MercatorViewport",
    "color_for",
    "colors_for",
    "legend_entries",
    "physical_radius",
    "render_field_image",
    "screen_radius",
    "style_map_axes",
]
