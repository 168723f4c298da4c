"""Feed reading and tabular export."""

from .export import field_to_frame, write_field_csv
from .feed import OVATION_URL, AuroraForecast, FeedError, load_forecast, parse_forecast

__all__ = [
    "OVATION_URL",
    "AuroraForecast",
    "FeedError",
    "field_to_frame",
    "load_forecast",
    "parse_forecast",
    "write_field_csv",
]
