"""Config loading helpers for aurora_field."""

from .loader import clear_config_cache, get_config_bundle, get_config_dir
from .models import ConfigBundle
from .settings import PipelineSettings, RenderSettings, load_settings

__all__ = [
    "ConfigBundle",
    "PipelineSettings",
    "RenderSettings",
    "clear_config_cache",
    "get_config_bundle",
    "get_config_dir",
    "load_settings",
]
