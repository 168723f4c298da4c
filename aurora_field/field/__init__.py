"""Typed field samples, axis resolution and hemisphere downsampling."""

from .types import AuroraIntensity, DownsampledField, Hemisphere, Sample

__all__ = ["AuroraIntensity", "DownsampledField", "Hemisphere", "Sample"]
