"""Aurora probability-field pipeline: ingestion, downsampling, colors and projection."""

__version__ = "0.1.0"
