"""GUI controller helpers."""

from __future__ import annotations

from typing import Any

from aurora_field.config import PipelineSettings, load_settings

from .state import AppState


def build_initial_state(
    pipeline: PipelineSettings | None = None,
    *,
    feed: str | None = None,
) -> AppState:
    """Build the initial GUI state snapshot from current configuration."""

    if pipeline is None:
        pipeline, _ = load_settings()
    return AppState(
        target_count=pipeline.target_count,
        feed_source=feed,
        visibility_threshold=pipeline.visibility_threshold,
    )


def launch_gui(*, feed: str | None = None) -> Any:
    """Launch the interactive viewer."""

    from . import app

    return app.main(feed=feed)
