"""Read the OVATION aurora forecast from a local JSON file or over HTTP."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import requests

from aurora_field.debug_utils import debug_print
from aurora_field.field.types import RawFieldEntry

OVATION_URL = "https://services.swpc.noaa.gov/json/ovation_aurora_latest.json"
REQUEST_TIMEOUT_S = 30


class FeedError(RuntimeError):
    """The forecast could not be fetched or does not look like an OVATION document."""


@dataclass(frozen=True)
class AuroraForecast:
    observation_time: str
    forecast_time: str
    data_format: str
    coordinates: list[RawFieldEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.coordinates)


def parse_forecast(payload: Any) -> AuroraForecast:
    """Build an :class:`AuroraForecast` from the decoded JSON document.

    Entries of ``coordinates`` are passed through unvalidated; malformed
    rows are dropped later during ingestion.
    """
    if not isinstance(payload, dict):
        raise FeedError(f"Forecast must be a JSON object, got {type(payload).__name__}")
    coordinates = payload.get("coordinates")
    if not isinstance(coordinates, list):
        raise FeedError("Forecast has no 'coordinates' list")
    return AuroraForecast(
        observation_time=str(payload.get("Observation Time", "")),
        forecast_time=str(payload.get("Forecast Time", "")),
        data_format=str(payload.get("Data Format", "")),
        coordinates=[tuple(c) if isinstance(c, (list, tuple)) else () for c in coordinates],
    )


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _fetch(url: str, timeout: float) -> Any:
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise FeedError(f"Failed to fetch {url}: {exc}") from exc
    if resp.status_code != 200:
        raise FeedError(f"Invalid response from {url}: HTTP {resp.status_code}")
    try:
        return resp.json()
    except ValueError as exc:
        raise FeedError(f"Response from {url} is not valid JSON") from exc


def _read(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FeedError(f"Cannot read forecast file {path}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise FeedError(f"{path} is not valid JSON: {exc}") from exc


def load_forecast(
    source: str | os.PathLike | None = None,
    *,
    timeout: float = REQUEST_TIMEOUT_S,
) -> AuroraForecast:
    """Load a forecast from *source*: an ``http(s)`` URL or a JSON file path.

    ``None`` fetches the latest forecast from NOAA SWPC.
    """
    source = OVATION_URL if source is None else source
    if isinstance(source, str) and _is_url(source):
        payload = _fetch(source, timeout)
    else:
        payload = _read(Path(source).expanduser())

    forecast = parse_forecast(payload)
    debug_print(
        f"feed: {len(forecast)} coordinates "
        f"(observed {forecast.observation_time}, forecast {forecast.forecast_time})"
    )
    return forecast
