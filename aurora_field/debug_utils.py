"""Helper utilities for debugging aurora_field execution."""

import os
import logging
import time
from contextlib import contextmanager


def is_debug_enabled() -> bool:
    """Return ``True`` if ``AURORA_FIELD_DEBUG`` is set to a truthy value."""
    val = os.environ.get("AURORA_FIELD_DEBUG", "")
    return bool(val) and val.lower() not in {"0", "false", "no"}


def debug_print(*args, **kwargs) -> None:
    """Print only when ``AURORA_FIELD_DEBUG`` is enabled."""
    if is_debug_enabled():
        print(*args, **kwargs)


@contextmanager
def debug_timer(label: str):
    """Report the wall time of the wrapped block through :func:`debug_print`."""
    t0 = time.perf_counter()
    try:
        yield
    finally:
        debug_print(f"{label}: {(time.perf_counter() - t0) * 1000.0:.1f} ms")


def enable_numba_logging(default_level: str = "DEBUG") -> None:
    """Configure the ``numba`` logger when debug mode is active.

    If ``AURORA_FIELD_DEBUG`` is enabled this sets up the ``numba`` logger to
    emit messages to ``stdout`` using the log level from ``NUMBA_LOG_LEVEL``
    if defined or ``default_level`` otherwise.
    """
    if not is_debug_enabled():
        return

    level_name = os.environ.get("NUMBA_LOG_LEVEL", default_level).upper()
    os.environ["NUMBA_LOG_LEVEL"] = level_name

    try:
        level = getattr(logging, level_name)
    except AttributeError:
        level = logging.DEBUG

    logger = logging.getLogger("numba")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s numba: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)
