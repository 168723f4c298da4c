"""Background recompute of the downsampled field with coalescing cancellation.

The scheduler owns exactly one published :class:`DownsampledField` (held in
a :class:`FieldSlot`) and at most one running computation.  A request that
arrives while a computation is running cancels it; the worker thread picks
up the newest inputs as soon as the cancelled run reaches a checkpoint, so a
burst of requests collapses into a single up-to-date result.  A cancelled
run never publishes.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable, Sequence

from aurora_field.constants import DEFAULT_MIN_PROBABILITY
from aurora_field.debug_utils import debug_print
from aurora_field.field.downsample import compute_field
from aurora_field.field.types import DownsampledField, RawFieldEntry

FieldComputer = Callable[..., "DownsampledField | None"]
Subscriber = Callable[[DownsampledField], None]


class SchedulerState(Enum):
    IDLE = "idle"
    COMPUTING = "computing"


class FieldSlot:
    """Single-slot channel holding the latest accepted field.

    Publication swaps one reference under a lock, so readers see either the
    previous or the new field, never a mix.
    """

    def __init__(self, initial: DownsampledField | None = None):
        self._lock = threading.Lock()
        self._value = initial
        self._version = 0
        self._subscribers: list[Subscriber] = []

    def get(self) -> DownsampledField | None:
        with self._lock:
            return self._value

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def publish(self, value: DownsampledField) -> int:
        version, subscribers = self._swap(value)
        self._notify(value, subscribers)
        return version

    def _swap(self, value: DownsampledField) -> tuple[int, list[Subscriber]]:
        with self._lock:
            self._value = value
            self._version += 1
            return self._version, list(self._subscribers)

    @staticmethod
    def _notify(value: DownsampledField, subscribers: list[Subscriber]) -> None:
        for callback in subscribers:
            callback(value)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback*; returns a function that unsubscribes it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe


class _CancelToken:
    __slots__ = ("_event",)

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()


class RecomputeScheduler:
    """Run ``compute(raw_entries, target_count, ...)`` off the caller's thread."""

    def __init__(
        self,
        slot: FieldSlot | None = None,
        *,
        compute: FieldComputer = compute_field,
        min_probability: float = DEFAULT_MIN_PROBABILITY,
        compute_kwargs: dict | None = None,
        thread_name: str = "aurora-field-recompute",
    ):
        self.slot = slot if slot is not None else FieldSlot()
        self._compute = compute
        self._min_probability = float(min_probability)
        self._compute_kwargs = dict(compute_kwargs or {})
        self._thread_name = thread_name

        self._cond = threading.Condition()
        self._raw: Sequence[RawFieldEntry] = ()
        self._target_count = 1
        self._pending = False
        self._token: _CancelToken | None = None
        self._worker: threading.Thread | None = None
        self._closed = False

    @property
    def latest(self) -> DownsampledField | None:
        return self.slot.get()

    @property
    def state(self) -> SchedulerState:
        with self._cond:
            return SchedulerState.COMPUTING if self._worker is not None else SchedulerState.IDLE

    def request(
        self,
        raw_entries: Sequence[RawFieldEntry] | None = None,
        target_count: int | None = None,
    ) -> None:
        """Schedule a recompute with new inputs; ``None`` keeps the previous value."""
        with self._cond:
            if self._closed:
                raise RuntimeError("RecomputeScheduler has been shut down")
            if raw_entries is not None:
                self._raw = raw_entries
            if target_count is not None:
                self._target_count = max(1, int(target_count))

            if self._worker is not None:
                self._pending = True
                if self._token is not None:
                    self._token.cancel()
                debug_print(f"scheduler: superseding in-flight run (target_count={self._target_count})")
                return

            self._pending = True
            self._worker = threading.Thread(target=self._run, name=self._thread_name, daemon=True)
            self._worker.start()

    def _finish_locked(self) -> None:
        self._worker = None
        self._token = None
        self._cond.notify_all()

    def _abort(self) -> None:
        with self._cond:
            self._pending = False
            self._finish_locked()

    def _run(self) -> None:
        while True:
            with self._cond:
                # Exit and worker reset share one critical section with request().
                if not self._pending or self._closed:
                    self._finish_locked()
                    return
                self._pending = False
                token = _CancelToken()
                self._token = token
                raw, target_count = self._raw, self._target_count

            try:
                result = self._compute(
                    raw,
                    target_count,
                    min_probability=self._min_probability,
                    cancelled=token.is_cancelled,
                    **self._compute_kwargs,
                )
            except BaseException:
                self._abort()
                raise

            with self._cond:
                self._token = None
                if result is None or token.is_cancelled():
                    debug_print(f"scheduler: discarded run (target_count={target_count})")
                    continue
                _, subscribers = self.slot._swap(result)
            # Subscribers run without the scheduler lock so they may call back into it.
            try:
                self.slot._notify(result, subscribers)
            except BaseException:
                self._abort()
                raise
            debug_print(
                f"scheduler: published {len(result.northern)} north / "
                f"{len(result.southern)} south (target_count={target_count})"
            )

    def wait(self, timeout: float | None = None) -> bool:
        """Block until no computation is running; ``False`` on timeout."""
        with self._cond:
            return self._cond.wait_for(lambda: self._worker is None, timeout=timeout)

    def shutdown(self, timeout: float | None = None) -> None:
        """Cancel any running computation and refuse further requests."""
        with self._cond:
            self._closed = True
            self._pending = False
            if self._token is not None:
                self._token.cancel()
        self.wait(timeout)
