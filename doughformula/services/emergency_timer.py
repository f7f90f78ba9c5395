"""
Emergency dough timer.

Countdown for same-day dough (2 hours by default) that survives reloads:
state is written to the key-value store on every transition, and a timer
that was running when the process went away resumes from the wall clock on
the next construction, or completes immediately if it ran out meanwhile.

States: idle -> running <-> paused -> completed; reset() returns to idle.
"""

import json
import logging
import time
from typing import Callable, Iterable, Optional

from pydantic import ValidationError

from ..errors import NotificationUnavailable, StorageUnavailable
from ..infra.kv_store import KeyValueStore
from ..infra.scheduler import ScheduledHandle, Scheduler
from ..schemas import TimerSnapshot, TimerStateOut, TimerStatus
from ..settings import settings

logger = logging.getLogger("doughformula.timer")

DEFAULT_DURATION = 2 * 60 * 60 * 1000  # ms
TIMER_STORAGE_KEY = "emergencyTimer"

# Event types passed to listeners
EVENT_TICK = "tick"
EVENT_STATE_CHANGE = "state_change"
EVENT_COMPLETE = "complete"

TimerListener = Callable[[str, dict], None]


def now_ms() -> int:
    return int(time.time() * 1000)


class EmergencyTimer:
    def __init__(
        self,
        duration: int = DEFAULT_DURATION,
        *,
        store: Optional[KeyValueStore] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Callable[[], int] = now_ms,
        notifier: Optional[Callable[[], None]] = None,
        listeners: Iterable[TimerListener] = (),
        tick_interval: Optional[float] = None,
        storage_key: str = TIMER_STORAGE_KEY,
    ):
        self.duration = duration
        self.remaining = duration
        self.is_running = False
        self.started_at: Optional[int] = None
        self.status = TimerStatus.IDLE

        self._store = store
        self._scheduler = scheduler
        self._clock = clock
        self._notifier = notifier
        self._listeners: list[TimerListener] = list(listeners)
        self._tick_interval = tick_interval if tick_interval is not None else settings.timer_tick_seconds
        self._storage_key = storage_key
        self._end_time: Optional[int] = None
        self._tick_handle: Optional[ScheduledHandle] = None

        self._load_state()

    # --- Observers ---

    def subscribe(self, listener: TimerListener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event_type: str, **extra) -> None:
        payload = {"type": event_type, **extra, "state": self.get_state().model_dump(mode="json")}
        for listener in list(self._listeners):
            try:
                listener(event_type, payload)
            except Exception as e:
                logger.error(f"Timer listener failed on {event_type}: {e}")

    # --- Transitions ---

    def start(self) -> None:
        if self.is_running:
            return
        if self.status == TimerStatus.COMPLETED:
            logger.debug("Timer already completed; reset before starting again")
            return

        self.is_running = True
        self.started_at = self._clock()
        self._end_time = self.started_at + self.remaining
        self.status = TimerStatus.RUNNING

        if self._scheduler is not None:
            self._tick_handle = self._scheduler.call_every(self._tick_interval, self.tick)

        self._save_state()
        logger.info(f"Timer started with {self.remaining}ms remaining")
        self._emit(EVENT_STATE_CHANGE, state_name="running")

    def tick(self) -> None:
        """Recompute remaining time from the wall clock."""
        if not self.is_running:
            return

        self._sync_remaining()
        self._emit(EVENT_TICK)

        if self.remaining <= 0:
            self._complete()

    def pause(self) -> None:
        if not self.is_running:
            return

        self._sync_remaining()
        self._stop_ticking()
        self.status = TimerStatus.PAUSED
        self._save_state()
        logger.info(f"Timer paused with {self.remaining}ms remaining")
        self._emit(EVENT_STATE_CHANGE, state_name="paused")

    def toggle(self) -> None:
        if self.is_running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        self._stop_ticking()
        self.remaining = self.duration
        self.started_at = None
        self.status = TimerStatus.IDLE
        self._save_state()

        self._emit(EVENT_TICK)
        self._emit(EVENT_STATE_CHANGE, state_name="reset")

    def set_duration(self, duration: int) -> None:
        """Change the countdown length. Resets the timer to the new duration."""
        self._stop_ticking()
        self.duration = duration
        self.remaining = duration
        self.started_at = None
        self.status = TimerStatus.IDLE
        self._save_state()
        self._emit(EVENT_TICK)

    def add_time(self, milliseconds: int) -> None:
        """Add (or remove) time. Never exceeds the original duration."""
        if self.status == TimerStatus.COMPLETED:
            return

        self._sync_remaining()
        self.remaining = max(0, min(self.remaining + milliseconds, self.duration))
        if self.is_running:
            self._end_time = self._clock() + self.remaining

        self._save_state()
        self._emit(EVENT_TICK)

    def close(self) -> None:
        """Stop ticking without touching the saved snapshot, so a new process resumes it."""
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _complete(self) -> None:
        self._stop_ticking()
        self.remaining = 0
        self.started_at = None
        self.status = TimerStatus.COMPLETED
        logger.info("Timer completed")

        self._emit(EVENT_COMPLETE)
        self._emit(EVENT_STATE_CHANGE, state_name="completed")
        self._notify()
        self._clear_state()

    def _stop_ticking(self) -> None:
        self.is_running = False
        self._end_time = None
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _sync_remaining(self) -> None:
        if self.is_running and self._end_time is not None:
            self.remaining = max(0, self._end_time - self._clock())

    def _notify(self) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier()
        except NotificationUnavailable as e:
            logger.info(f"Timer notification skipped: {e}")
        except Exception as e:
            logger.warning(f"Failed to play notification: {e}")

    # --- Read model ---

    @property
    def progress(self) -> int:
        """Percent of the duration elapsed, 0-100."""
        if self.duration <= 0:
            return 100
        return int(((self.duration - self.remaining) / self.duration) * 100 + 0.5)

    def time_components(self) -> dict[str, int]:
        return {
            "hours": self.remaining // 3600000,
            "minutes": (self.remaining % 3600000) // 60000,
            "seconds": (self.remaining % 60000) // 1000,
        }

    @property
    def formatted_time(self) -> str:
        parts = self.time_components()
        return f"{parts['hours']:02d}:{parts['minutes']:02d}:{parts['seconds']:02d}"

    def get_state(self) -> TimerStateOut:
        return TimerStateOut(
            status=self.status,
            is_running=self.is_running,
            duration=self.duration,
            remaining=self.remaining,
            started_at=self.started_at,
            progress=self.progress,
            formatted_time=self.formatted_time,
        )

    # --- Persistence ---

    def _save_state(self) -> None:
        if self._store is None:
            return
        self._sync_remaining()
        snapshot = TimerSnapshot(
            remaining=self.remaining,
            is_running=self.is_running,
            saved_at=self._clock(),
            duration=self.duration,
        )
        try:
            self._store.set(self._storage_key, snapshot.model_dump_json(by_alias=True))
        except StorageUnavailable as e:
            logger.warning(f"Failed to save timer state: {e}")

    def _clear_state(self) -> None:
        if self._store is None:
            return
        try:
            self._store.remove(self._storage_key)
        except StorageUnavailable as e:
            logger.warning(f"Failed to clear timer state: {e}")

    def _read_snapshot(self) -> Optional[TimerSnapshot]:
        try:
            raw = self._store.get(self._storage_key)
        except StorageUnavailable as e:
            logger.warning(f"Failed to load timer state: {e}")
            return None
        if not raw:
            return None

        try:
            return TimerSnapshot.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning(f"Ignoring malformed timer state: {e}")
            return None

    def _load_state(self) -> None:
        if self._store is None:
            return

        snapshot = self._read_snapshot()
        if snapshot is None:
            return

        if snapshot.duration:
            self.duration = snapshot.duration

        if not snapshot.is_running:
            self.remaining = max(0, min(snapshot.remaining, self.duration))
            self.status = TimerStatus.IDLE if self.remaining == self.duration else TimerStatus.PAUSED
            return

        elapsed = self._clock() - snapshot.saved_at
        if elapsed < snapshot.remaining:
            self.remaining = snapshot.remaining - elapsed
            logger.info(f"Resuming timer: {elapsed}ms elapsed while away, {self.remaining}ms left")
            self.start()
        else:
            # Ran out while the app was closed
            logger.info(f"Timer expired {elapsed - snapshot.remaining}ms ago while away")
            self._complete()
