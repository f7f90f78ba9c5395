"""FastAPI dependencies for Dough Formula.

Provides:
- The session key-value store (Redis)
- The process-wide emergency timer
"""

from typing import Optional

from fastapi import Depends

from .infra.kv_store import KeyValueStore, RedisStore
from .infra.scheduler import AsyncioScheduler
from .realtime.timer_bus import publish_alarm, publish_timer_event
from .services.emergency_timer import EmergencyTimer
from .settings import settings

_timer: Optional[EmergencyTimer] = None


def get_store() -> KeyValueStore:
    return RedisStore()


async def init_timer(store: Optional[KeyValueStore] = None) -> EmergencyTimer:
    """Build the process timer from the saved snapshot.

    Called from the app lifespan, so a countdown that was running when the
    process stopped resumes ticking (or fires its alarm) at startup. Async so
    construction happens on the event loop the ticks are scheduled on.
    """
    global _timer
    if _timer is None:
        store = store if store is not None else get_store()
        _timer = EmergencyTimer(
            settings.timer_default_duration_ms,
            store=store,
            scheduler=AsyncioScheduler(),
            notifier=publish_alarm,
            listeners=[publish_timer_event],
        )
    return _timer


async def get_timer(store: KeyValueStore = Depends(get_store)) -> EmergencyTimer:
    """Return the timer built at startup (or build it, outside the lifespan)."""
    return await init_timer(store)


def reset_timer() -> None:
    """Drop the process timer (tests, shutdown)."""
    global _timer
    if _timer is not None:
        _timer.close()
    _timer = None
