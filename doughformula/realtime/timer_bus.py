import asyncio
import json
import logging

from redis.exceptions import RedisError

from ..errors import NotificationUnavailable
from ..infra.redis_client import get_redis, get_sync_redis

logger = logging.getLogger("doughformula.timer_bus")

TIMER_CHANNEL = "doughformula:timer"

# C5, E5, G5, C6
ALARM_TONES_HZ = [523, 659, 784, 1047]
ALARM_TONE_SPACING_MS = 300
ALARM_TONE_LENGTH_MS = 200

# Strong refs to in-flight publishes (the loop only keeps weak ones)
_pending: set[asyncio.Task] = set()


def _alarm_payload() -> dict:
    return {
        "type": "alarm",
        "tones_hz": ALARM_TONES_HZ,
        "spacing_ms": ALARM_TONE_SPACING_MS,
        "tone_ms": ALARM_TONE_LENGTH_MS,
    }


def _spawn(coro) -> bool:
    """Schedule ``coro`` on the running loop. False when called outside one."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        coro.close()
        return False
    task = loop.create_task(coro)
    _pending.add(task)
    task.add_done_callback(_pending.discard)
    return True


async def publish_timer_event_async(event_type: str, payload: dict) -> None:
    try:
        r = await get_redis()
        await r.publish(TIMER_CHANNEL, json.dumps(payload))
    except RedisError as e:
        logger.error(f"Failed to publish timer {event_type}: {e}")


def publish_timer_event_sync(event_type: str, payload: dict) -> None:
    try:
        get_sync_redis().publish(TIMER_CHANNEL, json.dumps(payload))
    except RedisError as e:
        logger.error(f"Failed to publish timer {event_type}: {e}")


def publish_timer_event(event_type: str, payload: dict) -> None:
    """Timer listener: forward events to subscribed UIs.

    Inside the server loop the publish goes through the async client so a
    tick never waits on Redis.
    """
    if not _spawn(publish_timer_event_async(event_type, payload)):
        publish_timer_event_sync(event_type, payload)


async def publish_alarm_async() -> None:
    try:
        r = await get_redis()
        await r.publish(TIMER_CHANNEL, json.dumps(_alarm_payload()))
    except RedisError as e:
        logger.warning(f"Failed to publish timer alarm: {e}")


def publish_alarm() -> None:
    """Timer notifier: ask connected UIs to play the completion chime."""
    if _spawn(publish_alarm_async()):
        return
    try:
        get_sync_redis().publish(TIMER_CHANNEL, json.dumps(_alarm_payload()))
    except RedisError as e:
        raise NotificationUnavailable(f"No alarm channel: {e}") from e


async def subscribe_timer():
    r = await get_redis()
    pubsub = r.pubsub()
    await pubsub.subscribe(TIMER_CHANNEL)
    return pubsub
