"""
Change feed for workshop collections.

Writers publish "collection changed" cues; listeners (the technician listing
stream) treat every cue as a signal to re-fetch. Cues carry no payload that
listeners may rely on and can arrive more than once.

Cues are fanned out in-process and mirrored to Redis pub/sub, so a change
written by one worker reaches subscribers of every other worker. Without
Redis the feed is local to the process.
"""

import asyncio
import json
import logging
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import AsyncIterator, Callable, Optional

from .rate_limiter import get_optional_redis_client

logger = logging.getLogger(__name__)

REPAIRS = "repairs"
CHECKLIST_ITEMS = "checklist_items"

REDIS_POLL_SECONDS = 1.0


def redis_channel(collection: str) -> str:
    return f"changes:{collection}"


class ChangeFeed:
    """In-process fan-out of change cues, mirrored to Redis pub/sub when available"""

    def __init__(self, mirror_to_redis: bool = True):
        self._listeners: dict[str, list[Callable[[dict], None]]] = defaultdict(list)
        self.mirror_to_redis = mirror_to_redis
        # Tags cues from this process so the Redis echo is not delivered twice
        self.origin = uuid.uuid4().hex

    def listen(self, collection: str, callback: Callable[[dict], None]) -> Callable[[], None]:
        """Register a callback; returns a function that removes it"""
        self._listeners[collection].append(callback)

        def unsubscribe():
            if callback in self._listeners[collection]:
                self._listeners[collection].remove(callback)

        return unsubscribe

    def subscriber_count(self, collection: str) -> int:
        return len(self._listeners[collection])

    def publish(self, collection: str, event: str = "*") -> None:
        cue = {
            "collection": collection,
            "event": event,
            "at": datetime.now(timezone.utc).isoformat(),
            "origin": self.origin,
        }
        for callback in list(self._listeners[collection]):
            try:
                callback(cue)
            except Exception as e:
                logger.error(f"❌ Change listener failed for {collection}: {e}")

        if self.mirror_to_redis:
            client = get_optional_redis_client()
            if client is not None:
                try:
                    client.publish(redis_channel(collection), json.dumps(cue))
                except Exception as e:
                    logger.warning(f"⚠️ Failed to mirror change cue to Redis: {e}")

        logger.debug(f"📣 Change cue published for {collection} ({event})")

    def _open_redis_subscription(self, collection: str):
        """Redis pub/sub on the collection channel, or None to stay local-only"""
        if not self.mirror_to_redis:
            return None
        client = get_optional_redis_client()
        if client is None:
            return None
        try:
            pubsub = client.pubsub(ignore_subscribe_messages=True)
            pubsub.subscribe(redis_channel(collection))
            return pubsub
        except Exception as e:
            logger.warning(f"⚠️ Could not subscribe to Redis change cues, staying local: {e}")
            return None

    def _decode_remote_cue(self, message: Optional[dict]) -> Optional[dict]:
        """Cue from a Redis message published by another process; None otherwise"""
        if not message or message.get("type") != "message":
            return None
        try:
            cue = json.loads(message["data"])
        except (TypeError, ValueError) as e:
            logger.warning(f"⚠️ Ignoring unreadable change cue from Redis: {e}")
            return None
        if not isinstance(cue, dict) or cue.get("origin") == self.origin:
            return None
        return cue

    async def _relay_from_redis(self, pubsub, queue: asyncio.Queue) -> None:
        while True:
            try:
                message = await asyncio.to_thread(pubsub.get_message, timeout=REDIS_POLL_SECONDS)
            except Exception as e:
                logger.warning(f"⚠️ Lost Redis change subscription, staying local: {e}")
                return
            cue = self._decode_remote_cue(message)
            if cue is not None:
                queue.put_nowait(cue)

    async def subscribe(self, collection: str, heartbeat_seconds: float = 15.0) -> AsyncIterator[dict]:
        """
        Yield cues for one collection until the consumer stops iterating.
        Yields a heartbeat (event 'ping') when nothing changed for heartbeat_seconds.
        """
        queue: asyncio.Queue = asyncio.Queue()
        unsubscribe = self.listen(collection, queue.put_nowait)
        pubsub = self._open_redis_subscription(collection)
        relay = asyncio.ensure_future(self._relay_from_redis(pubsub, queue)) if pubsub else None
        try:
            while True:
                try:
                    yield await asyncio.wait_for(queue.get(), timeout=heartbeat_seconds)
                except asyncio.TimeoutError:
                    yield {"collection": collection, "event": "ping"}
        finally:
            unsubscribe()
            if relay is not None:
                relay.cancel()
            if pubsub is not None:
                try:
                    pubsub.close()
                except Exception as e:
                    logger.warning(f"⚠️ Failed to close Redis change subscription: {e}")


change_feed = ChangeFeed()
