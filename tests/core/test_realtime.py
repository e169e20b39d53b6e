"""
Tests for the change feed.
"""

import asyncio
import json
import time

import pytest

from app.realtime import REPAIRS, ChangeFeed


class FakePubSub:
    """Redis pub/sub stand-in that hands out queued messages, then idles"""

    def __init__(self, messages=()):
        self.messages = list(messages)
        self.channels = []
        self.closed = False

    def subscribe(self, channel):
        self.channels.append(channel)

    def get_message(self, timeout=None):
        if self.messages:
            return self.messages.pop(0)
        time.sleep(0.005)
        return None

    def close(self):
        self.closed = True


def redis_message(origin, event="UPDATE"):
    cue = {"collection": REPAIRS, "event": event, "origin": origin}
    return {"type": "message", "channel": "changes:repairs", "data": json.dumps(cue)}


def test_publish_reaches_listeners_of_the_collection():
    feed = ChangeFeed(mirror_to_redis=False)
    received = []
    feed.listen(REPAIRS, received.append)
    feed.listen("checklist_items", lambda cue: pytest.fail("wrong collection"))

    feed.publish(REPAIRS, "UPDATE")

    assert len(received) == 1
    assert received[0]["collection"] == REPAIRS
    assert received[0]["event"] == "UPDATE"


def test_unsubscribe_stops_delivery():
    feed = ChangeFeed(mirror_to_redis=False)
    received = []
    unsubscribe = feed.listen(REPAIRS, received.append)

    unsubscribe()
    feed.publish(REPAIRS)

    assert received == []
    assert feed.subscriber_count(REPAIRS) == 0


def test_failing_listener_does_not_block_others():
    feed = ChangeFeed(mirror_to_redis=False)
    received = []

    def broken(cue):
        raise RuntimeError("listener crashed")

    feed.listen(REPAIRS, broken)
    feed.listen(REPAIRS, received.append)

    feed.publish(REPAIRS)

    assert len(received) == 1


def test_cue_is_mirrored_to_redis(mocker):
    redis_client = mocker.MagicMock()
    mocker.patch("app.realtime.get_optional_redis_client", return_value=redis_client)
    feed = ChangeFeed(mirror_to_redis=True)

    feed.publish(REPAIRS, "INSERT")

    channel, message = redis_client.publish.call_args.args
    assert channel == "changes:repairs"
    assert '"event": "INSERT"' in message


def test_redis_failure_is_not_raised(mocker):
    redis_client = mocker.MagicMock()
    redis_client.publish.side_effect = ConnectionError("redis down")
    mocker.patch("app.realtime.get_optional_redis_client", return_value=redis_client)

    ChangeFeed(mirror_to_redis=True).publish(REPAIRS)


@pytest.mark.asyncio
async def test_subscribe_yields_published_cues():
    feed = ChangeFeed(mirror_to_redis=False)
    stream = feed.subscribe(REPAIRS, heartbeat_seconds=5)

    next_cue = asyncio.ensure_future(stream.__anext__())
    await asyncio.sleep(0.01)
    feed.publish(REPAIRS, "DELETE")

    cue = await asyncio.wait_for(next_cue, timeout=1)
    assert cue["event"] == "DELETE"
    await stream.aclose()
    assert feed.subscriber_count(REPAIRS) == 0


@pytest.mark.asyncio
async def test_subscribe_sends_heartbeat_when_idle():
    feed = ChangeFeed(mirror_to_redis=False)
    stream = feed.subscribe(REPAIRS, heartbeat_seconds=0.01)

    cue = await asyncio.wait_for(stream.__anext__(), timeout=1)

    assert cue["event"] == "ping"
    await stream.aclose()


@pytest.fixture
def redis_client(mocker):
    """Mocked Redis client handed to the change feed"""
    client = mocker.MagicMock()
    mocker.patch("app.realtime.get_optional_redis_client", return_value=client)
    return client


@pytest.mark.asyncio
async def test_subscribe_receives_cues_from_other_workers(redis_client):
    pubsub = FakePubSub([redis_message("other-worker")])
    redis_client.pubsub.return_value = pubsub
    stream = ChangeFeed(mirror_to_redis=True).subscribe(REPAIRS, heartbeat_seconds=5)

    cue = await asyncio.wait_for(stream.__anext__(), timeout=1)

    assert cue["event"] == "UPDATE"
    assert cue["origin"] == "other-worker"
    assert pubsub.channels == ["changes:repairs"]
    await stream.aclose()
    assert pubsub.closed


@pytest.mark.asyncio
async def test_own_cues_are_not_delivered_twice(redis_client):
    feed = ChangeFeed(mirror_to_redis=True)
    pubsub = FakePubSub([redis_message(feed.origin, "INSERT"), redis_message("other-worker", "DELETE")])
    redis_client.pubsub.return_value = pubsub
    stream = feed.subscribe(REPAIRS, heartbeat_seconds=5)

    cue = await asyncio.wait_for(stream.__anext__(), timeout=1)

    assert cue["event"] == "DELETE"
    await stream.aclose()


@pytest.mark.asyncio
async def test_subscribe_stays_local_when_redis_subscription_fails(redis_client):
    redis_client.pubsub.side_effect = ConnectionError("redis down")
    feed = ChangeFeed(mirror_to_redis=True)
    stream = feed.subscribe(REPAIRS, heartbeat_seconds=5)

    next_cue = asyncio.ensure_future(stream.__anext__())
    await asyncio.sleep(0.01)
    feed.publish(REPAIRS, "INSERT")

    cue = await asyncio.wait_for(next_cue, timeout=1)
    assert cue["event"] == "INSERT"
    assert cue["origin"] == feed.origin
    await stream.aclose()
