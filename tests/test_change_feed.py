import asyncio

from roster.services.change_feed import ChangeFeed, wait_for_change


async def test_publish_reaches_listeners_of_the_same_key():
    feed = ChangeFeed()
    async with feed.listen("driver_evaluations", 1) as changes, feed.listen("driver_evaluations", 2) as others:
        assert feed.publish("driver_evaluations", 1, {"id": 10}) == 1
        assert await asyncio.wait_for(changes.get(), 1) == {"id": 10}
        assert others.empty()


async def test_listener_is_removed_on_exit():
    feed = ChangeFeed()
    async with feed.listen("driver_evaluations", 1):
        pass
    assert feed.publish("driver_evaluations", 1) == 0


def test_unsubscribe_unknown_queue_is_harmless():
    feed = ChangeFeed()
    feed.unsubscribe("driver_evaluations", 1, asyncio.Queue())


class FakeClient:
    def __init__(self):
        self.inbox = asyncio.Queue()

    async def receive(self):
        return await self.inbox.get()


async def test_disconnect_ends_the_wait_and_releases_the_listener():
    feed = ChangeFeed()
    client = FakeClient()
    async with feed.listen("driver_evaluations", 1) as changes:
        waiting = asyncio.create_task(wait_for_change(changes, client.receive))
        await asyncio.sleep(0)
        client.inbox.put_nowait({"type": "websocket.disconnect", "code": 1001})
        assert await asyncio.wait_for(waiting, 1) is False
    assert feed.publish("driver_evaluations", 1) == 0


async def test_wait_returns_on_change():
    feed = ChangeFeed()
    client = FakeClient()
    async with feed.listen("driver_evaluations", 1) as changes:
        waiting = asyncio.create_task(wait_for_change(changes, client.receive))
        await asyncio.sleep(0)
        feed.publish("driver_evaluations", 1)
        assert await asyncio.wait_for(waiting, 1) is True


async def test_client_messages_are_ignored_while_waiting():
    feed = ChangeFeed()
    client = FakeClient()
    async with feed.listen("driver_evaluations", 1) as changes:
        waiting = asyncio.create_task(wait_for_change(changes, client.receive))
        client.inbox.put_nowait({"type": "websocket.receive", "text": "ping"})
        await asyncio.sleep(0.01)
        assert not waiting.done()
        feed.publish("driver_evaluations", 1)
        assert await asyncio.wait_for(waiting, 1) is True
