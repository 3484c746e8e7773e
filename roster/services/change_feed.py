# roster/services/change_feed.py
import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Hashable, Set, Tuple

logger = logging.getLogger(__name__)


class ChangeFeed:
    """In-process change notifications scoped to (collection, filter value).

    Used to tell open evaluation streams that a driver received new rows.
    """

    def __init__(self) -> None:
        self._queues: Dict[Tuple[str, Hashable], Set["asyncio.Queue[Any]"]] = defaultdict(set)

    def subscribe(self, collection: str, key: Hashable) -> "asyncio.Queue[Any]":
        queue: "asyncio.Queue[Any]" = asyncio.Queue()
        self._queues[(collection, key)].add(queue)
        return queue

    def unsubscribe(self, collection: str, key: Hashable, queue: "asyncio.Queue[Any]") -> None:
        queues = self._queues.get((collection, key))
        if not queues:
            return
        queues.discard(queue)
        if not queues:
            del self._queues[(collection, key)]

    @asynccontextmanager
    async def listen(self, collection: str, key: Hashable) -> AsyncIterator["asyncio.Queue[Any]"]:
        queue = self.subscribe(collection, key)
        try:
            yield queue
        finally:
            self.unsubscribe(collection, key, queue)

    def publish(self, collection: str, key: Hashable, payload: Any = None) -> int:
        queues = self._queues.get((collection, key), ())
        for queue in queues:
            queue.put_nowait(payload)
        if queues:
            logger.debug("Notified %d listeners of %s change for %s", len(queues), collection, key)
        return len(queues)


async def wait_for_change(
    changes: "asyncio.Queue[Any]",
    receive: Callable[[], Awaitable[Dict[str, Any]]],
) -> bool:
    """Wait for the next change on ``changes`` while watching the client.

    ``receive`` is an ASGI websocket receive. Returns True when a change
    arrived and False once the client disconnected. Anything else the
    client sends is ignored.
    """
    change = asyncio.ensure_future(changes.get())
    message = asyncio.ensure_future(receive())
    try:
        while True:
            done, _ = await asyncio.wait({change, message}, return_when=asyncio.FIRST_COMPLETED)
            if message in done:
                if message.result().get("type") == "websocket.disconnect":
                    return False
                if change not in done:
                    message = asyncio.ensure_future(receive())
                    continue
            return True
    finally:
        change.cancel()
        message.cancel()
