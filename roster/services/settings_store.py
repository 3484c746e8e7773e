# roster/services/settings_store.py
"""
Per-user display and accessibility preferences.

Each ``SettingsStore`` keeps the last persisted preferences in memory and
writes changes through a ``SettingsBackend``. Writes are debounced: every
``update`` call cancels the pending timer and starts a new one, and only
when it fires is the accumulated batch persisted. Subscribers hear about
new values only after the write succeeded.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Set

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from roster.models.settings import UserSettings
from roster.schemas.settings import Preferences, PreferencesUpdate, DEFAULT_PREFERENCES

logger = logging.getLogger(__name__)

SettingsCallback = Callable[[Dict[str, Any]], None]


class SettingsBackend(Protocol):
    async def fetch(self, user_id: int) -> Optional[Dict[str, Any]]: ...

    async def upsert(self, user_id: int, settings: Dict[str, Any]) -> None: ...


class SqlSettingsBackend:
    """Stores one JSON row per user in ``user_settings``; last write wins."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def fetch(self, user_id: int) -> Optional[Dict[str, Any]]:
        async with self._session_factory() as db:
            row = await db.get(UserSettings, user_id)
            return dict(row.settings) if row is not None else None

    async def upsert(self, user_id: int, settings: Dict[str, Any]) -> None:
        async with self._session_factory() as db:
            row = await db.get(UserSettings, user_id)
            if row is None:
                db.add(UserSettings(user_id=user_id, settings=settings))
            else:
                row.settings = settings
            await db.commit()


class SettingsStore:
    def __init__(self, backend: SettingsBackend, user_id: int, delay: float = 0.5):
        self.user_id = user_id
        self.delay = delay
        self._backend = backend
        self._current: Dict[str, Any] = dict(DEFAULT_PREFERENCES)
        self._loaded = False
        self._subscribers: List[SettingsCallback] = []
        self._pending: Dict[str, Any] = {}
        self._waiters: List["asyncio.Future[bool]"] = []
        self._timer: Optional[asyncio.TimerHandle] = None
        self._flushes: Set["asyncio.Task[None]"] = set()
        # One write at a time, each merged over the result of the one before
        self._write_lock = asyncio.Lock()

    def current(self) -> Dict[str, Any]:
        return dict(self._current)

    async def load(self) -> Dict[str, Any]:
        """Fetch the user's row once; later calls return the cached copy."""
        if self._loaded:
            return self.current()
        try:
            stored = await self._backend.fetch(self.user_id)
            merged = Preferences.model_validate({**DEFAULT_PREFERENCES, **(stored or {})}).model_dump()
        except ValidationError:
            logger.warning("Stored settings for user %s are invalid; using defaults", self.user_id)
            return dict(DEFAULT_PREFERENCES)
        except Exception:
            logger.exception("Error loading settings for user %s", self.user_id)
            return dict(DEFAULT_PREFERENCES)

        if self._loaded:
            # another request finished loading while this one waited
            return self.current()
        self._current = merged
        self._loaded = True
        self._notify()
        return self.current()

    @staticmethod
    def validate(partial: Dict[str, Any]) -> Dict[str, Any]:
        """Return only the keys that were set, raising ValidationError on bad values."""
        return PreferencesUpdate.model_validate(partial).model_dump(exclude_unset=True)

    def update(self, partial: Dict[str, Any]) -> "asyncio.Future[bool]":
        """Queue ``partial`` for the next debounced write.

        The returned future resolves to True once the write that carries this
        change succeeded, or False if it failed. Calls superseded within the
        delay share the outcome of the write that absorbed them.
        """
        loop = asyncio.get_running_loop()
        self._pending.update(partial)
        waiter = loop.create_future()
        self._waiters.append(waiter)

        if self._timer is not None:
            self._timer.cancel()
        self._timer = loop.call_later(self.delay, self._start_flush)
        return waiter

    def reset(self) -> "asyncio.Future[bool]":
        return self.update(dict(DEFAULT_PREFERENCES))

    def _start_flush(self) -> None:
        self._timer = None
        batch, waiters = self._pending, self._waiters
        self._pending, self._waiters = {}, []
        task = asyncio.get_running_loop().create_task(self._flush(batch, waiters))
        self._flushes.add(task)
        task.add_done_callback(self._flushes.discard)

    async def _flush(self, batch: Dict[str, Any], waiters: List["asyncio.Future[bool]"]) -> None:
        async with self._write_lock:
            merged = {**self._current, **batch}
            try:
                await self._backend.upsert(self.user_id, merged)
            except Exception:
                # Cache keeps the last persisted values; this batch is dropped
                logger.exception("Error saving settings for user %s", self.user_id)
                ok = False
            else:
                self._current = merged
                ok = True
                self._notify()

        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(ok)

    def subscribe(self, callback: SettingsCallback) -> Callable[[], None]:
        self._subscribers.append(callback)
        self._call(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _call(self, callback: SettingsCallback) -> None:
        try:
            callback(self.current())
        except Exception:
            logger.exception("Settings subscriber %r failed", callback)

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            self._call(callback)

    async def aclose(self) -> None:
        """Write any pending batch now and wait for in-flight writes."""
        if self._timer is not None:
            self._timer.cancel()
            self._start_flush()
        if self._flushes:
            await asyncio.gather(*self._flushes)


class SettingsRegistry:
    """Owns one SettingsStore per user for the lifetime of the application."""

    def __init__(self, backend: SettingsBackend, delay: float = 0.5):
        self._backend = backend
        self.delay = delay
        self._stores: Dict[int, SettingsStore] = {}

    def get(self, user_id: int) -> SettingsStore:
        store = self._stores.get(user_id)
        if store is None:
            store = self._stores[user_id] = SettingsStore(self._backend, user_id, self.delay)
        return store

    async def aclose(self) -> None:
        for store in self._stores.values():
            await store.aclose()
