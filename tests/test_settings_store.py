import asyncio

import pytest
from pydantic import ValidationError

from roster.schemas.settings import DEFAULT_PREFERENCES
from roster.services.settings_store import SettingsRegistry, SettingsStore

DELAY = 0.02


class FakeBackend:
    def __init__(self, stored=None):
        self.stored = stored
        self.writes = []
        self.fail_fetch = False
        self.fail_upsert = False

    async def fetch(self, user_id):
        if self.fail_fetch:
            raise ConnectionError("database unavailable")
        return self.stored

    async def upsert(self, user_id, settings):
        if self.fail_upsert:
            raise ConnectionError("database unavailable")
        self.writes.append(dict(settings))
        self.stored = dict(settings)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def store(backend):
    return SettingsStore(backend, user_id=1, delay=DELAY)


async def test_load_merges_stored_values_over_defaults(backend, store):
    backend.stored = {"theme": "dark"}
    loaded = await store.load()
    assert loaded == {**DEFAULT_PREFERENCES, "theme": "dark"}


async def test_load_fetches_only_once(backend, store):
    await store.load()
    backend.stored = {"theme": "dark"}
    assert (await store.load())["theme"] == "system"


async def test_load_falls_back_to_defaults_on_error(backend, store):
    backend.fail_fetch = True
    assert await store.load() == DEFAULT_PREFERENCES


async def test_load_falls_back_to_defaults_on_invalid_row(backend, store):
    backend.stored = {"contrast": 500}
    assert await store.load() == DEFAULT_PREFERENCES


async def test_rapid_updates_are_written_once_with_all_changes(backend, store):
    await store.load()
    first = store.update({"theme": "dark"})
    second = store.update({"font_size": "large"})
    third = store.update({"contrast": 70})

    assert await asyncio.gather(first, second, third) == [True, True, True]
    assert len(backend.writes) == 1
    assert backend.writes[0] == {**DEFAULT_PREFERENCES, "theme": "dark", "font_size": "large", "contrast": 70}
    assert store.current()["contrast"] == 70


async def test_updates_spaced_past_the_delay_write_separately(backend, store):
    assert await store.update({"theme": "dark"})
    assert await store.update({"theme": "light"})
    assert [w["theme"] for w in backend.writes] == ["dark", "light"]


async def test_nothing_is_written_before_the_delay(backend):
    store = SettingsStore(backend, user_id=1, delay=5)
    pending = store.update({"theme": "dark"})
    await asyncio.sleep(0.05)
    assert backend.writes == []
    assert store.current()["theme"] == "system"
    await store.aclose()
    assert await pending is True


async def test_subscriber_is_called_immediately_and_after_saves(store):
    seen = []
    store.subscribe(seen.append)
    assert seen == [DEFAULT_PREFERENCES]

    await store.update({"theme": "dark"})
    assert len(seen) == 2
    assert seen[-1]["theme"] == "dark"


async def test_subscriber_hears_loaded_values(backend, store):
    backend.stored = {"language": "en-US"}
    seen = []
    store.subscribe(seen.append)
    await store.load()
    assert seen[-1]["language"] == "en-US"


async def test_unsubscribe_stops_notifications(store):
    seen = []
    unsubscribe = store.subscribe(seen.append)
    unsubscribe()
    unsubscribe()
    await store.update({"theme": "dark"})
    assert len(seen) == 1


async def test_failing_subscriber_does_not_block_others(store):
    def broken(values):
        raise RuntimeError("boom")

    seen = []
    store.subscribe(broken)
    store.subscribe(seen.append)
    assert await store.update({"sound": False})
    assert seen[-1]["sound"] is False


async def test_failed_write_keeps_last_saved_values(backend, store):
    seen = []
    store.subscribe(seen.append)
    backend.fail_upsert = True

    assert await store.update({"theme": "dark"}) is False
    assert store.current()["theme"] == "system"
    assert len(seen) == 1

    backend.fail_upsert = False
    assert await store.update({"font_size": "small"}) is True
    # the failed batch is not retried
    assert backend.writes[-1]["theme"] == "system"
    assert backend.writes[-1]["font_size"] == "small"


async def test_reset_restores_defaults(store):
    await store.update({"theme": "dark", "contrast": 10})
    assert await store.reset()
    assert store.current() == DEFAULT_PREFERENCES


def test_validate_keeps_only_given_keys():
    assert SettingsStore.validate({"contrast": 20}) == {"contrast": 20}


@pytest.mark.parametrize("partial", [{"theme": "neon"}, {"contrast": 101}, {"wallpaper": "cats"}])
def test_validate_rejects_bad_values(partial):
    with pytest.raises(ValidationError):
        SettingsStore.validate(partial)


async def test_registry_keeps_one_store_per_user(backend):
    registry = SettingsRegistry(backend, delay=DELAY)
    assert registry.get(1) is registry.get(1)
    assert registry.get(1) is not registry.get(2)

    pending = registry.get(2).update({"theme": "dark"})
    await registry.aclose()
    assert pending.done() and pending.result() is True


class SlowBackend(FakeBackend):
    def __init__(self):
        super().__init__()
        self.in_flight = 0
        self.max_in_flight = 0

    async def upsert(self, user_id, settings):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0.05)
        self.in_flight -= 1
        await super().upsert(user_id, settings)


async def test_update_during_a_slow_write_keeps_both_changes():
    backend = SlowBackend()
    store = SettingsStore(backend, user_id=1, delay=DELAY)

    first = store.update({"theme": "dark"})
    while backend.in_flight == 0:
        await asyncio.sleep(0.005)
    second = store.update({"sound": False})

    assert await asyncio.gather(first, second) == [True, True]
    assert backend.max_in_flight == 1
    assert backend.stored["theme"] == "dark"
    assert backend.stored["sound"] is False
    assert store.current()["theme"] == "dark"
    assert store.current()["sound"] is False
