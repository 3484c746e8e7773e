# roster/dependencies.py
from datetime import date

from fastapi import Depends, Header, HTTPException, Request

from roster.core.auth import get_current_user
from roster.services.change_feed import ChangeFeed
from roster.services.drafts import DraftStore
from roster.services.registration import RegistrationWizard
from roster.services.settings_store import SettingsRegistry, SettingsStore


def get_today() -> date:
    return date.today()


def get_change_feed(request: Request) -> ChangeFeed:
    return request.app.state.change_feed


def get_draft_store(request: Request) -> DraftStore:
    return request.app.state.draft_store


def get_settings_registry(request: Request) -> SettingsRegistry:
    return request.app.state.settings_registry


async def get_settings_store(
    registry: SettingsRegistry = Depends(get_settings_registry),
    current_user = Depends(get_current_user)
) -> SettingsStore:
    store = registry.get(current_user.id)
    await store.load()
    return store


def get_wizard(
    x_device_id: str = Header(..., min_length=1, max_length=64),
    store: DraftStore = Depends(get_draft_store)
) -> RegistrationWizard:
    device_id = x_device_id.strip()
    if not device_id:
        raise HTTPException(400, "X-Device-Id header is required")
    return RegistrationWizard(store, device_id)
