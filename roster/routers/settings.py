# roster/routers/settings.py
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError

from roster.dependencies import get_settings_store
from roster.schemas.settings import Preferences, PreferencesResponse
from roster.services.settings_store import SettingsStore

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=Preferences)
async def get_settings(store: SettingsStore = Depends(get_settings_store)):
    return store.current()


@router.patch("", response_model=PreferencesResponse)
async def update_settings(
    changes: Dict[str, Any] = Body(...),
    store: SettingsStore = Depends(get_settings_store)
):
    try:
        partial = store.validate(changes)
    except ValidationError as e:
        raise HTTPException(422, e.errors(include_url=False, include_context=False))
    saved = await store.update(partial)
    if not saved:
        raise HTTPException(500, "Error updating settings")
    return PreferencesResponse(saved=saved, settings=store.current())


@router.post("/reset", response_model=PreferencesResponse)
async def reset_settings(store: SettingsStore = Depends(get_settings_store)):
    saved = await store.reset()
    if not saved:
        raise HTTPException(500, "Error restoring settings")
    return PreferencesResponse(saved=saved, settings=store.current())
