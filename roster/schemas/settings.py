from pydantic import BaseModel, Field
from typing import Literal, Optional


class Preferences(BaseModel):
    theme: Literal["light", "dark", "system"] = "system"
    font_size: Literal["small", "medium", "large"] = "medium"
    contrast: int = Field(50, ge=0, le=100)
    animations: bool = True
    notifications: bool = True
    sound: bool = True
    language: str = "pt-BR"
    auto_save: bool = True
    high_contrast: bool = False
    reduced_motion: bool = False


class PreferencesUpdate(BaseModel):
    theme: Optional[Literal["light", "dark", "system"]] = None
    font_size: Optional[Literal["small", "medium", "large"]] = None
    contrast: Optional[int] = Field(None, ge=0, le=100)
    animations: Optional[bool] = None
    notifications: Optional[bool] = None
    sound: Optional[bool] = None
    language: Optional[str] = Field(None, min_length=2, max_length=10)
    auto_save: Optional[bool] = None
    high_contrast: Optional[bool] = None
    reduced_motion: Optional[bool] = None

    model_config = {"extra": "forbid"}


class PreferencesResponse(BaseModel):
    saved: bool
    settings: Preferences


DEFAULT_PREFERENCES = Preferences().model_dump()
