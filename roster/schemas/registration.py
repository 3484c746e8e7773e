from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Literal, Optional

from roster.models.user import Role
from roster.utils.formatters import format_name
from roster.utils.validators import validate_name, validate_email


class ModuleAccess(BaseModel):
    dashboard: bool = True
    financial: bool = False
    user_management: bool = False
    reports: bool = False
    documents: bool = True
    communication: bool = True


class Permissions(BaseModel):
    access_level: Literal["read", "write", "delete", "full"] = "read"
    modules: ModuleAccess = Field(default_factory=ModuleAccess)


class RegistrationDraft(BaseModel):
    """Everything typed into the wizard so far. Nothing here is validated strictly."""
    # Stage 1
    first_name: str = ""
    middle_name: Optional[str] = ""
    last_name: str = ""
    email: str = ""
    phone_number: str = ""
    country_code: str = "+55"
    password: str = ""
    security_question: str = ""
    security_answer: str = ""
    # Stage 2
    role: Role = Role.STANDARD
    department: str = ""
    profile_photo: Optional[str] = None
    communication_preference: Literal["email", "phone", "both"] = "email"
    # Stage 3
    permissions: Permissions = Field(default_factory=Permissions)
    # Stage 4
    terms_accepted: bool = False
    privacy_accepted: bool = False
    corporate_email: Optional[str] = None

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name or "", self.last_name]
        return " ".join(p.strip() for p in parts if p and p.strip())


def _clean_name(value: str) -> str:
    value = format_name(value).strip()
    error = validate_name(value)
    if error:
        raise ValueError(error)
    return value


class BasicInfoStage(BaseModel):
    first_name: str
    middle_name: Optional[str] = ""
    last_name: str
    email: str
    phone_number: str = Field(..., min_length=8, max_length=20)
    country_code: str = Field("+55", pattern=r"^\+\d{1,3}$")
    password: str = Field(..., min_length=8, max_length=72)
    security_question: str = Field(..., min_length=1)
    security_answer: str = Field(..., min_length=1)

    @field_validator("first_name", "last_name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("middle_name")
    @classmethod
    def check_middle_name(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return ""
        return _clean_name(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = v.strip().lower()
        error = validate_email(v)
        if error:
            raise ValueError(error)
        return v


class RoleSelectionStage(BaseModel):
    role: Role
    department: str = Field(..., min_length=1, max_length=100)
    profile_photo: Optional[str] = None
    communication_preference: Literal["email", "phone", "both"] = "email"


class PermissionsStage(BaseModel):
    permissions: Permissions


class VerificationStage(BaseModel):
    terms_accepted: bool
    privacy_accepted: bool
    corporate_email: Optional[str] = None

    @field_validator("terms_accepted", "privacy_accepted")
    @classmethod
    def must_accept(cls, v: bool) -> bool:
        if not v:
            raise ValueError("Must be accepted to finish registration")
        return v

    @field_validator("corporate_email")
    @classmethod
    def check_corporate_email(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        error = validate_email(v)
        if error:
            raise ValueError(error)
        return v.strip().lower()


class StageStateResponse(BaseModel):
    id: int
    title: str
    description: str
    is_complete: bool


class RegistrationStateResponse(BaseModel):
    current_stage: int
    can_advance: bool
    can_go_back: bool
    stages: List[StageStateResponse]
    data: Dict[str, Any]  # draft without secrets


class FieldError(BaseModel):
    field: str
    message: str
