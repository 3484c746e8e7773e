from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional

from roster.models.driver import DriverStatus
from roster.utils.formatters import format_name, format_cpf, only_digits
from roster.utils.validators import validate_name, validate_cpf


def _clean_name(v: str) -> str:
    v = format_name(v).strip()
    error = validate_name(v)
    if error:
        raise ValueError(error)
    return v


class DriverCreate(BaseModel):
    name: str
    cpf: str
    admission_date: date
    status: DriverStatus = DriverStatus.ACTIVE

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("cpf")
    @classmethod
    def check_cpf(cls, v: str) -> str:
        error = validate_cpf(v)
        if error:
            raise ValueError(error)
        return only_digits(v)


class DriverUpdate(BaseModel):
    name: Optional[str] = None
    status: Optional[DriverStatus] = None
    admission_date: Optional[date] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: Optional[str]) -> Optional[str]:
        return _clean_name(v) if v is not None else v


class DriverResponse(BaseModel):
    id: int
    name: str
    cpf: str
    admission_date: date
    status: DriverStatus
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("cpf")
    @classmethod
    def display_cpf(cls, v: str) -> str:
        return format_cpf(v)
