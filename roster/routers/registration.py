# roster/routers/registration.py
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database import get_db
from roster.dependencies import get_wizard
from roster.models.user import User
from roster.schemas.registration import RegistrationDraft, RegistrationStateResponse, StageStateResponse
from roster.schemas.user import UserResponse
from roster.services.registration import RegistrationError, RegistrationWizard
from roster.utils.password import hash_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/registration", tags=["registration"])


def _state(wizard: RegistrationWizard) -> RegistrationStateResponse:
    return RegistrationStateResponse(
        current_stage=int(wizard.current_stage),
        can_advance=wizard.can_advance,
        can_go_back=wizard.can_go_back,
        stages=[
            StageStateResponse(id=int(s.id), title=s.title, description=s.description, is_complete=s.is_complete)
            for s in wizard.stages
        ],
        data=wizard.public_data(),
    )


def _bad_request(e: RegistrationError) -> HTTPException:
    return HTTPException(400, {"message": e.message, "errors": e.errors})


@router.get("", response_model=RegistrationStateResponse)
async def get_registration(wizard: RegistrationWizard = Depends(get_wizard)):
    return _state(wizard)


@router.patch("/draft", response_model=RegistrationStateResponse)
async def save_draft(
    changes: Dict[str, Any] = Body(...),
    wizard: RegistrationWizard = Depends(get_wizard)
):
    try:
        wizard.save_progress(changes)
    except RegistrationError as e:
        raise _bad_request(e)
    return _state(wizard)


@router.post("/stages/{stage}", response_model=RegistrationStateResponse)
async def complete_stage(
    stage: int,
    values: Optional[Dict[str, Any]] = Body(None),
    wizard: RegistrationWizard = Depends(get_wizard)
):
    try:
        wizard.complete_stage(stage, values or {})
    except RegistrationError as e:
        raise _bad_request(e)
    return _state(wizard)


@router.post("/next", response_model=RegistrationStateResponse)
async def next_stage(wizard: RegistrationWizard = Depends(get_wizard)):
    try:
        wizard.next()
    except RegistrationError as e:
        raise _bad_request(e)
    return _state(wizard)


@router.post("/previous", response_model=RegistrationStateResponse)
async def previous_stage(wizard: RegistrationWizard = Depends(get_wizard)):
    try:
        wizard.previous()
    except RegistrationError as e:
        raise _bad_request(e)
    return _state(wizard)


@router.post("/submit", response_model=UserResponse, status_code=201)
async def submit_registration(
    wizard: RegistrationWizard = Depends(get_wizard),
    db: AsyncSession = Depends(get_db)
):
    async def create_account(draft: RegistrationDraft) -> User:
        existing = await db.execute(select(User).where(User.email == draft.email))
        if existing.scalar_one_or_none():
            raise RegistrationError("Email already registered", [{"field": "email", "message": "Email already registered"}])

        user = User(
            email=draft.email,
            full_name=draft.full_name,
            phone_number=f"{draft.country_code} {draft.phone_number}".strip(),
            hashed_password=hash_password(draft.password),
            role=draft.role.value,
            department=draft.department,
            communication_preference=draft.communication_preference,
            permissions=draft.permissions.model_dump(),
            security_question=draft.security_question,
            security_answer_hash=hash_password(draft.security_answer),
            corporate_email=draft.corporate_email,
            is_active=True,
        )
        db.add(user)
        try:
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Error creating account from registration draft")
            raise
        await db.refresh(user)
        return user

    try:
        user = await wizard.submit(create_account)
    except RegistrationError as e:
        raise _bad_request(e)
    except SQLAlchemyError:
        raise HTTPException(500, "Error completing registration. Try again.")
    logger.info("Registration completed for user %s (device %s)", user.id, wizard.device_id)
    return user
