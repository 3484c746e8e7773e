# roster/services/registration.py
"""
Four-stage operator registration wizard.

The draft, the current stage index and the completed stages are written
to a ``DraftStore`` on every change and read back once when the wizard is
built, so a device that reloads resumes where it stopped. Nothing reaches
the database until the final stage is submitted.
"""
import enum
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from roster.schemas.registration import (
    RegistrationDraft, BasicInfoStage, RoleSelectionStage, PermissionsStage, VerificationStage,
)
from roster.services.drafts import DraftStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Stage(enum.IntEnum):
    BASIC_INFO = 1
    ROLE_SELECTION = 2
    PERMISSIONS = 3
    VERIFICATION = 4


STAGE_INFO = {
    Stage.BASIC_INFO: ("Basic information", "Personal data and credentials"),
    Stage.ROLE_SELECTION: ("Role and department", "Choose your role in the system"),
    Stage.PERMISSIONS: ("Permissions", "Configure access levels"),
    Stage.VERIFICATION: ("Verification", "Review and confirm your data"),
}

STAGE_FORMS: Dict[Stage, Type[BaseModel]] = {
    Stage.BASIC_INFO: BasicInfoStage,
    Stage.ROLE_SELECTION: RoleSelectionStage,
    Stage.PERMISSIONS: PermissionsStage,
    Stage.VERIFICATION: VerificationStage,
}

SECRET_FIELDS = {"password", "security_answer"}


class RegistrationError(Exception):
    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


@dataclass
class StageState:
    id: Stage
    title: str
    description: str
    is_complete: bool = False


def _initial_stages() -> List[StageState]:
    return [StageState(stage, *STAGE_INFO[stage]) for stage in Stage]


def _field_errors(exc: ValidationError) -> List[Dict[str, str]]:
    return [
        {"field": ".".join(str(p) for p in err["loc"]) or "__root__", "message": err["msg"]}
        for err in exc.errors()
    ]


class RegistrationWizard:
    DATA_KEY = "registration_data"
    STAGE_KEY = "registration_stage"
    COMPLETED_KEY = "registration_completed"

    def __init__(self, store: DraftStore, device_id: str):
        self._store = store
        self.device_id = device_id
        self.data = RegistrationDraft()
        self.current_stage = Stage.BASIC_INFO
        self.stages = _initial_stages()
        self._restore()

    def _key(self, name: str) -> str:
        return f"{self.device_id}:{name}"

    def _restore(self) -> None:
        try:
            raw_data = self._store.load(self._key(self.DATA_KEY))
            raw_stage = self._store.load(self._key(self.STAGE_KEY))
            raw_completed = self._store.load(self._key(self.COMPLETED_KEY))
            if raw_data is None and raw_stage is None:
                return
            data = RegistrationDraft.model_validate_json(raw_data) if raw_data else RegistrationDraft()
            stage = Stage(int(raw_stage)) if raw_stage else Stage.BASIC_INFO
            if raw_completed:
                completed = {Stage(int(s)) for s in json.loads(raw_completed)}
            else:
                # Reaching a stage requires completing every stage before it
                completed = {s for s in Stage if s < stage}
        except (ValidationError, ValueError, TypeError):
            logger.debug("Discarding unreadable registration draft for device %s", self.device_id)
            return

        self.data = data
        self.current_stage = stage
        for state in self.stages:
            state.is_complete = state.id in completed

    def _persist(self) -> None:
        completed = [int(s.id) for s in self.stages if s.is_complete]
        self._store.save(self._key(self.DATA_KEY), self.data.model_dump_json())
        self._store.save(self._key(self.STAGE_KEY), str(int(self.current_stage)))
        self._store.save(self._key(self.COMPLETED_KEY), json.dumps(completed))

    def _state(self, stage: Stage) -> StageState:
        return self.stages[stage - 1]

    @property
    def can_advance(self) -> bool:
        return self.current_stage < Stage.VERIFICATION and self._state(self.current_stage).is_complete

    @property
    def can_go_back(self) -> bool:
        return self.current_stage > Stage.BASIC_INFO

    def public_data(self) -> Dict[str, Any]:
        return self.data.model_dump(mode="json", exclude=SECRET_FIELDS)

    def save_progress(self, changes: Dict[str, Any]) -> RegistrationDraft:
        merged = self.data.model_dump()
        merged.update(changes)
        try:
            self.data = RegistrationDraft.model_validate(merged)
        except ValidationError as e:
            raise RegistrationError("Invalid draft values", _field_errors(e))
        self._persist()
        return self.data

    def complete_stage(self, stage: int, values: Dict[str, Any]) -> StageState:
        try:
            stage = Stage(stage)
        except ValueError:
            raise RegistrationError(f"Unknown stage {stage}")
        if stage != self.current_stage:
            raise RegistrationError("Only the current stage can be completed")

        form_cls = STAGE_FORMS[stage]
        submitted = {name: getattr(self.data, name) for name in form_cls.model_fields}
        submitted.update(values)
        try:
            form = form_cls.model_validate(submitted)
        except ValidationError as e:
            raise RegistrationError("Stage has invalid fields", _field_errors(e))

        state = self._state(stage)
        state.is_complete = True
        self.save_progress(form.model_dump())
        return state

    def next(self) -> Stage:
        if not self.can_advance:
            raise RegistrationError("Complete the current stage before moving on")
        self.current_stage = Stage(self.current_stage + 1)
        self._persist()
        return self.current_stage

    def previous(self) -> Stage:
        if not self.can_go_back:
            raise RegistrationError("Already at the first stage")
        self.current_stage = Stage(self.current_stage - 1)
        self._persist()
        return self.current_stage

    async def submit(self, submitter: Callable[[RegistrationDraft], Awaitable[T]]) -> T:
        """Hand the finished draft to ``submitter`` and forget it on success."""
        if self.current_stage != Stage.VERIFICATION or not self._state(Stage.VERIFICATION).is_complete:
            raise RegistrationError("Registration is not ready to be submitted")
        result = await submitter(self.data)
        self.clear()
        return result

    def clear(self) -> None:
        self._store.delete(self._key(self.DATA_KEY))
        self._store.delete(self._key(self.STAGE_KEY))
        self._store.delete(self._key(self.COMPLETED_KEY))
        self.data = RegistrationDraft()
        self.current_stage = Stage.BASIC_INFO
        self.stages = _initial_stages()
