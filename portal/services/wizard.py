"""
Application wizard as an explicit finite-state machine.

The wizard walks an applicant through ordered steps, validating each step
locally before moving forward and accumulating answers in a draft held in
memory. Nothing is persisted until ``submit`` hands the draft to a submitter.

States and transitions are data (``TRANSITIONS``), so every transition can be
exercised directly without a client or HTTP.
"""
import enum
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.core.errors import ConflictError, NotFoundError, PortalError, ValidationFailed
from portal.db.models.user import User
from portal.schemas.application import ApplicationUpdate
from portal.schemas.settings import ShortAnswerQuestion
from portal.schemas.wizard import (
    AcknowledgmentsStep,
    EventInfoStep,
    ExperienceStep,
    PersonalInfoStep,
    SchoolInfoStep,
    ShortAnswerStep,
    SponsorInfoStep,
)
from portal.services import application_service
from portal.services.refresh_signal import RefreshSignal

logger = logging.getLogger(__name__)


class WizardStep(str, enum.Enum):
    PERSONAL = "personal"
    SCHOOL = "school"
    EXPERIENCE = "experience"
    SHORT_ANSWERS = "short_answers"
    EVENT = "event"
    SPONSOR = "sponsor"
    REVIEW = "review"


STEP_ORDER: List[WizardStep] = list(WizardStep)

STEP_SCHEMAS: Dict[WizardStep, Type[BaseModel]] = {
    WizardStep.PERSONAL: PersonalInfoStep,
    WizardStep.SCHOOL: SchoolInfoStep,
    WizardStep.EXPERIENCE: ExperienceStep,
    WizardStep.SHORT_ANSWERS: ShortAnswerStep,
    WizardStep.EVENT: EventInfoStep,
    WizardStep.SPONSOR: SponsorInfoStep,
    WizardStep.REVIEW: AcknowledgmentsStep,
}

# Which step owns each answer field
FIELD_STEPS: Dict[str, WizardStep] = {
    field: step
    for step, schema in STEP_SCHEMAS.items()
    for field in schema.model_fields
}


class WizardState(str, enum.Enum):
    EDITING = "editing"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    ERROR = "error"


class WizardEvent(str, enum.Enum):
    VALIDATE = "validate"
    NEXT = "next"
    VALIDATION_FAILED = "validation_failed"
    BACK = "back"
    GO_TO = "go_to"
    SUBMIT = "submit"
    SUBMIT_SUCCEEDED = "submit_succeeded"
    SUBMIT_FAILED = "submit_failed"
    DISMISS_ERROR = "dismiss_error"


TRANSITIONS: Dict[Tuple[WizardState, WizardEvent], WizardState] = {
    (WizardState.EDITING, WizardEvent.VALIDATE): WizardState.VALIDATING,
    (WizardState.ERROR, WizardEvent.VALIDATE): WizardState.VALIDATING,
    (WizardState.VALIDATING, WizardEvent.NEXT): WizardState.EDITING,
    (WizardState.VALIDATING, WizardEvent.VALIDATION_FAILED): WizardState.EDITING,
    (WizardState.VALIDATING, WizardEvent.SUBMIT): WizardState.SUBMITTING,
    (WizardState.EDITING, WizardEvent.BACK): WizardState.EDITING,
    (WizardState.ERROR, WizardEvent.BACK): WizardState.EDITING,
    (WizardState.EDITING, WizardEvent.GO_TO): WizardState.EDITING,
    (WizardState.ERROR, WizardEvent.GO_TO): WizardState.EDITING,
    (WizardState.SUBMITTING, WizardEvent.SUBMIT_SUCCEEDED): WizardState.SUBMITTED,
    (WizardState.SUBMITTING, WizardEvent.SUBMIT_FAILED): WizardState.ERROR,
    (WizardState.ERROR, WizardEvent.DISMISS_ERROR): WizardState.EDITING,
}


class InvalidTransition(Exception):
    def __init__(self, state: WizardState, event: WizardEvent, reason: Optional[str] = None):
        self.state = state
        self.event = event
        message = f"cannot {event.value} while {state.value}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class SubmissionError(Exception):
    """Raised by a submitter; ``step`` names the step the user must fix."""

    def __init__(self, message: str, step: Optional[WizardStep] = None):
        super().__init__(message)
        self.message = message
        self.step = step


Submitter = Callable[[Dict[str, Any]], Any]


def _format_errors(exc: ValidationError) -> Dict[str, str]:
    errors = {}
    for error in exc.errors():
        key = ".".join(str(part) for part in error["loc"]) or "__root__"
        errors.setdefault(key, error["msg"])
    return errors


def validate_step(
    step: WizardStep,
    values: Dict[str, Any],
    questions: Optional[List[ShortAnswerQuestion]] = None,
) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """
    Validate ``values`` against one step.

    Returns (cleaned values, errors). Errors map a field path to a message;
    cleaned values are empty when validation fails. On the short-answers step
    every required question must have a non-blank answer.
    """
    schema = STEP_SCHEMAS[step]
    try:
        model = schema.model_validate(values)
    except ValidationError as exc:
        return {}, _format_errors(exc)

    cleaned = model.model_dump(mode="json")
    errors: Dict[str, str] = {}
    if step == WizardStep.SHORT_ANSWERS:
        responses = cleaned.get("short_answer_responses", {})
        for question in questions or []:
            if question.required and not (responses.get(question.id) or "").strip():
                errors[f"short_answer:{question.id}"] = "This question is required"
    if errors:
        return {}, errors
    return cleaned, errors


class ApplicationWizard:
    """
    Multi-step application form.

    ``initial`` pre-fills the draft (for example from a saved application).
    ``user_email`` is copied into the draft as ``email`` and step values can
    never overwrite it.
    """

    def __init__(
        self,
        questions: Optional[List[ShortAnswerQuestion]] = None,
        user_email: Optional[str] = None,
        initial: Optional[Dict[str, Any]] = None,
    ):
        self.questions = list(questions or [])
        self.user_email = user_email
        self.state = WizardState.EDITING
        self.current_step = STEP_ORDER[0]
        self.furthest_step_index = 0
        self.errors: Dict[str, str] = {}
        self.error_message: Optional[str] = None
        self._draft: Dict[str, Any] = {}
        if initial:
            self._draft.update({k: v for k, v in initial.items() if k in FIELD_STEPS})
        if user_email is not None:
            self._draft["email"] = user_email

    @property
    def draft(self) -> Dict[str, Any]:
        return dict(self._draft)

    @property
    def step_index(self) -> int:
        return STEP_ORDER.index(self.current_step)

    @property
    def is_last_step(self) -> bool:
        return self.current_step == STEP_ORDER[-1]

    def transition(self, event: WizardEvent, reason: Optional[str] = None) -> WizardState:
        """Apply one event from the transition table."""
        target = TRANSITIONS.get((self.state, event))
        if target is None:
            raise InvalidTransition(self.state, event, reason)
        logger.debug(f"Wizard transition: {self.state.value} --{event.value}--> {target.value}")
        self.state = target
        return target

    def _merge(self, cleaned: Dict[str, Any]) -> None:
        for field, value in cleaned.items():
            if field == "email":
                continue
            self._draft[field] = value

    def next(self, values: Dict[str, Any]) -> Dict[str, str]:
        """
        Validate the current step and advance.

        Returns the per-field errors; an empty dict means the wizard moved on.
        A failed step leaves the draft untouched.
        """
        if self.is_last_step:
            raise InvalidTransition(self.state, WizardEvent.NEXT, "already on the last step")

        self.transition(WizardEvent.VALIDATE)
        self.error_message = None
        cleaned, errors = validate_step(self.current_step, values, self.questions)
        if errors:
            self.errors = errors
            self.transition(WizardEvent.VALIDATION_FAILED)
            return errors

        self._merge(cleaned)
        self.errors = {}
        self.transition(WizardEvent.NEXT)
        self.current_step = STEP_ORDER[self.step_index + 1]
        self.furthest_step_index = max(self.furthest_step_index, self.step_index)
        return {}

    def back(self) -> WizardStep:
        self.transition(WizardEvent.BACK)
        self.errors = {}
        if self.step_index > 0:
            self.current_step = STEP_ORDER[self.step_index - 1]
        return self.current_step

    def go_to(self, step: WizardStep) -> WizardStep:
        step = WizardStep(step)
        if STEP_ORDER.index(step) > self.furthest_step_index:
            raise InvalidTransition(self.state, WizardEvent.GO_TO, f"step {step.value} not visited yet")
        self.transition(WizardEvent.GO_TO)
        self.errors = {}
        self.current_step = step
        return step

    def dismiss_error(self) -> None:
        self.transition(WizardEvent.DISMISS_ERROR)
        self.error_message = None

    def validate_all(self, draft: Optional[Dict[str, Any]] = None) -> Tuple[Optional[WizardStep], Dict[str, str]]:
        """Validate every step against the draft; returns the first failing step and its errors."""
        draft = self._draft if draft is None else draft
        for step in STEP_ORDER:
            fields = STEP_SCHEMAS[step].model_fields
            _, errors = validate_step(step, {k: v for k, v in draft.items() if k in fields}, self.questions)
            if errors:
                return step, errors
        return None, {}

    def payload(self) -> Dict[str, Any]:
        """The draft as handed to a submitter."""
        return self.draft

    def submit(self, submitter: Submitter, values: Optional[Dict[str, Any]] = None) -> WizardState:
        """
        Validate everything and hand the draft to ``submitter``.

        ``values`` are the review step's own answers (the acknowledgements).
        Calling this while a submission is in flight or after success does
        nothing.
        """
        if self.state in (WizardState.SUBMITTING, WizardState.SUBMITTED):
            return self.state
        if self.current_step != WizardStep.REVIEW:
            raise InvalidTransition(self.state, WizardEvent.SUBMIT, "submit is only available on the review step")

        self.transition(WizardEvent.VALIDATE)
        candidate = dict(self._draft)
        if values:
            candidate.update({k: v for k, v in values.items() if k != "email"})

        failing_step, errors = self.validate_all(candidate)
        if failing_step is not None:
            self.errors = errors
            self.current_step = failing_step
            self.transition(WizardEvent.VALIDATION_FAILED)
            return self.state

        review_fields = STEP_SCHEMAS[WizardStep.REVIEW].model_fields
        cleaned, _ = validate_step(WizardStep.REVIEW, {k: v for k, v in candidate.items() if k in review_fields})
        self._merge(cleaned)
        self.errors = {}
        self.error_message = None
        self.transition(WizardEvent.SUBMIT)

        try:
            submitter(self.payload())
        except SubmissionError as exc:
            self.error_message = exc.message
            self.current_step = exc.step or WizardStep.REVIEW
            self.transition(WizardEvent.SUBMIT_FAILED)
            logger.warning(f"Wizard submission failed: step={self.current_step.value}, error={exc.message}")
            return self.state
        except Exception as e:
            logger.error(f"Wizard submitter raised unexpectedly: error={e}", exc_info=True)
            self.error_message = "submission failed"
            self.current_step = WizardStep.REVIEW
            self.transition(WizardEvent.SUBMIT_FAILED)
            return self.state

        self.transition(WizardEvent.SUBMIT_SUCCEEDED)
        return self.state


class ApplicationServiceSubmitter:
    """
    Saves the wizard draft on the user's application and submits it.

    When ``signal`` is given it is triggered once the submission commits.
    """

    def __init__(self, db: Session, user: User, signal: Optional[RefreshSignal] = None):
        self.db = db
        self.user = user
        self.signal = signal

    def __call__(self, draft: Dict[str, Any]):
        fields = {
            key: value
            for key, value in draft.items()
            if key in FIELD_STEPS and not (isinstance(value, str) and not value.strip())
        }
        try:
            update = ApplicationUpdate(**fields)
        except ValidationError as exc:
            errors = _format_errors(exc)
            field = next(iter(errors)).split(".")[0]
            raise SubmissionError(f"invalid value for {field}", step=FIELD_STEPS.get(field))

        try:
            application_service.get_or_create_application(self.db, self.user)
            application_service.update_application(self.db, self.user, update)
            application = application_service.submit_application(self.db, self.user)
        except ValidationFailed as exc:
            raise SubmissionError(str(exc), step=self._step_for(exc.missing))
        except (ConflictError, NotFoundError) as exc:
            raise SubmissionError(str(exc))
        except PortalError as exc:
            logger.error(f"Unexpected submission error: user_id={self.user.id}, error={exc}", exc_info=True)
            raise SubmissionError("submission failed")
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Database error during submission: user_id={self.user.id}, error={exc}", exc_info=True)
            raise SubmissionError("submission failed")

        if self.signal is not None:
            self.signal.trigger_refresh()
        return application

    @staticmethod
    def _step_for(missing: List[str]) -> Optional[WizardStep]:
        if not missing:
            return None
        first = missing[0]
        if first.startswith("short_answer:"):
            return WizardStep.SHORT_ANSWERS
        return FIELD_STEPS.get(first)
