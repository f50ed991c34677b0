"""
Hacker-facing application endpoints.

A user owns exactly one application. It is created as an empty draft on
first read, edited with partial updates and submitted once.
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session

from portal.core.auth_dependency import get_db, get_refresh_signal, require_role
from portal.core.errors import PortalError
from portal.db.models.enums import UserRole
from portal.db.models.user import User
from portal.schemas.application import ApplicationResponse, ApplicationUpdate, ApplicationWithQuestions
from portal.schemas.options import FormOptionsResponse
from portal.schemas.wizard import StepValidationResponse
from portal.services import application_service, settings_service
from portal.services.refresh_signal import RefreshSignal
from portal.services.wizard import WizardStep, validate_step

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/applications", tags=["Applications"])

require_hacker = require_role(UserRole.HACKER)


@router.get("/options", response_model=FormOptionsResponse)
def get_form_options(user: User = Depends(require_hacker)):
    """Select options for the application form."""
    return FormOptionsResponse()


@router.get("/me", response_model=ApplicationWithQuestions)
def get_my_application(
    user: User = Depends(require_hacker),
    db: Session = Depends(get_db)
):
    """
    Return the current user's application, creating an empty draft if needed.

    The configured short-answer questions are embedded so the form can render
    them without a second request.
    """
    try:
        application = application_service.get_or_create_application(db, user)
        questions = settings_service.get_short_answer_questions(db)
        return application_service.with_questions(application, questions)
    except (HTTPException, PortalError):
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to load application: user_id={user.id}, error={e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load application"
        )


@router.patch("/me", response_model=ApplicationResponse)
def update_my_application(
    data: ApplicationUpdate,
    user: User = Depends(require_hacker),
    db: Session = Depends(get_db)
):
    """
    Save a partial update to the current user's draft.

    Only fields present in the body change. Returns 409 once submitted.
    """
    try:
        application = application_service.update_application(db, user, data)
        return ApplicationResponse.model_validate(application)
    except (HTTPException, PortalError):
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update application: user_id={user.id}, error={e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update application"
        )


@router.post("/me/submit", response_model=ApplicationResponse)
def submit_my_application(
    user: User = Depends(require_hacker),
    db: Session = Depends(get_db),
    signal: RefreshSignal = Depends(get_refresh_signal)
):
    """
    Submit the current user's draft.

    Returns 400 with the list of missing fields, or 409 if already submitted.
    """
    try:
        application = application_service.submit_application(db, user)
    except (HTTPException, PortalError):
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to submit application: user_id={user.id}, error={e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit application"
        )

    signal.trigger_refresh()
    logger.info(f"Application submitted: application_id={application.id}, user_id={user.id}")
    return ApplicationResponse.model_validate(application)


@router.post("/me/steps/{step}/validate", response_model=StepValidationResponse)
def validate_wizard_step(
    step: WizardStep,
    values: Dict[str, Any] = Body(...),
    user: User = Depends(require_hacker),
    db: Session = Depends(get_db)
):
    """Check one wizard step's values without saving anything."""
    questions = settings_service.get_short_answer_questions(db)
    _, errors = validate_step(step, values, questions)
    return StepValidationResponse(step=step.value, valid=not errors, errors=errors)
