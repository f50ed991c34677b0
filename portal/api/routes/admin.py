"""
Admin endpoints for reading and deciding on applications.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from portal.core.auth_dependency import get_db, get_refresh_signal, require_role
from portal.core.errors import PortalError
from portal.db.models.enums import ApplicationStatus, UserRole
from portal.db.models.user import User
from portal.schemas.application import (
    ApplicationListResult,
    ApplicationResponse,
    ApplicationStats,
    ApplicationWithQuestions,
    StatusDecisionRequest,
)
from portal.schemas.sections import ApplicationSections
from portal.services import application_service, settings_service
from portal.services.detail_sections import render_application_detail
from portal.services.refresh_signal import RefreshSignal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/admin", tags=["Admin"])

require_admin = require_role(UserRole.ADMIN)


@router.get("/refresh-key")
def get_refresh_key(
    user: User = Depends(require_admin),
    signal: RefreshSignal = Depends(get_refresh_signal)
):
    """Current refresh key; views re-fetch when it differs from the one they hold."""
    return {"refresh_key": signal.refresh_key}


@router.get("/applications", response_model=ApplicationListResult)
def list_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status", description="Filter by status"),
    cursor: Optional[str] = Query(None, description="Opaque cursor from a previous page"),
    direction: str = Query("forward", pattern="^(forward|backward)$"),
    limit: int = Query(application_service.DEFAULT_PAGE_SIZE, ge=1, le=application_service.MAX_PAGE_SIZE),
    user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    List applications newest first with cursor pagination.
    """
    try:
        return application_service.list_applications(
            db, status=status_filter, cursor=cursor, direction=direction, limit=limit
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to list applications: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list applications"
        )


@router.get("/applications/stats", response_model=ApplicationStats)
def get_application_stats(
    user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        return application_service.get_application_stats(db)
    except Exception as e:
        logger.error(f"Failed to compute application stats: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute application stats"
        )


@router.get("/applications/{application_id}", response_model=ApplicationWithQuestions)
def get_application(
    application_id: str,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    application = application_service.get_application_by_id(db, application_id)
    questions = settings_service.get_short_answer_questions(db)
    return application_service.with_questions(application, questions)


@router.get("/applications/{application_id}/sections", response_model=ApplicationSections)
def get_application_sections(
    application_id: str,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Read-only detail sections, ready to display."""
    application = application_service.get_application_by_id(db, application_id)
    questions = settings_service.get_short_answer_questions(db)
    sections = render_application_detail(ApplicationResponse.model_validate(application), questions)
    return ApplicationSections(application_id=application.id, sections=sections)


@router.patch("/applications/{application_id}/status", response_model=ApplicationResponse)
def set_application_status(
    application_id: str,
    decision: StatusDecisionRequest,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
    signal: RefreshSignal = Depends(get_refresh_signal)
):
    """
    Accept, reject or waitlist a submitted application.

    Decisions are final; changing one returns 409.
    """
    try:
        application = application_service.set_application_status(db, application_id, decision.status)
    except (HTTPException, PortalError):
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to set application status: application_id={application_id}, error={e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to set application status"
        )

    signal.trigger_refresh()
    logger.info(f"Decision recorded: application_id={application_id}, admin_id={user.id}, status={decision.status.value}")
    return ApplicationResponse.model_validate(application)
