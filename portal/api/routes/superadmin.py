"""
Super-admin settings endpoints, one group per settings tab.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from portal.core.auth_dependency import get_db, get_refresh_signal, require_role
from portal.core.errors import PortalError
from portal.db.models.enums import UserRole
from portal.db.models.user import User
from portal.schemas.settings import (
    BatchSearchUsersRequest,
    BatchSearchUsersResponse,
    FoundUser,
    ReviewAssignmentToggleRequest,
    ReviewAssignmentToggleResponse,
    ReviewsPerAppRequest,
    ReviewsPerAppResponse,
    SetRoleRequest,
    ShortAnswerQuestionsRequest,
    ShortAnswerQuestionsResponse,
    TabPanelsResponse,
)
from portal.schemas.auth import UserResponse
from portal.services import settings_service, tab_panels, user_service
from portal.services.refresh_signal import RefreshSignal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/superadmin", tags=["Super Admin"])

require_super_admin = require_role(UserRole.SUPER_ADMIN)


def _server_error(db: Session, action: str, e: Exception) -> HTTPException:
    db.rollback()
    logger.error(f"Failed to {action}: {e}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}"
    )


@router.get("/settings/tabs", response_model=TabPanelsResponse)
def get_settings_tabs(
    user: User = Depends(require_super_admin),
    db: Session = Depends(get_db)
):
    return tab_panels.list_tabs(db, user.id)


@router.get("/settings/saquestions", response_model=ShortAnswerQuestionsResponse)
def get_short_answer_questions(
    user: User = Depends(require_super_admin),
    db: Session = Depends(get_db)
):
    return ShortAnswerQuestionsResponse(questions=settings_service.get_short_answer_questions(db))


@router.put("/settings/saquestions", response_model=ShortAnswerQuestionsResponse)
def update_short_answer_questions(
    data: ShortAnswerQuestionsRequest,
    user: User = Depends(require_super_admin),
    db: Session = Depends(get_db),
    signal: RefreshSignal = Depends(get_refresh_signal)
):
    """Replace the full list of short-answer questions. Question ids must be unique."""
    try:
        questions = settings_service.update_short_answer_questions(db, data.questions)
    except (HTTPException, PortalError):
        raise
    except Exception as e:
        raise _server_error(db, "update short answer questions", e)

    signal.trigger_refresh()
    return ShortAnswerQuestionsResponse(questions=questions)


@router.get("/settings/reviews-per-app", response_model=ReviewsPerAppResponse)
def get_reviews_per_application(
    user: User = Depends(require_super_admin),
    db: Session = Depends(get_db)
):
    return ReviewsPerAppResponse(reviews_per_application=settings_service.get_reviews_per_application(db))


@router.post("/settings/reviews-per-app", response_model=ReviewsPerAppResponse)
def set_reviews_per_application(
    data: ReviewsPerAppRequest,
    user: User = Depends(require_super_admin),
    db: Session = Depends(get_db),
    signal: RefreshSignal = Depends(get_refresh_signal)
):
    try:
        value = settings_service.set_reviews_per_application(db, data.reviews_per_application)
    except (HTTPException, PortalError):
        raise
    except Exception as e:
        raise _server_error(db, "set reviews per application", e)

    signal.trigger_refresh()
    return ReviewsPerAppResponse(reviews_per_application=value)


@router.get("/settings/review-assignment-enabled", response_model=ReviewAssignmentToggleResponse)
def get_review_assignment_toggle(
    user: User = Depends(require_super_admin),
    db: Session = Depends(get_db)
):
    return ReviewAssignmentToggleResponse(enabled=settings_service.get_review_assignment_enabled(db, user.id))


@router.post("/settings/review-assignment-enabled", response_model=ReviewAssignmentToggleResponse)
def set_review_assignment_toggle(
    data: ReviewAssignmentToggleRequest,
    user: User = Depends(require_super_admin),
    db: Session = Depends(get_db),
    signal: RefreshSignal = Depends(get_refresh_signal)
):
    try:
        enabled = settings_service.set_review_assignment_enabled(db, user.id, data.enabled)
    except (HTTPException, PortalError):
        raise
    except Exception as e:
        raise _server_error(db, "toggle review assignment", e)

    signal.trigger_refresh()
    return ReviewAssignmentToggleResponse(enabled=enabled)


@router.post("/users/search", response_model=BatchSearchUsersResponse)
def search_users(
    data: BatchSearchUsersRequest,
    user: User = Depends(require_super_admin),
    db: Session = Depends(get_db)
):
    """Look up to 50 users by email. Unknown emails are listed in ``not_found``."""
    found, not_found = user_service.batch_search_users(db, [str(email) for email in data.emails])
    return BatchSearchUsersResponse(
        found=[FoundUser.model_validate(u) for u in found],
        not_found=not_found,
    )


@router.post("/users/role", response_model=UserResponse)
def set_user_role(
    data: SetRoleRequest,
    user: User = Depends(require_super_admin),
    db: Session = Depends(get_db),
    signal: RefreshSignal = Depends(get_refresh_signal)
):
    try:
        updated = user_service.set_user_role(db, str(data.email), data.role)
    except (HTTPException, PortalError):
        raise
    except Exception as e:
        raise _server_error(db, "set user role", e)

    signal.trigger_refresh()
    logger.info(f"Role set by super admin: admin_id={user.id}, user_id={updated.id}, role={data.role.value}")
    return UserResponse.model_validate(updated)
