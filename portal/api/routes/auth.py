"""
Auth endpoints.

Sign-in flows belong to the identity provider; these endpoints help the
sign-in page pick the right method and expose the synced local user.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from portal.core.auth_dependency import get_current_user, get_db
from portal.core.rate_limit import rate_limited
from portal.db.models.user import User
from portal.schemas.auth import CheckEmailResponse, UserResponse
from portal.services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/check-email", response_model=CheckEmailResponse, dependencies=[Depends(rate_limited)])
def check_email(
    email: str = Query(..., min_length=3, max_length=320, description="Email to look up"),
    db: Session = Depends(get_db),
):
    """
    Tell the sign-in page whether an email is registered and with which method.
    """
    if "@" not in email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid email")

    try:
        user = user_service.get_by_email(db, email)
    except Exception as e:
        logger.error(f"Failed to check email: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to check email"
        )

    if user is None:
        return CheckEmailResponse(exists=False)
    return CheckEmailResponse(exists=True, auth_method=user.auth_method)


@router.get("/me", response_model=UserResponse)
def get_me(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user)
