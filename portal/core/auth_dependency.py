import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from portal.core.errors import AuthMethodMismatchError, ConflictError
from portal.core.security import decode_session_token
from portal.db.models.enums import ROLE_LEVELS, UserRole
from portal.db.models.user import User
from portal.db.session import SessionLocal
from portal.services import user_service
from portal.services.refresh_signal import RefreshSignal

logger = logging.getLogger(__name__)

# Sessions are issued by the identity provider; there is no local login form
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/signin", auto_error=False)


def get_db():
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Verify the session and return the synced local user."""
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")

    try:
        claims = decode_session_token(token)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid session")

    try:
        return user_service.sync_user_from_claims(db, claims)
    except AuthMethodMismatchError as e:
        logger.warning(f"Auth method mismatch: expected={e.expected}, got={e.got}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.user_message)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


def require_role(role: UserRole):
    """Admit users whose role level is at least ``role``'s."""

    def dependency(user: User = Depends(get_current_user)) -> User:
        if ROLE_LEVELS[user.role] < ROLE_LEVELS[role]:
            logger.warning(f"Forbidden: user_id={user.id}, role={user.role.value}, required={role.value}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")
        return user

    return dependency


def get_refresh_signal(request: Request) -> RefreshSignal:
    return request.app.state.refresh_signal
