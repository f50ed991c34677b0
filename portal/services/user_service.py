"""
User service: syncs identity-provider sessions into local users and manages roles.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portal.core.errors import AuthMethodMismatchError, ConflictError, NotFoundError
from portal.db.models.enums import AuthMethod, UserRole
from portal.db.models.user import User
from portal.schemas.auth import SessionClaims

logger = logging.getLogger(__name__)


def get_by_identity_id(db: Session, identity_user_id: str) -> Optional[User]:
    return db.query(User).filter(User.identity_user_id == identity_user_id).first()


def get_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


def sync_user_from_claims(db: Session, claims: SessionClaims) -> User:
    """
    Return the local user for a verified session, creating it on first sign-in.

    New users start as hackers. A Google sign-in refreshes the stored profile
    picture when it changed.

    Raises:
        AuthMethodMismatchError: the email is registered with another sign-in method
        ConflictError: same email and method but a different identity id
    """
    user = get_by_identity_id(db, claims.sub)
    if user is not None:
        if user.auth_method == AuthMethod.GOOGLE and claims.picture and claims.picture != user.profile_picture_url:
            user.profile_picture_url = claims.picture
            db.commit()
            db.refresh(user)
            logger.debug(f"Profile picture updated: user_id={user.id}")
        return user

    existing = get_by_email(db, claims.email)
    if existing is not None:
        if existing.auth_method != claims.auth_method:
            raise AuthMethodMismatchError(expected=existing.auth_method.value, got=claims.auth_method.value)
        raise ConflictError("email already linked to another identity")

    user = User(
        identity_user_id=claims.sub,
        email=claims.email,
        role=UserRole.HACKER,
        auth_method=claims.auth_method,
        profile_picture_url=claims.picture if claims.auth_method == AuthMethod.GOOGLE else None,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Concurrent first request for the same identity
        db.rollback()
        user = get_by_identity_id(db, claims.sub)
        if user is None:
            raise
        return user

    db.refresh(user)
    logger.info(f"Created new user: user_id={user.id}, auth_method={user.auth_method.value}")
    return user


def batch_search_users(db: Session, emails: List[str]) -> Tuple[List[User], List[str]]:
    """
    Look users up by email.

    Emails are trimmed and deduplicated case-insensitively, keeping the first
    spelling seen. Returns (found users, emails with no user) in input order.
    """
    deduped = []
    seen = set()
    for raw in emails:
        email = raw.strip()
        key = email.lower()
        if key in seen:
            continue
        seen.add(key)
        deduped.append(email)

    users = db.query(User).filter(func.lower(User.email).in_(list(seen))).all()
    by_email = {user.email.lower(): user for user in users}

    found = [by_email[email.lower()] for email in deduped if email.lower() in by_email]
    not_found = [email for email in deduped if email.lower() not in by_email]
    return found, not_found


def set_user_role(db: Session, email: str, role: UserRole) -> User:
    user = get_by_email(db, email)
    if user is None:
        raise NotFoundError("user not found")
    user.role = role
    db.commit()
    db.refresh(user)
    logger.info(f"User role changed: user_id={user.id}, role={role.value}")
    return user
