import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from pydantic import ValidationError

from portal.core.config import ALGORITHM, SECRET_KEY, SESSION_EXPIRE_MINUTES
from portal.core.logging_config import sanitize_log_data
from portal.schemas.auth import SessionClaims

logger = logging.getLogger(__name__)


def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=SESSION_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_session_token(token: str) -> SessionClaims:
    """
    Verify a session token and return its claims.

    Raises:
        ValueError: bad signature, expired token or missing claims
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.debug(f"Session token rejected: {e}")
        raise ValueError("invalid session token")

    try:
        claims = SessionClaims.model_validate(payload)
    except ValidationError:
        logger.warning(f"Session token is missing required claims: {sanitize_log_data(payload)}")
        raise ValueError("invalid session claims")
    return claims
