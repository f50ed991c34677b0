"""
Settings service for hackathon configuration.

Settings are stored as JSON values keyed by name. Missing rows fall back to
defaults so a fresh database is usable without seeding.
"""
import logging
from typing import Any, List

from sqlalchemy.orm import Session

from portal.core.errors import ValidationFailed
from portal.db.models.setting import Setting
from portal.schemas.settings import ShortAnswerQuestion

logger = logging.getLogger(__name__)

SHORT_ANSWER_QUESTIONS_KEY = "short_answer_questions"
REVIEWS_PER_APPLICATION_KEY = "reviews_per_application"
REVIEW_ASSIGNMENT_ENABLED_KEY = "review_assignment_enabled"

DEFAULT_REVIEWS_PER_APPLICATION = 3
MIN_REVIEWS_PER_APPLICATION = 1
MAX_REVIEWS_PER_APPLICATION = 10


def _get_value(db: Session, key: str, default: Any) -> Any:
    setting = db.get(Setting, key)
    if setting is None:
        return default
    return setting.value


def _put_value(db: Session, key: str, value: Any) -> None:
    """Insert or replace a setting. Caller commits."""
    setting = db.get(Setting, key)
    if setting is None:
        db.add(Setting(key=key, value=value))
    else:
        # Assign a fresh object so the JSON column is flagged dirty
        setting.value = value


def get_short_answer_questions(db: Session) -> List[ShortAnswerQuestion]:
    """Return the configured questions in storage order (empty when unset)."""
    raw = _get_value(db, SHORT_ANSWER_QUESTIONS_KEY, [])
    return [ShortAnswerQuestion.model_validate(item) for item in raw]


def update_short_answer_questions(db: Session, questions: List[ShortAnswerQuestion]) -> List[ShortAnswerQuestion]:
    """
    Replace all short-answer questions.

    Raises:
        ValidationFailed: if two questions share an id
    """
    seen = set()
    for question in questions:
        if question.id in seen:
            raise ValidationFailed(f"duplicate question ID: {question.id}")
        seen.add(question.id)

    _put_value(db, SHORT_ANSWER_QUESTIONS_KEY, [q.model_dump() for q in questions])
    db.commit()
    logger.info(f"Short answer questions updated: count={len(questions)}")
    return questions


def get_reviews_per_application(db: Session) -> int:
    return int(_get_value(db, REVIEWS_PER_APPLICATION_KEY, DEFAULT_REVIEWS_PER_APPLICATION))


def set_reviews_per_application(db: Session, value: int) -> int:
    if not MIN_REVIEWS_PER_APPLICATION <= value <= MAX_REVIEWS_PER_APPLICATION:
        raise ValidationFailed(
            f"reviews per application must be between {MIN_REVIEWS_PER_APPLICATION} and {MAX_REVIEWS_PER_APPLICATION}"
        )
    _put_value(db, REVIEWS_PER_APPLICATION_KEY, value)
    db.commit()
    logger.info(f"Reviews per application set: value={value}")
    return value


def get_review_assignment_enabled(db: Session, super_admin_id: str) -> bool:
    """Review assignment is enabled per super admin; stored as a list of their ids."""
    ids = _get_value(db, REVIEW_ASSIGNMENT_ENABLED_KEY, [])
    return super_admin_id in ids


def set_review_assignment_enabled(db: Session, super_admin_id: str, enabled: bool) -> bool:
    ids = list(_get_value(db, REVIEW_ASSIGNMENT_ENABLED_KEY, []))
    if enabled and super_admin_id not in ids:
        ids.append(super_admin_id)
    elif not enabled and super_admin_id in ids:
        ids.remove(super_admin_id)

    _put_value(db, REVIEW_ASSIGNMENT_ENABLED_KEY, ids)
    db.commit()
    logger.info(f"Review assignment toggled: super_admin_id={super_admin_id}, enabled={enabled}")
    return enabled
