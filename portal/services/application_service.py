"""
Application service: the hacker-facing draft lifecycle and the admin views.

Status only moves forward: draft -> submitted -> accepted | rejected | waitlisted.
"""
import base64
import binascii
import json
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy import and_, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portal.core.errors import ConflictError, NotFoundError, ValidationFailed
from portal.db.models.application import Application
from portal.db.models.enums import DECISION_STATUSES, ApplicationStatus
from portal.db.models.user import User
from portal.schemas.application import (
    ApplicationListItem,
    ApplicationListResult,
    ApplicationStats,
    ApplicationUpdate,
    ApplicationWithQuestions,
)
from portal.schemas.settings import ShortAnswerQuestion
from portal.services import settings_service

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100

DIRECTION_FORWARD = "forward"
DIRECTION_BACKWARD = "backward"

# Checked in this order at submission; short answers are inserted after level_of_study
REQUIRED_PROFILE_FIELDS = [
    "first_name",
    "last_name",
    "phone_e164",
    "age",
    "country_of_residence",
    "gender",
    "race",
    "ethnicity",
    "university",
    "major",
    "level_of_study",
]
REQUIRED_EVENT_FIELDS = [
    "hackathons_attended_count",
    "software_experience_level",
    "heard_about",
    "shirt_size",
]
REQUIRED_ACKNOWLEDGEMENTS = [
    "ack_application",
    "ack_mlh_coc",
    "ack_mlh_privacy",
]


def get_application_by_user(db: Session, user_id: str) -> Optional[Application]:
    return db.query(Application).filter(Application.user_id == user_id).first()


def get_application_by_id(db: Session, application_id: str) -> Application:
    application = db.get(Application, application_id)
    if application is None:
        raise NotFoundError("application not found")
    return application


def get_or_create_application(db: Session, user: User) -> Application:
    """
    Return the user's application, creating an empty draft on first access.

    Two concurrent first requests race on the unique user_id; the loser
    re-reads the winner's row.
    """
    application = get_application_by_user(db, user.id)
    if application is not None:
        return application

    application = Application(user_id=user.id, status=ApplicationStatus.DRAFT)
    db.add(application)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        application = get_application_by_user(db, user.id)
        if application is None:
            raise
        return application

    db.refresh(application)
    logger.info(f"Draft application created: application_id={application.id}, user_id={user.id}")
    return application


def update_application(db: Session, user: User, data: ApplicationUpdate) -> Application:
    """
    Apply a partial update to the user's draft.

    Raises:
        NotFoundError: the user has no application
        ConflictError: the application is no longer a draft
    """
    application = get_application_by_user(db, user.id)
    if application is None:
        raise NotFoundError("application not found")
    if application.status != ApplicationStatus.DRAFT:
        raise ConflictError("cannot update submitted application")

    changes = {
        field: value
        for field, value in data.model_dump(exclude_unset=True, mode="json").items()
        if value is not None
    }
    for field, value in changes.items():
        setattr(application, field, value)

    db.commit()
    db.refresh(application)
    logger.info(f"Application updated: application_id={application.id}, fields={sorted(changes)}")
    return application


def find_missing_fields(application: Application, questions: List[ShortAnswerQuestion]) -> List[str]:
    """List every requirement the application does not meet yet."""
    missing = [field for field in REQUIRED_PROFILE_FIELDS if getattr(application, field) is None]

    responses = application.short_answer_responses or {}
    for question in questions:
        if not question.required:
            continue
        answer = responses.get(question.id)
        if not isinstance(answer, str) or not answer.strip():
            missing.append(f"short_answer:{question.id}")

    missing.extend(field for field in REQUIRED_EVENT_FIELDS if getattr(application, field) is None)
    missing.extend(field for field in REQUIRED_ACKNOWLEDGEMENTS if not getattr(application, field))
    return missing


def submit_application(db: Session, user: User) -> Application:
    """
    Submit the user's draft for review.

    Raises:
        NotFoundError: the user has no application
        ConflictError: already submitted (including a concurrent submit)
        ValidationFailed: required fields are missing; ``missing`` lists them
    """
    application = get_application_by_user(db, user.id)
    if application is None:
        raise NotFoundError("application not found")
    if application.status != ApplicationStatus.DRAFT:
        raise ConflictError("application already submitted")

    questions = settings_service.get_short_answer_questions(db)
    missing = find_missing_fields(application, questions)
    if missing:
        raise ValidationFailed(f"missing required fields: {missing}", missing=missing)

    now = datetime.now(timezone.utc)
    # Conditional on status so only one concurrent submit wins
    updated = (
        db.query(Application)
        .filter(Application.id == application.id, Application.status == ApplicationStatus.DRAFT)
        .update(
            {Application.status: ApplicationStatus.SUBMITTED, Application.submitted_at: now, Application.updated_at: now},
            synchronize_session=False,
        )
    )
    if updated == 0:
        db.rollback()
        raise ConflictError("application already submitted")

    db.commit()
    db.refresh(application)
    logger.info(f"Application submitted: application_id={application.id}, user_id={user.id}")
    return application


def set_application_status(db: Session, application_id: str, status: ApplicationStatus) -> Application:
    """
    Record an admin decision on a submitted application.

    Raises:
        NotFoundError: unknown application
        ValidationFailed: target is not a decision status
        ConflictError: application is still a draft or already decided
    """
    if status not in DECISION_STATUSES:
        raise ValidationFailed("status must be one of: accepted, rejected, waitlisted")

    application = get_application_by_id(db, application_id)
    if application.status == ApplicationStatus.DRAFT:
        raise ConflictError("application has not been submitted")
    if application.status != ApplicationStatus.SUBMITTED:
        raise ConflictError("application already decided")

    application.status = status
    db.commit()
    db.refresh(application)
    logger.info(f"Application decided: application_id={application.id}, status={status.value}")
    return application


def encode_cursor(created_at: datetime, application_id: str) -> str:
    data = json.dumps({"c": created_at.isoformat(), "i": application_id}).encode("utf-8")
    return base64.urlsafe_b64encode(data).decode("ascii")


def decode_cursor(encoded: str) -> Tuple[datetime, str]:
    """
    Parse an opaque pagination cursor.

    Raises:
        ValueError: malformed cursor
    """
    try:
        payload = json.loads(base64.urlsafe_b64decode(encoded.encode("ascii")))
        created_at = datetime.fromisoformat(payload["c"])
        application_id = payload["i"]
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError):
        raise ValueError("invalid cursor")
    if not application_id:
        raise ValueError("invalid cursor: missing fields")
    return created_at, application_id


def list_applications(
    db: Session,
    status: Optional[ApplicationStatus] = None,
    cursor: Optional[str] = None,
    direction: str = DIRECTION_FORWARD,
    limit: int = DEFAULT_PAGE_SIZE,
) -> ApplicationListResult:
    """
    Keyset pagination over (created_at, id), newest first.

    Forward pages walk towards older rows; backward pages walk towards newer
    rows and are returned in the same newest-first order.
    """
    if limit <= 0:
        limit = DEFAULT_PAGE_SIZE
    limit = min(limit, MAX_PAGE_SIZE)

    position = decode_cursor(cursor) if cursor else None
    backward = direction == DIRECTION_BACKWARD and position is not None

    query = db.query(Application, User.email).join(User, Application.user_id == User.id)
    if status is not None:
        query = query.filter(Application.status == status)

    if backward:
        created_at, application_id = position
        query = query.filter(
            or_(
                Application.created_at > created_at,
                and_(Application.created_at == created_at, Application.id > application_id),
            )
        ).order_by(Application.created_at.asc(), Application.id.asc())
    else:
        if position is not None:
            created_at, application_id = position
            query = query.filter(
                or_(
                    Application.created_at < created_at,
                    and_(Application.created_at == created_at, Application.id < application_id),
                )
            )
        query = query.order_by(Application.created_at.desc(), Application.id.desc())

    # One extra row tells whether another page exists
    rows = query.limit(limit + 1).all()
    has_more = len(rows) > limit
    rows = rows[:limit]
    if backward:
        rows.reverse()

    items = [
        ApplicationListItem(
            id=application.id,
            user_id=application.user_id,
            email=email,
            status=application.status,
            first_name=application.first_name,
            last_name=application.last_name,
            university=application.university,
            submitted_at=application.submitted_at,
            created_at=application.created_at,
        )
        for application, email in rows
    ]

    result = ApplicationListResult(applications=items, has_more=has_more)
    if items:
        first, last = items[0], items[-1]
        if backward:
            result.next_cursor = encode_cursor(last.created_at, last.id)
            if has_more:
                result.prev_cursor = encode_cursor(first.created_at, first.id)
        else:
            if has_more:
                result.next_cursor = encode_cursor(last.created_at, last.id)
            if position is not None:
                result.prev_cursor = encode_cursor(first.created_at, first.id)

    logger.debug(f"Applications listed: count={len(items)}, has_more={has_more}, direction={direction}")
    return result


def get_application_stats(db: Session) -> ApplicationStats:
    counts: Dict[str, int] = {
        (status.value if isinstance(status, ApplicationStatus) else status): int(total)
        for status, total in db.query(Application.status, func.count(Application.id)).group_by(Application.status).all()
    }
    total = sum(counts.values())
    accepted = counts.get(ApplicationStatus.ACCEPTED.value, 0)
    return ApplicationStats(
        total_applications=total,
        draft=counts.get(ApplicationStatus.DRAFT.value, 0),
        submitted=counts.get(ApplicationStatus.SUBMITTED.value, 0),
        accepted=accepted,
        rejected=counts.get(ApplicationStatus.REJECTED.value, 0),
        waitlisted=counts.get(ApplicationStatus.WAITLISTED.value, 0),
        acceptance_rate=round(accepted / total * 100, 2) if total else 0.0,
    )


def with_questions(application: Application, questions: List[ShortAnswerQuestion]) -> ApplicationWithQuestions:
    data = ApplicationWithQuestions.model_validate(application)
    data.short_answer_questions = questions
    return data
