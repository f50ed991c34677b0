"""
Service-level tests for the application lifecycle, pagination and stats.
"""
from datetime import datetime, timedelta, timezone

import pytest

from portal.core.errors import ConflictError, NotFoundError, ValidationFailed
from portal.db.models.application import Application
from portal.db.models.enums import ApplicationStatus
from portal.schemas.application import ApplicationUpdate
from portal.schemas.settings import ShortAnswerQuestion
from portal.services import application_service, settings_service

from helpers import COMPLETE_APPLICATION, make_user


def fill(db, user, **extra):
    application_service.get_or_create_application(db, user)
    return application_service.update_application(db, user, ApplicationUpdate(**{**COMPLETE_APPLICATION, **extra}))


def test_get_or_create_is_idempotent(db_session, hacker):
    first = application_service.get_or_create_application(db_session, hacker)
    second = application_service.get_or_create_application(db_session, hacker)

    assert first.id == second.id
    assert first.status == ApplicationStatus.DRAFT
    assert db_session.query(Application).count() == 1


def test_update_applies_only_provided_fields(db_session, hacker):
    application_service.get_or_create_application(db_session, hacker)
    application_service.update_application(db_session, hacker, ApplicationUpdate(first_name="Ada"))
    updated = application_service.update_application(db_session, hacker, ApplicationUpdate(last_name="Lovelace"))

    assert updated.first_name == "Ada"
    assert updated.last_name == "Lovelace"


def test_update_without_application_fails(db_session, hacker):
    with pytest.raises(NotFoundError):
        application_service.update_application(db_session, hacker, ApplicationUpdate(first_name="Ada"))


def test_submit_lists_missing_fields_in_order(db_session, hacker):
    settings_service.update_short_answer_questions(db_session, [
        ShortAnswerQuestion(id="why", question="Why?", required=True, display_order=0),
        ShortAnswerQuestion(id="fun", question="Fun?", required=False, display_order=1),
    ])
    application_service.get_or_create_application(db_session, hacker)
    application_service.update_application(db_session, hacker, ApplicationUpdate(first_name="Ada"))

    with pytest.raises(ValidationFailed) as exc:
        application_service.submit_application(db_session, hacker)

    missing = exc.value.missing
    assert "first_name" not in missing
    assert missing[0] == "last_name"
    assert missing.index("level_of_study") < missing.index("short_answer:why") < missing.index("hackathons_attended_count")
    assert "short_answer:fun" not in missing
    assert missing[-3:] == ["ack_application", "ack_mlh_coc", "ack_mlh_privacy"]


def test_submit_complete_application(db_session, hacker):
    fill(db_session, hacker)
    submitted = application_service.submit_application(db_session, hacker)

    assert submitted.status == ApplicationStatus.SUBMITTED
    assert submitted.submitted_at is not None

    with pytest.raises(ConflictError):
        application_service.submit_application(db_session, hacker)
    with pytest.raises(ConflictError):
        application_service.update_application(db_session, hacker, ApplicationUpdate(first_name="Eve"))


def test_decisions_are_monotonic(db_session, hacker):
    application = application_service.get_or_create_application(db_session, hacker)

    with pytest.raises(ConflictError):
        application_service.set_application_status(db_session, application.id, ApplicationStatus.ACCEPTED)

    fill(db_session, hacker)
    application_service.submit_application(db_session, hacker)

    with pytest.raises(ValidationFailed):
        application_service.set_application_status(db_session, application.id, ApplicationStatus.DRAFT)

    decided = application_service.set_application_status(db_session, application.id, ApplicationStatus.WAITLISTED)
    assert decided.status == ApplicationStatus.WAITLISTED

    with pytest.raises(ConflictError):
        application_service.set_application_status(db_session, application.id, ApplicationStatus.ACCEPTED)


def test_set_status_unknown_application(db_session):
    with pytest.raises(NotFoundError):
        application_service.set_application_status(db_session, "missing", ApplicationStatus.ACCEPTED)


def seed_applications(db, count):
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    ids = []
    for i in range(count):
        user = make_user(db, f"user{i}@example.com")
        application = Application(user_id=user.id, created_at=base + timedelta(minutes=i), updated_at=base)
        db.add(application)
        db.commit()
        ids.append(application.id)
    # Newest first
    return list(reversed(ids))


def test_cursor_pagination_forward_and_backward(db_session):
    expected = seed_applications(db_session, 5)

    page1 = application_service.list_applications(db_session, limit=2)
    assert [a.id for a in page1.applications] == expected[:2]
    assert page1.has_more is True
    assert page1.prev_cursor is None

    page2 = application_service.list_applications(db_session, cursor=page1.next_cursor, limit=2)
    assert [a.id for a in page2.applications] == expected[2:4]

    page3 = application_service.list_applications(db_session, cursor=page2.next_cursor, limit=2)
    assert [a.id for a in page3.applications] == expected[4:]
    assert page3.has_more is False
    assert page3.next_cursor is None

    back = application_service.list_applications(db_session, cursor=page3.prev_cursor, direction="backward", limit=2)
    assert [a.id for a in back.applications] == expected[2:4]


def test_list_filters_by_status(db_session, hacker):
    seed_applications(db_session, 2)
    fill(db_session, hacker)
    application_service.submit_application(db_session, hacker)

    result = application_service.list_applications(db_session, status=ApplicationStatus.SUBMITTED)
    assert len(result.applications) == 1
    assert result.applications[0].email == hacker.email


def test_invalid_cursor():
    with pytest.raises(ValueError):
        application_service.decode_cursor("not-a-cursor")


def test_stats(db_session):
    assert application_service.get_application_stats(db_session).acceptance_rate == 0.0

    for i in range(3):
        user = make_user(db_session, f"s{i}@example.com")
        fill(db_session, user)
        application_service.submit_application(db_session, user)
    ids = [a.id for a in db_session.query(Application).all()]
    application_service.set_application_status(db_session, ids[0], ApplicationStatus.ACCEPTED)

    stats = application_service.get_application_stats(db_session)
    assert stats.total_applications == 3
    assert stats.submitted == 2
    assert stats.accepted == 1
    assert stats.acceptance_rate == 33.33
