"""
Tests for the read-only application detail sections.
"""
from datetime import datetime, timezone

from portal.db.models.enums import ApplicationStatus
from portal.schemas.application import ApplicationResponse
from portal.schemas.settings import ShortAnswerQuestion
from portal.services.detail_sections import (
    FALLBACK,
    render_application_detail,
    render_demographics,
    render_experience,
    render_short_answers,
    render_timeline,
)

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_application(**fields):
    data = {
        "id": "app-1",
        "user_id": "user-1",
        "status": ApplicationStatus.DRAFT,
        "created_at": NOW,
        "updated_at": NOW,
    }
    data.update(fields)
    return ApplicationResponse(**data)


def values(section):
    return {field.label: field.value for field in section.fields}


def test_missing_fields_render_fallback():
    section = render_demographics(make_application())
    assert values(section) == {"Race": FALLBACK, "Ethnicity": FALLBACK}


def test_zero_count_is_not_missing():
    section = render_experience(make_application(hackathons_attended_count=0))
    assert values(section)["Hackathons Attended"] == 0
    assert values(section)["Software Experience"] == FALLBACK


def test_short_answers_sorted_by_display_order():
    questions = [
        ShortAnswerQuestion(id="1", question="Q2", display_order=2),
        ShortAnswerQuestion(id="2", question="Q1", display_order=1),
    ]
    application = make_application(short_answer_responses={"1": "A2", "2": "A1"})

    section = render_short_answers(application, questions)

    assert [f.label for f in section.fields] == ["Q1", "Q2"]
    assert [f.value for f in section.fields] == ["A1", "A2"]
    # Input order is untouched
    assert [q.id for q in questions] == ["1", "2"]


def test_short_answers_empty_questions_renders_nothing():
    assert render_short_answers(make_application(), []) is None
    assert render_short_answers(make_application(), None) is None


def test_required_unanswered_is_flagged_not_rejected():
    questions = [
        ShortAnswerQuestion(id="why", question="Why?", required=True, display_order=0),
        ShortAnswerQuestion(id="fun", question="Fun fact?", required=False, display_order=1),
    ]
    application = make_application(short_answer_responses={"fun": "I juggle", "why": "  "})

    why, fun = render_short_answers(application, questions).fields

    assert why.value == FALLBACK
    assert why.required is True
    assert why.answered is False
    assert fun.value == "I juggle"
    assert fun.answered is True


def test_timeline_renders_timestamps():
    section = render_timeline(make_application(submitted_at=NOW))
    assert values(section)["Submitted"] == NOW.isoformat()

    section = render_timeline(make_application())
    assert values(section)["Submitted"] == FALLBACK


def test_application_detail_omits_empty_short_answers():
    keys = [s.key for s in render_application_detail(make_application())]
    assert "short_answers" not in keys
    assert keys[0] == "personal_info"
    assert keys[-1] == "timeline"

    questions = [ShortAnswerQuestion(id="why", question="Why?", display_order=0)]
    keys = [s.key for s in render_application_detail(make_application(), questions)]
    assert "short_answers" in keys


def test_dietary_restrictions_joined():
    sections = {s.key: s for s in render_application_detail(make_application(dietary_restrictions=["vegan", "halal"]))}
    assert values(sections["event_preferences"])["Dietary Restrictions"] == "vegan, halal"
