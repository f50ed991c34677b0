"""
Read-only detail sections for an application.

Every renderer is a pure function of its inputs. Absent values render as
``FALLBACK``; nothing here raises on missing data.
"""
from datetime import datetime
from typing import Any, Iterable, List, Optional

from portal.schemas.application import ApplicationResponse
from portal.schemas.sections import Section, SectionField
from portal.schemas.settings import ShortAnswerQuestion

FALLBACK = "N/A"


def _text(value: Optional[str]) -> str:
    if value is None or not str(value).strip():
        return FALLBACK
    return str(value)


def _count(value: Optional[int]) -> Any:
    # 0 is a real answer; only absence falls back
    return FALLBACK if value is None else value


def _timestamp(value: Optional[datetime]) -> str:
    return value.isoformat() if value is not None else FALLBACK


def _join(values: Optional[Iterable[str]]) -> str:
    items = [v for v in (values or []) if v]
    return ", ".join(items) if items else FALLBACK


def render_personal_info(application: ApplicationResponse) -> Section:
    full_name = " ".join(p for p in (application.first_name, application.last_name) if p)
    return Section(
        key="personal_info",
        title="Personal Info",
        fields=[
            SectionField(label="Name", value=_text(full_name)),
            SectionField(label="Phone", value=_text(application.phone_e164)),
            SectionField(label="Age", value=_count(application.age)),
            SectionField(label="Country of Residence", value=_text(application.country_of_residence)),
            SectionField(label="Gender", value=_text(application.gender)),
        ],
    )


def render_demographics(application: ApplicationResponse) -> Section:
    return Section(
        key="demographics",
        title="Demographics",
        fields=[
            SectionField(label="Race", value=_text(application.race)),
            SectionField(label="Ethnicity", value=_text(application.ethnicity)),
        ],
    )


def render_education(application: ApplicationResponse) -> Section:
    return Section(
        key="education",
        title="Education",
        fields=[
            SectionField(label="University", value=_text(application.university)),
            SectionField(label="Major", value=_text(application.major)),
            SectionField(label="Level of Study", value=_text(application.level_of_study)),
        ],
    )


def render_experience(application: ApplicationResponse) -> Section:
    return Section(
        key="experience",
        title="Experience",
        fields=[
            SectionField(label="Hackathons Attended", value=_count(application.hackathons_attended_count)),
            SectionField(label="Software Experience", value=_text(application.software_experience_level)),
            SectionField(label="Heard About Us From", value=_text(application.heard_about)),
        ],
    )


def render_event_preferences(application: ApplicationResponse) -> Section:
    return Section(
        key="event_preferences",
        title="Event Preferences",
        fields=[
            SectionField(label="Shirt Size", value=_text(application.shirt_size)),
            SectionField(label="Dietary Restrictions", value=_join(application.dietary_restrictions)),
            SectionField(label="Accommodations", value=_text(application.accommodations)),
        ],
    )


def render_links(application: ApplicationResponse) -> Section:
    return Section(
        key="links",
        title="Links",
        fields=[
            SectionField(label="GitHub", value=_text(application.github)),
            SectionField(label="LinkedIn", value=_text(application.linkedin)),
            SectionField(label="Website", value=_text(application.website)),
        ],
    )


def render_short_answers(
    application: ApplicationResponse,
    questions: Optional[List[ShortAnswerQuestion]],
) -> Optional[Section]:
    """
    Render answers in ascending ``display_order``.

    Returns None when no questions are configured. Required questions without
    an answer are flagged, not rejected.
    """
    if not questions:
        return None

    responses = application.short_answer_responses or {}
    fields = []
    for question in sorted(questions, key=lambda q: q.display_order):
        answer = responses.get(question.id)
        answered = bool(answer and answer.strip())
        fields.append(
            SectionField(
                label=question.question,
                value=answer if answered else FALLBACK,
                required=question.required,
                answered=answered,
            )
        )
    return Section(key="short_answers", title="Short Answers", fields=fields)


def render_timeline(application: ApplicationResponse) -> Section:
    return Section(
        key="timeline",
        title="Timeline",
        fields=[
            SectionField(label="Submitted", value=_timestamp(application.submitted_at)),
            SectionField(label="Created", value=_timestamp(application.created_at)),
            SectionField(label="Last Updated", value=_timestamp(application.updated_at)),
        ],
    )


def render_application_detail(
    application: ApplicationResponse,
    questions: Optional[List[ShortAnswerQuestion]] = None,
) -> List[Section]:
    """All sections in display order; an empty short-answers section is left out."""
    sections = [
        render_personal_info(application),
        render_demographics(application),
        render_education(application),
        render_experience(application),
        render_event_preferences(application),
        render_links(application),
        render_short_answers(application, questions),
        render_timeline(application),
    ]
    return [section for section in sections if section is not None]
