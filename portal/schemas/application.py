"""
Pydantic schemas for application endpoints.
"""
from typing import Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

from portal.db.models.enums import ApplicationStatus, DietaryRestriction
from portal.schemas.settings import ShortAnswerQuestion

E164_PATTERN = r"^\+[1-9]\d{1,14}$"

_http_url = TypeAdapter(HttpUrl)


def check_url(value: Optional[str]) -> Optional[str]:
    """Accept an http(s) URL and keep it as the string the user typed."""
    if value is None:
        return value
    try:
        _http_url.validate_python(value)
    except ValidationError:
        raise ValueError("Must be a valid URL")
    return value


class ApplicationUpdate(BaseModel):
    """
    Partial update of a draft application.

    Only fields present in the request body are applied; an explicit null is
    treated the same as an absent field.
    """
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    phone_e164: Optional[str] = Field(None, pattern=E164_PATTERN, description="Phone in E.164 format, e.g. +12025551234")
    age: Optional[int] = Field(None, ge=1, le=150)

    country_of_residence: Optional[str] = Field(None, min_length=1)
    gender: Optional[str] = Field(None, min_length=1)
    race: Optional[str] = Field(None, min_length=1)
    ethnicity: Optional[str] = Field(None, min_length=1)

    university: Optional[str] = Field(None, min_length=1)
    major: Optional[str] = Field(None, min_length=1)
    level_of_study: Optional[str] = Field(None, min_length=1)

    short_answer_responses: Optional[Dict[str, str]] = None

    hackathons_attended_count: Optional[int] = Field(None, ge=0)
    software_experience_level: Optional[str] = Field(None, min_length=1)
    heard_about: Optional[str] = Field(None, min_length=1)

    shirt_size: Optional[str] = Field(None, min_length=1)
    dietary_restrictions: Optional[List[DietaryRestriction]] = None
    accommodations: Optional[str] = None

    github: Optional[str] = None
    linkedin: Optional[str] = None
    website: Optional[str] = None

    ack_application: Optional[bool] = None
    ack_mlh_coc: Optional[bool] = None
    ack_mlh_privacy: Optional[bool] = None
    opt_in_mlh_emails: Optional[bool] = None

    @field_validator("github", "linkedin", "website")
    @classmethod
    def validate_links(cls, v: Optional[str]) -> Optional[str]:
        return check_url(v)

    class Config:
        extra = "forbid"
        json_schema_extra = {
            "example": {
                "first_name": "Ada",
                "last_name": "Lovelace",
                "phone_e164": "+12025551234",
                "age": 20,
                "dietary_restrictions": ["vegan"],
                "short_answer_responses": {"why": "To build things"},
            }
        }


class ApplicationResponse(BaseModel):
    """Full application record."""
    id: str
    user_id: str
    status: ApplicationStatus

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_e164: Optional[str] = None
    age: Optional[int] = None

    country_of_residence: Optional[str] = None
    gender: Optional[str] = None
    race: Optional[str] = None
    ethnicity: Optional[str] = None

    university: Optional[str] = None
    major: Optional[str] = None
    level_of_study: Optional[str] = None

    short_answer_responses: Dict[str, str] = Field(default_factory=dict)

    hackathons_attended_count: Optional[int] = None
    software_experience_level: Optional[str] = None
    heard_about: Optional[str] = None

    shirt_size: Optional[str] = None
    dietary_restrictions: List[str] = Field(default_factory=list)
    accommodations: Optional[str] = None

    github: Optional[str] = None
    linkedin: Optional[str] = None
    website: Optional[str] = None

    ack_application: bool = False
    ack_mlh_coc: bool = False
    ack_mlh_privacy: bool = False
    opt_in_mlh_emails: bool = False

    submitted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ApplicationWithQuestions(ApplicationResponse):
    """Application with the configured short-answer questions embedded."""
    short_answer_questions: List[ShortAnswerQuestion] = Field(default_factory=list)


class ApplicationListItem(BaseModel):
    """Lightweight row for the admin listing."""
    id: str
    user_id: str
    email: str
    status: ApplicationStatus
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    university: Optional[str] = None
    submitted_at: Optional[datetime] = None
    created_at: datetime


class ApplicationListResult(BaseModel):
    applications: List[ApplicationListItem]
    next_cursor: Optional[str] = None
    prev_cursor: Optional[str] = None
    has_more: bool = False


class ApplicationStats(BaseModel):
    total_applications: int = 0
    draft: int = 0
    submitted: int = 0
    accepted: int = 0
    rejected: int = 0
    waitlisted: int = 0
    acceptance_rate: float = Field(0.0, description="Accepted share of all applications, in percent")


class StatusDecisionRequest(BaseModel):
    """Admin decision on a submitted application."""
    status: ApplicationStatus

    class Config:
        json_schema_extra = {"example": {"status": "accepted"}}
