"""
Per-step schemas for the application wizard.

Each step validates only its own fields. The combined set of step schemas
covers every answer field of an application.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from portal.db.models.enums import DietaryRestriction
from portal.schemas.application import E164_PATTERN, check_url


class PersonalInfoStep(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone_e164: str = Field(..., pattern=E164_PATTERN)
    age: int = Field(..., ge=1, le=150)
    country_of_residence: str = Field(..., min_length=1)
    gender: str = Field(..., min_length=1)
    race: str = Field(..., min_length=1)
    ethnicity: str = Field(..., min_length=1)


class SchoolInfoStep(BaseModel):
    university: str = Field(..., min_length=1)
    major: str = Field(..., min_length=1)
    level_of_study: str = Field(..., min_length=1)


class ExperienceStep(BaseModel):
    hackathons_attended_count: int = Field(..., ge=0)
    software_experience_level: str = Field(..., min_length=1)
    heard_about: str = Field(..., min_length=1)


class ShortAnswerStep(BaseModel):
    # Required questions are enforced by validate_step on next() and again at submit
    short_answer_responses: Dict[str, str] = Field(default_factory=dict)


class EventInfoStep(BaseModel):
    shirt_size: str = Field(..., min_length=1)
    dietary_restrictions: List[DietaryRestriction] = Field(default_factory=list)
    accommodations: str = ""


class SponsorInfoStep(BaseModel):
    github: Optional[str] = None
    linkedin: Optional[str] = None
    website: Optional[str] = None

    @field_validator("github", "linkedin", "website", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("github", "linkedin", "website")
    @classmethod
    def validate_links(cls, v: Optional[str]) -> Optional[str]:
        return check_url(v)


class AcknowledgmentsStep(BaseModel):
    ack_application: bool
    ack_mlh_coc: bool
    ack_mlh_privacy: bool
    opt_in_mlh_emails: bool = False

    @field_validator("ack_application", "ack_mlh_coc", "ack_mlh_privacy")
    @classmethod
    def must_accept(cls, v: bool) -> bool:
        if v is not True:
            raise ValueError("You must accept this acknowledgment")
        return v


class StepValidationResponse(BaseModel):
    step: str
    valid: bool
    errors: Dict[str, str] = Field(default_factory=dict)
