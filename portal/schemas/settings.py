"""
Pydantic schemas for super-admin settings endpoints.
"""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

from portal.db.models.enums import UserRole


class ShortAnswerQuestion(BaseModel):
    """A configurable short-answer question."""
    id: str = Field(..., min_length=1, max_length=50)
    question: str = Field(..., min_length=1, max_length=500)
    required: bool = False
    display_order: int = Field(0, ge=0, description="Ascending render order")


class ShortAnswerQuestionsRequest(BaseModel):
    questions: List[ShortAnswerQuestion]

    class Config:
        json_schema_extra = {
            "example": {
                "questions": [
                    {"id": "why", "question": "Why do you want to attend?", "required": True, "display_order": 0}
                ]
            }
        }


class ShortAnswerQuestionsResponse(BaseModel):
    questions: List[ShortAnswerQuestion]


class ReviewsPerAppRequest(BaseModel):
    reviews_per_application: int = Field(..., ge=1, le=10)


class ReviewsPerAppResponse(BaseModel):
    reviews_per_application: int


class ReviewAssignmentToggleRequest(BaseModel):
    enabled: bool


class ReviewAssignmentToggleResponse(BaseModel):
    enabled: bool


class TabToggle(BaseModel):
    """A named switch on a settings tab."""
    key: str
    label: str
    description: str
    wired: bool = Field(..., description="False for placeholders that are not persisted yet")
    value: Optional[bool] = None


class TabPanel(BaseModel):
    key: str
    title: str
    description: str
    toggles: List[TabToggle] = Field(default_factory=list)


class TabPanelsResponse(BaseModel):
    tabs: List[TabPanel]


class BatchSearchUsersRequest(BaseModel):
    emails: List[EmailStr] = Field(..., min_length=1, max_length=50)


class FoundUser(BaseModel):
    id: str
    email: str
    role: UserRole
    created_at: datetime

    class Config:
        from_attributes = True


class BatchSearchUsersResponse(BaseModel):
    found: List[FoundUser]
    not_found: List[str]


class SetRoleRequest(BaseModel):
    email: EmailStr
    role: UserRole
