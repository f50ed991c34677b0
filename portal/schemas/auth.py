"""
Pydantic schemas for authentication endpoints.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

from portal.db.models.enums import AuthMethod, UserRole


class SessionClaims(BaseModel):
    """Claims carried by a session token issued by the identity provider."""
    sub: str = Field(..., min_length=1, description="Identity provider user id")
    email: EmailStr
    auth_method: AuthMethod
    picture: Optional[str] = Field(None, description="Profile picture URL (Google sign-in only)")


class UserResponse(BaseModel):
    id: str
    email: str
    role: UserRole
    auth_method: AuthMethod
    profile_picture_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CheckEmailResponse(BaseModel):
    exists: bool
    auth_method: Optional[AuthMethod] = None

    class Config:
        json_schema_extra = {
            "example": {"exists": True, "auth_method": "passwordless"}
        }
