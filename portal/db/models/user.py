import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Enum
from portal.db.base import Base
from portal.db.models.enums import AuthMethod, UserRole, enum_values


def utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    identity_user_id = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    role = Column(Enum(UserRole, values_callable=enum_values, name="user_role"), nullable=False, default=UserRole.HACKER)
    auth_method = Column(Enum(AuthMethod, values_callable=enum_values, name="auth_method"), nullable=False)
    profile_picture_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
