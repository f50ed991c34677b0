"""
Application model: one hackathon application per user.
"""
import uuid

from sqlalchemy import Column, SmallInteger, String, Text, Boolean, DateTime, ForeignKey, JSON, Enum, Index
from sqlalchemy.orm import relationship, backref
from portal.db.base import Base
from portal.db.models.enums import ApplicationStatus, enum_values
from portal.db.models.user import utcnow


class Application(Base):
    """
    A hacker's application.

    Every answer column is nullable; absence means "not answered yet" while
    the application is a draft. Submission requires the fields listed in
    ``application_service.REQUIRED_PROFILE_FIELDS`` and the lists after it.
    """
    __tablename__ = "applications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False, index=True)
    status = Column(
        Enum(ApplicationStatus, values_callable=enum_values, name="application_status"),
        nullable=False,
        default=ApplicationStatus.DRAFT,
        index=True,
    )

    # Personal info
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    phone_e164 = Column(String(16), nullable=True)
    age = Column(SmallInteger, nullable=True)
    country_of_residence = Column(String, nullable=True)
    gender = Column(String, nullable=True)
    race = Column(String, nullable=True)
    ethnicity = Column(String, nullable=True)

    # Education
    university = Column(String, nullable=True)
    major = Column(String, nullable=True)
    level_of_study = Column(String, nullable=True)

    # Short answers: {question_id: response}
    short_answer_responses = Column(JSON, nullable=False, default=dict)

    # Experience
    hackathons_attended_count = Column(SmallInteger, nullable=True)
    software_experience_level = Column(String, nullable=True)
    heard_about = Column(String, nullable=True)

    # Event preferences
    shirt_size = Column(String, nullable=True)
    dietary_restrictions = Column(JSON, nullable=False, default=list)
    accommodations = Column(Text, nullable=True)

    # Links
    github = Column(String, nullable=True)
    linkedin = Column(String, nullable=True)
    website = Column(String, nullable=True)

    # Acknowledgements
    ack_application = Column(Boolean, nullable=False, default=False)
    ack_mlh_coc = Column(Boolean, nullable=False, default=False)
    ack_mlh_privacy = Column(Boolean, nullable=False, default=False)
    opt_in_mlh_emails = Column(Boolean, nullable=False, default=False)

    submitted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", backref=backref("application", uselist=False))

    __table_args__ = (
        Index("idx_applications_created_id", "created_at", "id"),
    )

    def __repr__(self):
        return f"<Application(id={self.id}, user_id={self.user_id}, status='{self.status}')>"
