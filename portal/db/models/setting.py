from sqlalchemy import Column, String, DateTime, JSON
from portal.db.base import Base
from portal.db.models.user import utcnow


class Setting(Base):
    """Key/value hackathon settings with JSON values."""
    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
