"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.
"""
from portal.db.models.enums import (
    ApplicationStatus,
    AuthMethod,
    DietaryRestriction,
    UserRole,
)
from portal.db.models.user import User
from portal.db.models.application import Application
from portal.db.models.setting import Setting

__all__ = [
    "ApplicationStatus",
    "AuthMethod",
    "DietaryRestriction",
    "UserRole",
    "User",
    "Application",
    "Setting",
]
