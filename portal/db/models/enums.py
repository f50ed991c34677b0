"""
Closed enumerations shared by models, schemas and services.
"""
import enum


class ApplicationStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WAITLISTED = "waitlisted"


# Statuses an admin decision may move a submitted application to.
DECISION_STATUSES = (
    ApplicationStatus.ACCEPTED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.WAITLISTED,
)


class UserRole(str, enum.Enum):
    HACKER = "hacker"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


ROLE_LEVELS = {
    UserRole.HACKER: 1,
    UserRole.ADMIN: 2,
    UserRole.SUPER_ADMIN: 3,
}


class AuthMethod(str, enum.Enum):
    PASSWORDLESS = "passwordless"
    GOOGLE = "google"


class DietaryRestriction(str, enum.Enum):
    VEGAN = "vegan"
    VEGETARIAN = "vegetarian"
    HALAL = "halal"
    NUTS = "nuts"
    FISH = "fish"
    WHEAT = "wheat"
    DAIRY = "dairy"
    EGGS = "eggs"
    NO_BEEF = "no_beef"
    NO_PORK = "no_pork"


def enum_values(enum_cls):
    """Store enum values (not member names) in the database."""
    return [member.value for member in enum_cls]
