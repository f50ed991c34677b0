"""
Test helpers for creating users and session tokens.
"""
from portal.db.models.enums import AuthMethod, UserRole
from portal.db.models.user import User
from portal.core.security import create_access_token


COMPLETE_APPLICATION = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "phone_e164": "+12025551234",
    "age": 20,
    "country_of_residence": "US",
    "gender": "female",
    "race": "white",
    "ethnicity": "not_hispanic",
    "university": "University of Central Florida",
    "major": "Computer Science",
    "level_of_study": "undergraduate",
    "hackathons_attended_count": 0,
    "software_experience_level": "beginner",
    "heard_about": "friend",
    "shirt_size": "M",
    "dietary_restrictions": ["vegan"],
    "ack_application": True,
    "ack_mlh_coc": True,
    "ack_mlh_privacy": True,
}


def make_user(db, email, role=UserRole.HACKER, auth_method=AuthMethod.PASSWORDLESS):
    user = User(
        identity_user_id=f"st-{email}",
        email=email,
        role=role,
        auth_method=auth_method,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def session_token(user, **claims):
    data = {
        "sub": user.identity_user_id,
        "email": user.email,
        "auth_method": user.auth_method.value,
    }
    data.update(claims)
    return create_access_token(data)


def auth_headers(user, **claims):
    return {"Authorization": f"Bearer {session_token(user, **claims)}"}
