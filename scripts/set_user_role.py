"""
Script to change a user's role, e.g. to bootstrap the first super admin.
Run: python -m scripts.set_user_role <email> <hacker|admin|super_admin>

The user must have signed in once so that a local row exists.
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from portal.core.errors import NotFoundError
from portal.db.init_db import init_db
from portal.db.models.enums import UserRole
from portal.db.session import SessionLocal
from portal.services import user_service
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def set_role(email: str, role: UserRole) -> bool:
    db = SessionLocal()
    try:
        user = user_service.set_user_role(db, email, role)
        logger.info(f"User {user.email} (ID: {user.id}) is now {role.value}")
        return True
    except NotFoundError:
        logger.error(f"User {email} not found. They need to sign in once first.")
        return False
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating user: {e}", exc_info=True)
        return False
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python -m scripts.set_user_role <email> <hacker|admin|super_admin>")
        sys.exit(2)

    email, role_name = sys.argv[1], sys.argv[2]
    try:
        role = UserRole(role_name)
    except ValueError:
        print(f"[ERROR] Unknown role: {role_name}")
        sys.exit(2)

    init_db()
    if not set_role(email, role):
        sys.exit(1)
    print(f"\n[SUCCESS] {email} is now {role.value}")
