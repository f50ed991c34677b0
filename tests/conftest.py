"""
Shared fixtures: in-memory database, test client and signed-in users.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from portal.main import app
from portal.db.base import Base
from portal.db.models.enums import UserRole
from portal.core.auth_dependency import get_db
from portal.core.rate_limit import rate_limit_store
import portal.db.models  # noqa: F401
from helpers import make_user


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override get_db dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the database dependency
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function", autouse=True)
def setup_db():
    """Create and drop tables for each test."""
    Base.metadata.create_all(bind=test_engine)
    rate_limit_store.clear()
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def hacker(db_session):
    return make_user(db_session, "hacker@example.com")


@pytest.fixture
def admin(db_session):
    return make_user(db_session, "admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
def super_admin(db_session):
    return make_user(db_session, "root@example.com", role=UserRole.SUPER_ADMIN)
