import logging

from portal.db.base import Base
from portal.db.session import engine

logger = logging.getLogger(__name__)


def init_db(bind=None):
    """Create all tables that do not exist yet."""
    # Registers every model on Base.metadata
    import portal.db.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ensured")
