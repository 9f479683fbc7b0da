"""Initialize database tables."""
import logging

from sqlmodel import SQLModel

from roomchat.models import User, Room, Participant, Message  # noqa: F401  (registers tables)
from roomchat.db.config import engine

logger = logging.getLogger(__name__)


def init_db(drop_existing: bool = False):
    """Create all tables in the database."""
    if drop_existing:
        logger.info("[DB INIT] Dropping existing tables...")
        SQLModel.metadata.drop_all(engine)

    logger.info("[DB INIT] Creating all tables...")
    SQLModel.metadata.create_all(engine)
    logger.info("[DB INIT] Tables created successfully.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
