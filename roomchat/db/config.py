"""Database engine and session dependency for roomchat."""
from typing import Generator
import logging

from sqlmodel import create_engine, Session
from sqlalchemy import event
from sqlalchemy.pool import StaticPool

from roomchat.settings import DATABASE_URL

logger = logging.getLogger(__name__)

IS_SQLITE = DATABASE_URL.startswith("sqlite")

if IS_SQLITE:
    logger.info(f"[DB CONFIG] Using SQLite database: {DATABASE_URL}")
    engine_kwargs = {"connect_args": {"check_same_thread": False}}

    # In-memory databases live on a single connection, share it across sessions
    if DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool

    engine = create_engine(DATABASE_URL, echo=False, **engine_kwargs)

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        # Participant and message rows must reference real users and rooms
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
else:
    logger.info("[DB CONFIG] Using PostgreSQL database")
    engine = create_engine(DATABASE_URL, echo=False, pool_pre_ping=True)


def get_session() -> Generator[Session, None, None]:
    """Dependency for getting database sessions."""
    with Session(engine) as session:
        yield session
