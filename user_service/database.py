"""
Database engine and session for the user service.
SQLite enforces users.profile_id only with the foreign_keys pragma on each connection.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from user_service.config import DATABASE_URL
from user_service.models import Base

_IS_SQLITE = DATABASE_URL.startswith("sqlite")

if DATABASE_URL.startswith("sqlite:///:memory:"):
    # One shared connection, so the in-memory database outlives each session (tests)
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False} if _IS_SQLITE else {})

if _IS_SQLITE:

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)


def get_db():
    """Dependency: one session per request, closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
