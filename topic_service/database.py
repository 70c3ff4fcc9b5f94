"""
Database engine and session for the topic service.
"""
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from topic_service.config import DATABASE_URL, SEED_COURSES
from topic_service.models import Base, Course

logger = logging.getLogger(__name__)

# SQLite: in-memory needs StaticPool so all connections share the same DB (for tests)
if DATABASE_URL.startswith("sqlite:///:memory:"):
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    connect_args = {"check_same_thread": False} if "sqlite" in DATABASE_URL else {}
    engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Create all tables."""
    Base.metadata.create_all(bind=engine)


def seed_courses(db: Session, names: str = SEED_COURSES) -> None:
    """Create the comma-separated courses that do not exist yet."""
    for name in (n.strip() for n in names.split(",")):
        if name and db.query(Course).filter(Course.name == name).first() is None:
            db.add(Course(name=name))
            logger.info("Seeded course: %s", name)
    db.commit()


def get_db():
    """Dependency: yield a DB session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
