"""
SQLAlchemy models for the topic service: courses, mirrored authors, topics and answers.
"""
import enum
from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class ProfileName(str, enum.Enum):
    BASIC = "BASIC"
    MOD = "MOD"
    ADM = "ADM"


class TopicStatus(str, enum.Enum):
    UNSOLVED = "UNSOLVED"
    SOLVED = "SOLVED"


class Course(Base):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), unique=True, nullable=False)


class Author(Base):
    """Local copy of a user service identity. No profile means the author is unknown."""
    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    profile: Mapped[ProfileName | None] = mapped_column(
        Enum(ProfileName, native_enum=False, length=10), nullable=True
    )


class Topic(Base):
    __tablename__ = "topics"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now, nullable=False)
    status: Mapped[TopicStatus] = mapped_column(
        Enum(TopicStatus, native_enum=False, length=10), default=TopicStatus.UNSOLVED, nullable=False
    )
    author_id: Mapped[int | None] = mapped_column(ForeignKey("authors.id"), nullable=True)
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.id"), nullable=False)

    author: Mapped[Author | None] = relationship("Author", lazy="joined")
    course: Mapped[Course] = relationship("Course", lazy="joined")
    answers: Mapped[list["Answer"]] = relationship(
        "Answer",
        back_populates="topic",
        cascade="all, delete-orphan",
        order_by="Answer.id",
    )


class Answer(Base):
    __tablename__ = "answers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    solution: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now, nullable=False)
    topic_id: Mapped[int] = mapped_column(ForeignKey("topics.id", ondelete="CASCADE"), nullable=False)
    author_id: Mapped[int | None] = mapped_column(ForeignKey("authors.id"), nullable=True)

    topic: Mapped["Topic"] = relationship("Topic", back_populates="answers")
    author: Mapped[Author | None] = relationship("Author", lazy="joined")
