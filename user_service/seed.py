"""
Password hashing and start-up seeding: the three profiles always, and one
administrator when FORUMHUB_SEED_ADMIN_USER + FORUMHUB_SEED_ADMIN_PASSWORD are set.
"""
import logging
import os

import bcrypt
from sqlalchemy.orm import Session

from user_service.models import Profile, ProfileName, User

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    # Bcrypt has a 72-byte limit
    raw = password.encode("utf-8")[:72]
    return bcrypt.hashpw(raw, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8")[:72], hashed.encode("utf-8"))


def find_profile(db: Session, profile_name: ProfileName) -> Profile | None:
    return db.query(Profile).filter(Profile.profile_name == profile_name).first()


def seed_profiles(db: Session) -> None:
    for name in ProfileName:
        if find_profile(db, name) is None:
            db.add(Profile(profile_name=name))
            logger.info("Seeded profile: %s", name.value)
    db.commit()


def seed_from_env(db: Session) -> None:
    seed_profiles(db)

    username = os.environ.get("FORUMHUB_SEED_ADMIN_USER")
    password = os.environ.get("FORUMHUB_SEED_ADMIN_PASSWORD")
    if not (username and password):
        return
    if db.query(User).filter(User.username == username).first() is not None:
        logger.debug("User already exists: %s", username)
        return
    db.add(
        User(
            first_name="Admin",
            last_name="ForumHub",
            username=username,
            email=os.environ.get("FORUMHUB_SEED_ADMIN_EMAIL", f"{username}@forumhub.local"),
            password_hash=hash_password(password),
            profile=find_profile(db, ProfileName.ADM),
        )
    )
    db.commit()
    logger.info("Seeded administrator: %s", username)
