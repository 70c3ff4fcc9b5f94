"""
Pytest configuration for user_service. In-memory SQLite and a throwaway signing key.
"""
import os
import tempfile

os.environ["USER_DATABASE_URL"] = "sqlite:///:memory:"
os.environ["FORUMHUB_SIGNING_KEY_PATH"] = os.path.join(tempfile.gettempdir(), "forumhub_test_signing_key.pem")
for var in ("FORUMHUB_SEED_ADMIN_USER", "FORUMHUB_SEED_ADMIN_PASSWORD"):
    os.environ.pop(var, None)

import pytest
from fastapi.testclient import TestClient

from user_service import rate_limit
from user_service.database import SessionLocal, engine
from user_service.main import app
from user_service.models import Base, ProfileName, User
from user_service.seed import find_profile, hash_password, seed_profiles


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seeded():
    """Fresh schema with profiles and one user per profile (ids 1, 2, 3)."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    rate_limit.reset()
    db = SessionLocal()
    try:
        seed_profiles(db)
        for username, profile in (("ana", ProfileName.BASIC), ("marcos", ProfileName.MOD), ("adm", ProfileName.ADM)):
            db.add(
                User(
                    first_name=username.title(),
                    last_name="Silva",
                    username=username,
                    email=f"{username}@forumhub.com",
                    password_hash=hash_password(f"{username}-pass"),
                    profile=find_profile(db, profile),
                )
            )
        db.commit()
        yield db
    finally:
        db.close()


@pytest.fixture
def token_for(client):
    def _token(username: str) -> str:
        r = client.post(
            "/token",
            data={"grant_type": "password", "username": username, "password": f"{username}-pass"},
        )
        assert r.status_code == 200, r.text
        return r.json()["access_token"]

    return _token
