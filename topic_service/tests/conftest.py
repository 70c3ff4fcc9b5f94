"""
Pytest configuration for topic_service: in-memory SQLite, a locally generated
signing key served as the JWKS, and a stand-in for the user service.
"""
import os
import time
from datetime import datetime, timedelta
from unittest.mock import patch

os.environ["TOPIC_DATABASE_URL"] = "sqlite:///:memory:"

import jwt
import pytest
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.asymmetric.rsa import generate_private_key
from fastapi.testclient import TestClient
from jwt import PyJWKClient

from topic_service import auth as auth_module
from topic_service.config import API_AUDIENCE, ISSUER
from topic_service.database import SessionLocal, engine
from topic_service.exceptions import InstanceNotFoundError
from topic_service.main import app
from topic_service.models import Answer, Author, Base, Course, ProfileName, Topic, TopicStatus
from topic_service.user_client import AuthorRecord, get_user_client


def _int_to_b64url(value: int) -> str:
    length = (value.bit_length() + 7) // 8
    s = jwt.utils.base64url_encode(value.to_bytes(length, "big"))
    return s.decode("utf-8") if isinstance(s, bytes) else s


@pytest.fixture(scope="session")
def signing_key():
    key = generate_private_key(65537, 2048, default_backend())
    pub = key.public_key().public_numbers()
    jwks = {
        "keys": [
            {
                "kty": "RSA",
                "kid": "test-key",
                "alg": "RS256",
                "n": _int_to_b64url(pub.n),
                "e": _int_to_b64url(pub.e),
            }
        ]
    }
    return key, jwks


@pytest.fixture(autouse=True)
def jwks_endpoint(signing_key):
    """Serve the test JWKS to PyJWKClient instead of the user service."""
    _, jwks = signing_key
    auth_module._jwks_client = None
    with patch.object(PyJWKClient, "fetch_data", lambda self: jwks):
        yield
    auth_module._jwks_client = None


@pytest.fixture
def make_token(signing_key):
    key, _ = signing_key

    def _make(user_id="1", scope="", *, aud=API_AUDIENCE, iss=ISSUER, expires_in=3600):
        now = int(time.time())
        payload = {
            "sub": str(user_id),
            "user_id": str(user_id),
            "scope": scope,
            "iss": iss,
            "aud": aud,
            "exp": now + expires_in,
            "iat": now,
        }
        return jwt.encode(payload, key, algorithm="RS256", headers={"kid": "test-key"})

    return _make


@pytest.fixture
def bearer(make_token):
    def _bearer(user_id="1", scope=""):
        return {"Authorization": f"Bearer {make_token(user_id, scope)}"}

    return _bearer


@pytest.fixture
def client():
    return TestClient(app)


AUTHORS = {
    1: AuthorRecord(id=1, username="ana", email="ana@forumhub.com", profile=ProfileName.BASIC),
    2: AuthorRecord(id=2, username="marcos", email="marcos@forumhub.com", profile=ProfileName.MOD),
    3: AuthorRecord(id=3, username="adm", email="adm@forumhub.com", profile=ProfileName.ADM),
}


class FakeUserClient:
    """Answers author lookups from AUTHORS, or raises `failure` when set."""

    def __init__(self):
        self.failure: Exception | None = None
        self.calls: list[tuple[int, str | None]] = []

    def get_author_by_id(self, user_id, access_token=None):
        self.calls.append((user_id, access_token))
        if self.failure is not None:
            raise self.failure
        if user_id not in AUTHORS:
            raise InstanceNotFoundError("Usuário não encontrado")
        return AUTHORS[user_id]


@pytest.fixture
def user_service():
    fake = FakeUserClient()
    app.dependency_overrides[get_user_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_user_client, None)


@pytest.fixture
def seeded():
    """
    Three courses, four authors (id 4 is unknown), three topics and five answers:
    topic 1 by ana (3 answers), topic 2 by marcos (1), topic 3 by the unknown author (1, SOLVED).
    """
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        for record in AUTHORS.values():
            db.add(Author(id=record.id, username=record.username, email=record.email, profile=record.profile))
        db.add(Author(id=4, username="Desconhecido", email=None, profile=None))
        for name in ("Spring Boot", "Microsserviços", "Testes automatizados"):
            db.add(Course(name=name))
        db.flush()

        now = datetime(2024, 5, 10, 12, 0, 0)
        topics = [
            Topic(
                title="Dúvida na utilização do Feign Client",
                message="Como utilizar o Feign Client para integração do serviço x?",
                created_at=now,
                status=TopicStatus.UNSOLVED,
                author_id=1,
                course_id=1,
            ),
            Topic(
                title="Dúvida na utilização do OpenShift",
                message="Como utilizar o Rosa/OpenShift para implantação do serviço x?",
                created_at=now - timedelta(days=1),
                status=TopicStatus.UNSOLVED,
                author_id=2,
                course_id=2,
            ),
            Topic(
                title="Dúvida em relação ao teste end-to-end",
                message="Quais as boas práticas na execução dos testes end-to-end?",
                created_at=now + timedelta(days=1),
                status=TopicStatus.SOLVED,
                author_id=4,
                course_id=3,
            ),
        ]
        db.add_all(topics)
        db.flush()
        for topic_id, author_id in ((1, 2), (1, 3), (1, 1), (2, 1), (3, 2)):
            db.add(Answer(solution=f"Resposta do autor {author_id}", topic_id=topic_id, author_id=author_id))
        db.commit()
        yield db
    finally:
        db.close()
