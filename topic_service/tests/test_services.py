"""
Service-layer tests for the local author copy kept by the topic service.
"""
from topic_service.auth import Caller
from topic_service.database import SessionLocal
from topic_service.models import Author, ProfileName
from topic_service.services import resolve_acting_author
from topic_service.user_client import AuthorRecord


class StaticUserClient:
    def __init__(self, record: AuthorRecord):
        self.record = record

    def get_author_by_id(self, user_id, access_token=None):
        return self.record


def _caller(user_id: int) -> Caller:
    return Caller(user_id=user_id, scopes=frozenset(), token="token")


def test_first_requests_from_same_author_in_two_sessions(seeded):
    seeded.query(Author).filter(Author.id == 3).delete()
    seeded.commit()
    users = StaticUserClient(AuthorRecord(id=3, username="adm", email="adm@forumhub.com", profile=ProfileName.ADM))

    first, second = SessionLocal(), SessionLocal()
    try:
        a = resolve_acting_author(first, _caller(3), users).id
        b = resolve_acting_author(second, _caller(3), users).id
        first.commit()
        second.commit()
    finally:
        first.close()
        second.close()

    assert a == b == 3
    seeded.expire_all()
    assert seeded.query(Author).filter(Author.id == 3).count() == 1
    assert seeded.get(Author, 3).profile == ProfileName.ADM


def test_existing_author_is_refreshed(seeded):
    users = StaticUserClient(AuthorRecord(id=1, username="ana.souza", email="ana@forumhub.com", profile=ProfileName.MOD))

    db = SessionLocal()
    try:
        author = resolve_acting_author(db, _caller(1), users)
        assert author.username == "ana.souza"
        assert author.profile == ProfileName.MOD
        db.commit()
    finally:
        db.close()

    seeded.expire_all()
    stored = seeded.get(Author, 1)
    assert stored.username == "ana.souza"
    assert stored.profile == ProfileName.MOD
