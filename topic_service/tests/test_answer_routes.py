"""
Route tests for /api-forum/v1/forumhub/answers.
"""
from topic_service.models import Answer

ANSWERS = "/api-forum/v1/forumhub/answers"


def _count(db, model) -> int:
    db.expire_all()
    return db.query(model).count()


def _create(client, topic_id, headers, solution="Utilize a anotação @FeignClient na interface."):
    return client.post(f"{ANSWERS}/create", params={"topic_id": topic_id}, json={"solution": solution}, headers=headers)


def _delete(client, answer_id, headers):
    return client.delete(f"{ANSWERS}/delete", params={"answer_id": answer_id}, headers=headers)


def test_create_answer_without_auth_returns_401(client, seeded, user_service):
    r = _create(client, 1, {})
    assert r.status_code == 401
    assert _count(seeded, Answer) == 5


def test_create_blank_answer_returns_400(client, seeded, user_service, bearer):
    r = _create(client, 1, bearer("1"), solution=" ")
    assert r.status_code == 400
    assert r.json()["detail"] == "A resposta não pode ser vazia"
    assert _count(seeded, Answer) == 5


def test_create_answer_on_unknown_topic_returns_404(client, seeded, user_service, bearer):
    r = _create(client, 77, bearer("1"))
    assert r.status_code == 404
    assert r.json()["detail"] == "Tópico não encontrado"


def test_create_answer_on_solved_topic_returns_400(client, seeded, user_service, bearer):
    r = _create(client, 3, bearer("2"))
    assert r.status_code == 400
    body = r.json()
    assert body["title"] == "Erro de negócio"
    assert body["detail"] == "O tópico já foi solucionado"
    assert _count(seeded, Answer) == 5


def test_create_answer(client, seeded, user_service, bearer):
    r = _create(client, 1, bearer("2"))
    assert r.status_code == 201
    assert r.json() == {"message": "HttpStatusCode OK"}
    assert _count(seeded, Answer) == 6

    answer = seeded.get(Answer, 6)
    assert answer.topic_id == 1
    assert answer.author_id == 2
    assert answer.created_at is not None


def test_new_answer_shows_up_on_topic(client, seeded, user_service, bearer):
    _create(client, 2, bearer("3"), solution="Use o CLI rosa para criar o cluster.")
    r = client.get("/api-forum/v1/forumhub/topics", params={"topic_id": 2})
    solutions = [a["solution"] for a in r.json()["answers"]]
    assert "Use o CLI rosa para criar o cluster." in solutions
    assert len(solutions) == 2


def test_delete_answer_without_scope_returns_403(client, seeded, user_service, bearer):
    r = _delete(client, 3, bearer("1", "topic:delete"))
    assert r.status_code == 403
    assert _count(seeded, Answer) == 5


def test_delete_unknown_answer_returns_404(client, seeded, user_service, bearer):
    r = _delete(client, 50, bearer("1", "answer:delete"))
    assert r.status_code == 404
    assert r.json()["detail"] == "Resposta não encontrada"


def test_author_deletes_own_answer(client, seeded, user_service, bearer):
    r = _delete(client, 3, bearer("1", "answer:delete"))
    assert r.status_code == 200
    assert _count(seeded, Answer) == 4
    assert seeded.get(Answer, 3) is None


def test_basic_user_deleting_foreign_answer_returns_418(client, seeded, user_service, bearer):
    for answer_id in (1, 2):
        r = _delete(client, answer_id, bearer("1", "answer:delete"))
        assert r.status_code == 418
        assert r.json()["detail"] == "Privilégio insuficiente"
    assert _count(seeded, Answer) == 5


def test_moderator_deletes_foreign_answer(client, seeded, user_service, bearer):
    r = _delete(client, 4, bearer("2", "answer:delete"))
    assert r.status_code == 200
    assert _count(seeded, Answer) == 4
