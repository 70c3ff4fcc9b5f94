"""
Topic and answer operations. Each public function is one unit of work:
it either commits once or raises a ForumHubError with nothing persisted.
"""
import logging
import math

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session, selectinload

from topic_service.auth import Caller
from topic_service.authorization import Decision, decide_mutation
from topic_service.exceptions import (
    BusinessRuleError,
    InstanceNotFoundError,
    InsufficientPrivilegeError,
    OrphanAuthorError,
)
from topic_service.models import Answer, Author, Course, Topic, TopicStatus
from topic_service.schemas import AnswerCreate, TopicCreate, TopicUpdate
from topic_service.user_client import UserClient

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "id": Topic.id,
    "title": Topic.title,
    "status": Topic.status,
    "created_at": Topic.created_at,
    "createdAt": Topic.created_at,
}

INSUFFICIENT_PRIVILEGE = "Privilégio insuficiente"
ORPHAN_AUTHOR = "O tópico pertence a um autor inexistente, ele não pode ser editado"


def get_topic(db: Session, topic_id: int) -> Topic:
    topic = db.get(Topic, topic_id)
    if topic is None:
        raise InstanceNotFoundError("Tópico não encontrado")
    return topic


def get_course(db: Session, course_id: int) -> Course:
    course = db.get(Course, course_id)
    if course is None:
        raise InstanceNotFoundError("Curso não encontrado")
    return course


def _insert_for(db: Session):
    return postgresql_insert if db.get_bind().dialect.name == "postgresql" else sqlite_insert


def resolve_acting_author(db: Session, caller: Caller, user_client: UserClient) -> Author:
    """Fetch the caller from the user service and refresh its local copy in one statement."""
    record = user_client.get_author_by_id(caller.user_id, caller.token)
    stmt = _insert_for(db)(Author).values(
        id=record.id,
        username=record.username,
        email=record.email,
        profile=record.profile,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[Author.id],
        set_={
            "username": stmt.excluded.username,
            "email": stmt.excluded.email,
            "profile": stmt.excluded.profile,
        },
    )
    db.execute(stmt)
    return db.get(Author, record.id, populate_existing=True)


def _enforce(decision: Decision, acting: Author, resource: str) -> None:
    if decision is Decision.ALLOWED:
        return
    logger.warning("Author %s denied on %s: %s", acting.id, resource, decision.value)
    if decision is Decision.DENIED_ORPHAN_AUTHOR:
        raise OrphanAuthorError(ORPHAN_AUTHOR)
    raise InsufficientPrivilegeError(INSUFFICIENT_PRIVILEGE)


def _check_owner(acting: Author, owner: Author | None, resource: str, *, editing: bool) -> None:
    decision = decide_mutation(
        acting.id,
        acting.profile,
        owner.id if owner is not None else None,
        owner.profile if owner is not None else None,
        editing=editing,
    )
    _enforce(decision, acting, resource)


def create_topic(db: Session, caller: Caller, user_client: UserClient, body: TopicCreate) -> Topic:
    author = resolve_acting_author(db, caller, user_client)
    course = get_course(db, body.course_id)
    topic = Topic(
        title=body.title,
        message=body.message,
        status=TopicStatus.UNSOLVED,
        author=author,
        course=course,
    )
    db.add(topic)
    db.commit()
    logger.info("Topic %s created by author %s in course %s", topic.id, author.id, course.id)
    return topic


def _parse_sort(sort: list[str]) -> list:
    order_by = []
    for item in sort:
        if not item.strip():
            continue
        field, _, direction = item.partition(",")
        column = SORTABLE_COLUMNS.get(field.strip())
        direction = (direction.strip() or "asc").lower()
        if column is None or direction not in ("asc", "desc"):
            raise BusinessRuleError(f"Critério de ordenação inválido: '{item}'")
        order_by.append(column.asc() if direction == "asc" else column.desc())
    return order_by


def list_topics(db: Session, page: int, size: int, sort: list[str]) -> dict:
    """One page of topics; insertion order unless sort criteria are given."""
    order_by = _parse_sort(sort) + [Topic.id.asc()]
    total = db.query(func.count(Topic.id)).scalar() or 0
    topics = (
        db.query(Topic)
        .options(selectinload(Topic.answers))
        .order_by(*order_by)
        .offset(page * size)
        .limit(size)
        .all()
    )
    return {
        "content": topics,
        "page": {
            "size": size,
            "number": page,
            "total_elements": total,
            "total_pages": math.ceil(total / size) if size else 0,
        },
    }


def update_topic(db: Session, caller: Caller, user_client: UserClient, topic_id: int, body: TopicUpdate) -> Topic:
    topic = get_topic(db, topic_id)
    course = get_course(db, body.course_id)
    author = resolve_acting_author(db, caller, user_client)
    _check_owner(author, topic.author, f"topic {topic_id}", editing=True)

    topic.title = body.title
    topic.message = body.message
    topic.status = body.status
    topic.course = course
    db.commit()
    logger.info("Topic %s updated by author %s (status=%s)", topic_id, author.id, body.status.value)
    return topic


def delete_topic(db: Session, caller: Caller, user_client: UserClient, topic_id: int) -> None:
    topic = get_topic(db, topic_id)
    author = resolve_acting_author(db, caller, user_client)
    _check_owner(author, topic.author, f"topic {topic_id}", editing=False)

    answers = len(topic.answers)
    db.delete(topic)
    db.commit()
    logger.info("Topic %s deleted by author %s with %s answers", topic_id, author.id, answers)


def create_answer(db: Session, caller: Caller, user_client: UserClient, topic_id: int, body: AnswerCreate) -> Answer:
    topic = get_topic(db, topic_id)
    if topic.status == TopicStatus.SOLVED:
        raise BusinessRuleError("O tópico já foi solucionado")
    author = resolve_acting_author(db, caller, user_client)
    answer = Answer(solution=body.solution, topic=topic, author=author)
    db.add(answer)
    db.commit()
    logger.info("Answer %s added to topic %s by author %s", answer.id, topic_id, author.id)
    return answer


def delete_answer(db: Session, caller: Caller, user_client: UserClient, answer_id: int) -> None:
    answer = db.get(Answer, answer_id)
    if answer is None:
        raise InstanceNotFoundError("Resposta não encontrada")
    author = resolve_acting_author(db, caller, user_client)
    _check_owner(author, answer.author, f"answer {answer_id}", editing=False)

    db.delete(answer)
    db.commit()
    logger.info("Answer %s deleted by author %s", answer_id, author.id)
