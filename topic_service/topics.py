"""
Topic routes under /api-forum/v1/forumhub/topics.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from topic_service import services
from topic_service.auth import Caller, get_caller, require_scope
from topic_service.config import API_PREFIX, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, SCOPE_TOPIC_DELETE, SCOPE_TOPIC_EDIT
from topic_service.database import get_db
from topic_service.schemas import Acknowledgement, TopicCreate, TopicOut, TopicPage, TopicUpdate
from topic_service.user_client import UserClient, get_user_client

router = APIRouter(prefix=f"{API_PREFIX}/topics")


@router.post("/create", status_code=status.HTTP_201_CREATED, response_model=Acknowledgement)
def create_topic(
    body: TopicCreate,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
    user_client: UserClient = Depends(get_user_client),
):
    """Any authenticated user may open a topic; it starts UNSOLVED."""
    services.create_topic(db, caller, user_client, body)
    return Acknowledgement()


@router.get("/listAll", response_model=TopicPage)
def list_topics(
    page: int = Query(0, ge=0),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    sort: list[str] = Query(default=[]),
    db: Session = Depends(get_db),
):
    """Public paged listing. `sort` is repeatable: `field[,asc|desc]`."""
    return services.list_topics(db, page, size, sort)


@router.get("", response_model=TopicOut)
def get_topic(topic_id: int = Query(..., gt=0), db: Session = Depends(get_db)):
    return services.get_topic(db, topic_id)


@router.put("", response_model=Acknowledgement)
def update_topic(
    body: TopicUpdate,
    topic_id: int = Query(..., gt=0),
    caller: Caller = require_scope(SCOPE_TOPIC_EDIT),
    db: Session = Depends(get_db),
    user_client: UserClient = Depends(get_user_client),
):
    """Owner, moderator or administrator; requires scope topic:edit."""
    services.update_topic(db, caller, user_client, topic_id, body)
    return Acknowledgement()


@router.delete("/delete", response_model=Acknowledgement)
def delete_topic(
    topic_id: int = Query(..., gt=0),
    caller: Caller = require_scope(SCOPE_TOPIC_DELETE),
    db: Session = Depends(get_db),
    user_client: UserClient = Depends(get_user_client),
):
    """Owner, moderator or administrator; requires scope topic:delete. Answers go with the topic."""
    services.delete_topic(db, caller, user_client, topic_id)
    return Acknowledgement()
