"""
Answer routes under /api-forum/v1/forumhub/answers.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from topic_service import services
from topic_service.auth import Caller, get_caller, require_scope
from topic_service.config import API_PREFIX, SCOPE_ANSWER_DELETE
from topic_service.database import get_db
from topic_service.schemas import Acknowledgement, AnswerCreate
from topic_service.user_client import UserClient, get_user_client

router = APIRouter(prefix=f"{API_PREFIX}/answers")


@router.post("/create", status_code=status.HTTP_201_CREATED, response_model=Acknowledgement)
def create_answer(
    body: AnswerCreate,
    topic_id: int = Query(..., gt=0),
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db),
    user_client: UserClient = Depends(get_user_client),
):
    services.create_answer(db, caller, user_client, topic_id, body)
    return Acknowledgement()


@router.delete("/delete", response_model=Acknowledgement)
def delete_answer(
    answer_id: int = Query(..., gt=0),
    caller: Caller = require_scope(SCOPE_ANSWER_DELETE),
    db: Session = Depends(get_db),
    user_client: UserClient = Depends(get_user_client),
):
    services.delete_answer(db, caller, user_client, answer_id)
    return Acknowledgement()
