"""
User registration, author summary lookup (consumed by the topic service)
and profile management.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, EmailStr, field_validator
from pydantic_core import PydanticCustomError
from sqlalchemy.orm import Session

from user_service.config import API_PREFIX, SCOPE_USER_ADMIN
from user_service.database import get_db
from user_service.models import ProfileName, User
from user_service.seed import find_profile, hash_password
from user_service.token_endpoint import get_claims, require_scope

logger = logging.getLogger(__name__)
router = APIRouter(prefix=API_PREFIX)

ACK = {"message": "HttpStatusCode OK"}


class UserCreate(BaseModel):
    first_name: str
    last_name: str
    username: str
    email: EmailStr
    password: str

    @field_validator("first_name", "last_name", "username", "password")
    @classmethod
    def not_blank(cls, value: str, info):
        if not value.strip():
            raise PydanticCustomError("blank_field", "O campo '{field}' não pode ser vazio", {"field": info.field_name})
        return value


class ProfileUpdate(BaseModel):
    profile_name: ProfileName


class AuthorSummary(BaseModel):
    id: int
    username: str
    email: str
    profile: ProfileName


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuário não encontrado")
    return user


@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_user(body: UserCreate, db: Session = Depends(get_db)):
    """Register a user with the BASIC profile."""
    user = User(
        first_name=body.first_name.strip(),
        last_name=body.last_name.strip(),
        username=body.username.strip(),
        email=str(body.email),
        password_hash=hash_password(body.password),
        profile=find_profile(db, ProfileName.BASIC),
    )
    db.add(user)
    db.commit()
    logger.info("Registered user_id=%s username=%s", user.id, user.username)
    return ACK


@router.get("/summary-info", response_model=AuthorSummary)
def summary_info(
    user_id: int = Query(..., gt=0),
    claims: dict = Depends(get_claims),
    db: Session = Depends(get_db),
):
    """Author record for the given id. Any valid access token may call it."""
    user = _get_user(db, user_id)
    return AuthorSummary(
        id=user.id,
        username=user.username,
        email=user.email,
        profile=user.profile.profile_name,
    )


@router.put("/profile")
def change_profile(
    body: ProfileUpdate,
    user_id: int = Query(..., gt=0),
    claims: dict = require_scope(SCOPE_USER_ADMIN),
    db: Session = Depends(get_db),
):
    user = _get_user(db, user_id)
    user.profile = find_profile(db, body.profile_name)
    db.commit()
    logger.info("Profile of user_id=%s set to %s by user_id=%s", user_id, body.profile_name.value, claims.get("user_id"))
    return ACK
