"""
Request and response bodies for topics and answers.
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_core import PydanticCustomError

from topic_service.models import ProfileName, TopicStatus

TITLE_MAX_LENGTH = 200


def _not_blank(value, message: str):
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError("blank_field", message)
    return value


class TopicBody(BaseModel):
    # Missing and null title/message get the same message as blank ones
    model_config = ConfigDict(validate_default=True)

    title: str | None = None
    message: str | None = None
    course_id: int

    @field_validator("title", mode="before")
    @classmethod
    def title_valid(cls, value):
        _not_blank(value, "O título não pode ser vazio")
        if isinstance(value, str) and len(value) > TITLE_MAX_LENGTH:
            raise PydanticCustomError("too_long", "O título deve conter no máximo 200 caracteres")
        return value

    @field_validator("message", mode="before")
    @classmethod
    def message_valid(cls, value):
        return _not_blank(value, "A pergunta não pode ser vazia")


class TopicCreate(TopicBody):
    pass


class TopicUpdate(TopicBody):
    status: TopicStatus


class AnswerCreate(BaseModel):
    model_config = ConfigDict(validate_default=True)

    solution: str | None = None

    @field_validator("solution", mode="before")
    @classmethod
    def solution_valid(cls, value):
        return _not_blank(value, "A resposta não pode ser vazia")


class AuthorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    profile: ProfileName | None


class CourseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class AnswerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    solution: str
    created_at: datetime
    author: AuthorOut | None


class TopicOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    message: str
    created_at: datetime
    status: TopicStatus
    author: AuthorOut | None
    course: CourseOut
    answers: list[AnswerOut]


class PageInfo(BaseModel):
    size: int
    number: int
    total_elements: int
    total_pages: int


class TopicPage(BaseModel):
    content: list[TopicOut]
    page: PageInfo


class Acknowledgement(BaseModel):
    message: str = "HttpStatusCode OK"
