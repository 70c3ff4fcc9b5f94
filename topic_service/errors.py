"""
Exception handlers rendering every failure as application/problem+json:
{timestamp, status, title, detail, instance}, Content-Language pt-BR.
"""
import logging
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from topic_service.exceptions import ForumHubError

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"

UNREADABLE_TITLE = "Solicitação desconhecida"
CONSTRAINT_TITLE = "Erro de restrição"

_HTTP_TITLES = {
    400: UNREADABLE_TITLE,
    401: "Não autenticado",
    403: "Acesso negado",
    404: "Solicitação não encontrada",
    405: "Método não permitido",
}

# pydantic error types produced by field validators in schemas.py
_FIELD_ERROR_TYPES = {"blank_field", "too_long"}


def problem_response(
    request: Request,
    status_code: int,
    title: str,
    detail: str,
    headers: dict | None = None,
) -> JSONResponse:
    body = {
        "timestamp": datetime.now().isoformat(),
        "status": status_code,
        "title": title,
        "detail": detail,
        "instance": request.url.path,
    }
    return JSONResponse(
        body,
        status_code=status_code,
        media_type=PROBLEM_JSON,
        headers={"Content-Language": "pt-BR", **(headers or {})},
    )


async def forumhub_error_handler(request: Request, exc: ForumHubError):
    if exc.status_code >= 500:
        logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc.detail)
    return problem_response(request, exc.status_code, exc.title, exc.detail)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    title = _HTTP_TITLES.get(exc.status_code, "Erro")
    return problem_response(request, exc.status_code, title, str(exc.detail), getattr(exc, "headers", None))


def _describe_validation_error(error: dict) -> tuple[str, str]:
    """Map the first pydantic error to (title, detail)."""
    kind = error.get("type")
    loc = error.get("loc", ())
    if kind in _FIELD_ERROR_TYPES:
        return CONSTRAINT_TITLE, error["msg"]
    if loc and loc[0] == "query":
        return UNREADABLE_TITLE, f"Parâmetro '{loc[-1]}' ausente ou inválido"
    if kind == "missing" and len(loc) > 1:
        return CONSTRAINT_TITLE, f"O campo '{loc[-1]}' é obrigatório"
    return UNREADABLE_TITLE, "Solicitação com valor ilegível"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    title, detail = _describe_validation_error(exc.errors()[0])
    return problem_response(request, 400, title, detail)


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.info("Integrity violation on %s: %s", request.url.path, exc.orig)
    return problem_response(request, 409, CONSTRAINT_TITLE, "Registro já existente")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ForumHubError, forumhub_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
