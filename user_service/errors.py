"""
Problem responses (application/problem+json, pt-BR) for the user service.
"""
import logging
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"

_TITLES = {
    400: "Solicitação desconhecida",
    401: "Não autenticado",
    403: "Acesso negado",
    404: "Solicitação não encontrada",
    409: "Erro de restrição",
    429: "Muitas requisições",
}


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


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    title = _TITLES.get(exc.status_code, "Erro")
    return problem_response(request, exc.status_code, title, str(exc.detail), getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    error = exc.errors()[0]
    kind = error.get("type")
    loc = error.get("loc", ())
    if kind == "blank_field":
        return problem_response(request, 400, "Erro de restrição", error["msg"])
    if loc and loc[0] == "query":
        return problem_response(request, 400, _TITLES[400], f"Parâmetro '{loc[-1]}' ausente ou inválido")
    if kind == "missing" and len(loc) > 1:
        return problem_response(request, 400, "Erro de restrição", f"O campo '{loc[-1]}' é obrigatório")
    return problem_response(request, 400, _TITLES[400], "Solicitação com valor ilegível")


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.info("Integrity violation on %s: %s", request.url.path, exc.orig)
    return problem_response(request, 409, _TITLES[409], "Registro já existente")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
