"""Problem-details error responses.

Every non-2xx JSON response has the shape Jellyfin uses:
{"status", "type", "title", "errors", "traceId"}.
"""

import logging
import secrets
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.db.errors import ConflictError, NotFoundError, RepositoryError
from src.services.jellyfin.ids import InvalidIdError

logger = logging.getLogger(__name__)

PROBLEM_CONTENT_TYPE = "application/problem+json"

_RFC9110 = "https://tools.ietf.org/html/rfc9110#section-"
STATUS_TYPES = {
    400: _RFC9110 + "15.5.1",
    401: _RFC9110 + "15.5.2",
    403: _RFC9110 + "15.5.4",
    404: _RFC9110 + "15.5.5",
    405: _RFC9110 + "15.5.6",
    409: _RFC9110 + "15.5.10",
    413: _RFC9110 + "15.5.14",
    500: _RFC9110 + "15.6.1",
    501: _RFC9110 + "15.6.2",
}


def new_trace_id() -> str:
    return f"00-{secrets.token_hex(16)}-{secrets.token_hex(8)}-00"


def problem_response(
    status: int,
    title: str | None = None,
    errors: dict[str, list[str]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a problem-details response for a status code."""
    body: dict[str, Any] = {"status": status}
    if status in STATUS_TYPES:
        body["type"] = STATUS_TYPES[status]
    try:
        default_title = HTTPStatus(status).phrase
    except ValueError:
        default_title = "Error"
    body["title"] = title or default_title
    if errors:
        body["errors"] = errors
    body["traceId"] = new_trace_id()
    return JSONResponse(
        status_code=status,
        content=body,
        headers=headers,
        media_type=PROBLEM_CONTENT_TYPE,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    title = exc.detail if isinstance(exc.detail, str) else None
    return problem_response(exc.status_code, title, headers=getattr(exc, "headers", None))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body") or "body"
        errors.setdefault(field, []).append(error.get("msg", "invalid value"))
    return problem_response(400, "One or more validation errors occurred.", errors)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return problem_response(404, str(exc) or None)


async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return problem_response(409, str(exc) or None)


async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
    return problem_response(500)


async def invalid_id_handler(request: Request, exc: InvalidIdError) -> JSONResponse:
    return problem_response(400, str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ConflictError, conflict_handler)
    app.add_exception_handler(RepositoryError, repository_error_handler)
    app.add_exception_handler(InvalidIdError, invalid_id_handler)
