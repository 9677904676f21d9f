"""Translate FastAPI errors into the ``{"error": ...}`` bodies the widget expects."""

from typing import Any, Dict, List, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from slopchat.utils.logger import get_logger

logger = get_logger(__name__)


def _is_unparseable(errors: List[Dict[str, Any]]) -> bool:
    return any(error.get("type") == "json_invalid" for error in errors)


def _touches(errors: List[Dict[str, Any]], fields: Tuple[str, ...]) -> bool:
    for error in errors:
        loc = tuple(error.get("loc", ()))
        if loc == ("body",) or (len(loc) >= 2 and loc[0] == "body" and loc[1] in fields):
            return True
    return False


def _chat_error(errors: List[Dict[str, Any]]) -> Tuple[int, str]:
    if _is_unparseable(errors):
        return 400, "Invalid JSON body"
    for error in errors:
        if tuple(error.get("loc", ())) in {("body",), ("body", "messages")}:
            return 400, "Messages array required"
    return 400, "Invalid message format"


def _lead_error(errors: List[Dict[str, Any]]) -> Tuple[int, str]:
    if _is_unparseable(errors):
        return 500, "Failed to submit lead"
    if _touches(errors, ("name", "email")):
        return 400, "Name and email are required"
    return 400, "Invalid lead data"


BODY_ERROR_POLICIES = {
    "/api/chat": _chat_error,
    "/api/lead": _lead_error,
}


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = list(exc.errors())
    policy = BODY_ERROR_POLICIES.get(request.url.path)
    status_code, message = policy(errors) if policy else (400, "Invalid request")
    logger.warning(
        "Rejected %s %s with %d: %s",
        request.method,
        request.url.path,
        status_code,
        [(error.get("type"), error.get("loc")) for error in errors],
    )
    return JSONResponse(status_code=status_code, content={"error": message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
