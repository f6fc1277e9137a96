# statuspage/core/errors.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("statuspage.errors")

ErrorPayload = Union[str, List[Dict[str, Any]]]


class StatusPageError(Exception):
    status_code = 500

    def __init__(self, message: str, *, issues: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.issues = issues

    @property
    def payload(self) -> ErrorPayload:
        return self.issues if self.issues else self.message


class ValidationError(StatusPageError):
    status_code = 400


class AuthError(StatusPageError):
    status_code = 401


class ForbiddenError(AuthError):
    status_code = 403


class NotFoundError(StatusPageError):
    status_code = 404


class PersistenceError(StatusPageError):
    status_code = 500


def validation_issue(path: str, message: str, type_: str = "value_error") -> Dict[str, Any]:
    return {"path": path, "message": message, "type": type_}


def _issues_from_request_error(exc: RequestValidationError) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for err in exc.errors():
        # loc = ("body", "title") -> "title"
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        out.append(validation_issue(".".join(loc), str(err.get("msg", "")), str(err.get("type", ""))))
    return out


def error_response(status_code: int, error: ErrorPayload, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"error": error}),
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Todas las respuestas de error salen como {"error": str | [issues]}."""

    @app.exception_handler(StatusPageError)
    async def status_page_error_handler(request: Request, exc: StatusPageError):
        if exc.status_code >= 500:
            logger.error("Error interno en %s %s: %s", request.method, request.url.path, exc.message)
            return error_response(exc.status_code, "Internal server error")
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return error_response(exc.status_code, exc.payload, headers=headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return error_response(400, _issues_from_request_error(exc))

    @app.exception_handler(SQLAlchemyError)
    async def persistence_error_handler(request: Request, exc: SQLAlchemyError):
        # el detalle va al log, nunca al cliente
        logger.exception("Fallo de base de datos en %s %s", request.method, request.url.path)
        return error_response(500, "Internal server error")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Error no controlado en %s %s", request.method, request.url.path)
        return error_response(500, "Internal server error")
