"""Gestion standardisée des erreurs API avec enveloppes d'erreur.

Ce module traduit les erreurs métier (`StargateError`), les `HTTPException` et les erreurs de
validation de requête en une enveloppe JSON unique:
`{success, code, message, response_code, trace_id}`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from stargate.core.http_constants import (
    ERROR_CODES,
    HTTP_BAD_REQUEST,
    HTTP_CONFLICT,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_NOT_FOUND,
    HTTP_UNPROCESSABLE_ENTITY,
)
from stargate.domain.errors import ErrorKind, StargateError

log = structlog.get_logger(__name__)

STATUS_BY_KIND = {
    ErrorKind.INVALID_ARGUMENT: HTTP_BAD_REQUEST,
    ErrorKind.NOT_FOUND: HTTP_NOT_FOUND,
    ErrorKind.CONFLICT: HTTP_CONFLICT,
    ErrorKind.INVALID_ORDERING: HTTP_BAD_REQUEST,
}


@dataclass
class ErrorEnvelope:
    """Standard error envelope for API responses."""

    code: str
    message: str
    response_code: int
    trace_id: str | None = None
    details: list[dict[str, Any]] | None = None


class APIError(HTTPException):
    """Erreur API portant un code machine, utilisée pour surcharger un statut par route."""

    def __init__(self, status_code: int, code: str, message: str) -> None:
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.message = message

    @classmethod
    def from_domain(cls, err: StargateError, status_code: int) -> APIError:
        return cls(status_code=status_code, code=err.kind.value, message=err.message)


def create_error_response(envelope: ErrorEnvelope) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=envelope.response_code,
        content={
            "success": False,
            "code": envelope.code,
            "message": envelope.message,
            "response_code": envelope.response_code,
            "trace_id": envelope.trace_id,
            **({"details": envelope.details} if envelope.details else {}),
        },
    )


def extract_trace_id(request: Request) -> str | None:
    """Récupère l'identifiant de requête posé par le middleware (ou l'en-tête)."""
    trace_id = getattr(request.state, "trace_id", None)
    if trace_id:
        return trace_id
    return request.headers.get("X-Request-ID")


def handle_domain_error(request: Request, exc: StargateError) -> JSONResponse:
    """Traduit une erreur métier selon `STATUS_BY_KIND`."""
    status = STATUS_BY_KIND.get(exc.kind, HTTP_BAD_REQUEST)
    log.warning("domain_error", code=exc.kind.value, error_message=exc.message, status_code=status)
    return create_error_response(
        ErrorEnvelope(
            code=exc.kind.value,
            message=exc.message,
            response_code=status,
            trace_id=extract_trace_id(request),
        )
    )


def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTPException (et APIError) with standard envelope."""
    code = getattr(exc, "code", None) or ERROR_CODES.get(exc.status_code, "http_error")
    log.warning(
        "http_error", code=code, error_message=str(exc.detail), status_code=exc.status_code
    )
    return create_error_response(
        ErrorEnvelope(
            code=code,
            message=str(exc.detail),
            response_code=exc.status_code,
            trace_id=extract_trace_id(request),
        )
    )


def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Erreurs de forme de la requête (JSON invalide, date illisible, champ absent)."""
    details = [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    log.info("request_validation_error", details=details)
    return create_error_response(
        ErrorEnvelope(
            code=ERROR_CODES[HTTP_UNPROCESSABLE_ENTITY],
            message="Request validation failed",
            response_code=HTTP_UNPROCESSABLE_ENTITY,
            trace_id=extract_trace_id(request),
            details=details,
        )
    )


def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Erreur non prévue (stockage indisponible, bug): 500 journalisé avec la pile."""
    log.error("unhandled_error", path=request.url.path, exc_info=exc)
    return create_error_response(
        ErrorEnvelope(
            code=ERROR_CODES[HTTP_INTERNAL_SERVER_ERROR],
            message=str(exc) or type(exc).__name__,
            response_code=HTTP_INTERNAL_SERVER_ERROR,
            trace_id=extract_trace_id(request),
        )
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StargateError, handle_domain_error)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)
