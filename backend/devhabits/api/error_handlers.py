"""Error Handlers — global exception handlers for the DevHabits API.

Invariants:
    - Every error body has the same envelope: {"error": {code, message, category, severity, timestamp, ...}}
    - DevHabitsError → its own code and status; HabitValidationError adds `violations`
    - RequestValidationError (malformed body, bad UUID in path) → 400 with field-level `details`
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (DevHabitsError), validation (Pydantic), catch-all (Exception)
    - 4xx domain errors logged at WARNING, 5xx at ERROR: client mistakes are not incidents
    - Extracted from main.py (ADR: import fan-out < 10)
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from devhabits.core.errors import (
    DevHabitsError, ErrorCategory, ErrorSeverity, HabitValidationError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(DevHabitsError)
    async def devhabits_error_handler(request: Request, exc: DevHabitsError):
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"{exc.code}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "habit_id": exc.context.habit_id,
                "tag_id": exc.context.tag_id,
            },
        )
        content = exc.to_response()
        if isinstance(exc, HabitValidationError):
            content["error"]["violations"] = exc.violations
        return JSONResponse(status_code=exc.http_status, content=content)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        details = _field_errors(exc)
        logger.warning(
            f"Request validation failed ({len(details)} field(s))",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        body = _envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR,
        )
        body["error"]["details"] = details
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_envelope(
                "INTERNAL_ERROR", "An unexpected error occurred",
                ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
            ),
        )


def _envelope(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }


def _field_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
