"""
Custom exception hierarchy for sprintcap.

Rule: every error has a machine-readable `code` string so the CLI and the
HTTP layer can branch on it without parsing English messages.

`fatal` errors stop the run (non-zero exit). Non-fatal errors are raised
per iteration and the pipeline skips that iteration.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class SprintCapException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"
    fatal: bool = True

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


# --- Fatal / setup ---------------------------------------------------------

class ConfigurationError(SprintCapException):
    code = "CONFIGURATION_ERROR"

    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"Could not load run arguments from {path}: {reason}",
            details={"path": path},
        )


class CompletionInputError(SprintCapException):
    code = "COMPLETION_INPUT_ERROR"

    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"Could not load completed points from {path}: {reason}",
            details={"path": path},
        )


class IterationSourceError(SprintCapException):
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "ITERATION_SOURCE_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(
            message=message,
            details={"status_code": status_code} if status_code else {},
        )


class StoreError(SprintCapException):
    code = "STORE_ERROR"

    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=f"Sprint record store failed during {operation}: {reason}",
            details={"operation": operation},
        )


# --- Per-iteration ---------------------------------------------------------

class SprintNumberError(SprintCapException):
    """The iteration name does not yield a sprint number."""
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "SPRINT_NUMBER_ERROR"
    fatal = False


class MissingSprintNameError(SprintNumberError):
    code = "MISSING_NAME"

    def __init__(self):
        super().__init__(message="Iteration name is missing.")


class SprintNumberNotFoundError(SprintNumberError):
    code = "NO_MATCH"

    def __init__(self, name: str):
        super().__init__(
            message=f"Iteration name {name!r} does not contain a sprint number.",
            details={"name": name},
        )


class MalformedSprintNumberError(SprintNumberError):
    code = "MALFORMED_NUMBER"

    def __init__(self, name: str, digits: str):
        super().__init__(
            message=f"Could not parse sprint number {digits!r} from {name!r}.",
            details={"name": name, "digits": digits},
        )


class CapacityFetchError(SprintCapException):
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "CAPACITY_FETCH_ERROR"
    fatal = False

    def __init__(
        self,
        iteration_id: str,
        reason: str,
        status_code: Optional[int] = None,
    ):
        details: dict[str, Any] = {"iteration_id": iteration_id}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            message=f"Could not fetch capacity for iteration {iteration_id}: {reason}",
            details=details,
        )
        self.status_code = status_code


# --- HTTP surface ----------------------------------------------------------

class SprintRecordNotFoundError(SprintCapException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "SPRINT_RECORD_NOT_FOUND"
    fatal = False

    def __init__(self, record_id: int):
        super().__init__(
            message=f"Sprint record {record_id} does not exist.",
            details={"id": record_id},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def sprintcap_exception_handler(
    request: Request, exc: SprintCapException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
