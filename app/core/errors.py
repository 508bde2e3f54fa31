"""Ledger error taxonomy and the HTTP envelopes they are rendered into."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Base class for every failure the ledger reports to its callers."""

    code = "ledger_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def details(self) -> dict[str, Any]:
        return {}


class ValidationError(LedgerError):
    code = "validation_error"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason

    def details(self) -> dict[str, Any]:
        return {"field": self.field, "reason": self.reason}


class NotFoundError(LedgerError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity_type: str, key: Any) -> None:
        super().__init__(f"{entity_type} not found: {key}")
        self.entity_type = entity_type
        self.key = key

    def details(self) -> dict[str, Any]:
        return {"entity_type": self.entity_type, "key": self.key}


class InsufficientStockError(LedgerError):
    code = "insufficient_stock"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, available: int, requested: int, item_number: int | None = None) -> None:
        super().__init__(f"Insufficient stock. Only {available} available")
        self.available = available
        self.requested = requested
        self.item_number = item_number

    def details(self) -> dict[str, Any]:
        return {
            "available": self.available,
            "requested": self.requested,
            "item_number": self.item_number,
        }


class ConflictError(LedgerError):
    code = "conflict"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, entity_type: str, key: Any) -> None:
        super().__init__(f"{entity_type} {key} was modified concurrently; retry the request")
        self.entity_type = entity_type
        self.key = key

    def details(self) -> dict[str, Any]:
        return {"entity_type": self.entity_type, "key": self.key}


class PersistenceError(LedgerError):
    """A store round-trip failed.

    ``stage`` names the write that failed and ``completed`` lists the writes
    that had already been committed, so an operator can reconcile by hand.
    Both writes of a manager operation share one transaction, so ``completed``
    is empty unless the commit itself was interrupted.
    """

    code = "persistence_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, operation: str, stage: str, completed: Sequence[str] = ()) -> None:
        super().__init__(f"{operation} failed during {stage}")
        self.operation = operation
        self.stage = stage
        self.completed = list(completed)

    def details(self) -> dict[str, Any]:
        return {"operation": self.operation, "stage": self.stage, "completed": self.completed}


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"code": code, "message": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


async def ledger_exception_handler(request: Request, exc: LedgerError):
    if isinstance(exc, PersistenceError):
        logger.error(
            "ledger.persistence_failed",
            extra={"extra_data": {"path": request.url.path, **exc.details()}},
        )
    return ErrorEnvelope(
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details() or None,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    message = detail if isinstance(detail, str) else "Error"
    details = detail if isinstance(detail, dict) else None
    return ErrorEnvelope(
        status_code=exc.status_code,
        code="http_error",
        message=message,
        details=details,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc):  # type: ignore[override]
    from fastapi.exceptions import RequestValidationError

    if isinstance(exc, RequestValidationError):
        return ErrorEnvelope(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            code="validation_error",
            message="Validation failed",
            details={"errors": exc.errors()},
        )
    raise exc
