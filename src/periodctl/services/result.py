"""ServiceResult and ServiceError: the contract every service returns.

The CLI renderers and the MCP tools consume this type; neither inspects
exceptions from the service layer except :class:`PersistenceError`.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Stable failure categories carried in ``ServiceError.code``."""

    VALIDATION = "VALIDATION"
    CONFLICT = "CONFLICT"
    EXACT_MATCH = "EXACT_MATCH"
    DUPLICATE_ORDINAL = "DUPLICATE_ORDINAL"
    PERSISTENCE = "PERSISTENCE"
    INTEGRITY_VIOLATION = "INTEGRITY_VIOLATION"
    UNSUPPORTED_PERIODICITY = "UNSUPPORTED_PERIODICITY"
    NO_ANCHOR = "NO_ANCHOR"
    INTERNAL = "INTERNAL"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"detect"``).
        data: Operation-specific payload.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry spans).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None


def failure(
    op: str,
    code: ErrorCode,
    message: str,
    *,
    detail: dict[str, Any] | None = None,
    data: dict[str, Any] | None = None,
    warnings: list[str] | None = None,
) -> ServiceResult:
    """Shorthand for an ``ok=False`` result."""
    return ServiceResult(
        ok=False,
        op=op,
        data=data or {},
        warnings=warnings or [],
        error=ServiceError(code=code, message=message, detail=detail or {}),
    )
