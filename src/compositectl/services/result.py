"""ServiceResult and ServiceError: the universal service contract.

INVARIANT: All service-layer methods return ServiceResult. A composite
error never escapes a service as an exception; it becomes ``ok=False``
with a structured error. The CLI and plugins consume this type.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult.

    ``code`` is the stable error code (e.g. ``"UNSATISFIED_EXPORT"``);
    ``detail`` names the offending service, bind, satisfier, or key.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Universal return type for all service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"build_composite"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal findings (unmapped binds, bind cycles, plugin failures).
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry span tree under ``-v``).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
