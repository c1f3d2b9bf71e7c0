"""Result envelope returned by every rulectl service call.

Commands never inspect exceptions from services; they receive a
:class:`ServiceResult` and hand it to the output layer, which picks a
renderer from ``op``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Machine-readable failure: an upper-case ``code`` plus context."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    ``data`` is only meaningful when ``ok`` is true; ``error`` only when it
    is false. ``meta`` carries telemetry under ``--verbose``.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    def with_warnings(self, warnings: list[str]) -> ServiceResult:
        """Copy with *warnings* placed ahead of the existing ones."""
        if not warnings:
            return self
        return self.model_copy(update={"warnings": [*warnings, *self.warnings]})

    def with_meta(self, **entries: Any) -> ServiceResult:
        return self.model_copy(update={"meta": {**(self.meta or {}), **entries}})


def failure(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
    """Build a failed ServiceResult."""
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=detail),
    )
