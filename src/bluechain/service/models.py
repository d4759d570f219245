"""Pydantic models backing the registry HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class InvocationRequest(BaseModel):
    """A named operation with ordered string arguments."""

    function: str = Field(..., min_length=1, max_length=128)
    args: list[str] = Field(default_factory=list)

    @field_validator("args")
    @classmethod
    def _validate_args_size(cls, values: list[str]) -> list[str]:
        if len(values) > 32:
            raise ValueError("At most 32 arguments are accepted")
        return values


class InvocationResponse(BaseModel):
    """Result of a successful operation.

    ``result`` carries the operation's bytes decoded as UTF-8, verbatim;
    mutations return ``None``.
    """

    function: str
    result: str | None = None


class ErrorResponse(BaseModel):
    """Body returned for any registry failure."""

    error: str = Field(description="Failure kind, e.g. DuplicateID")
    message: str
    key: str | None = None
    operation: str | None = None


class HealthResponse(BaseModel):
    """Service health with per-dependency checks."""

    status: str
    service: str = "bluechain"
    version: str
    checks: dict[str, dict[str, Any]] = Field(default_factory=dict)
