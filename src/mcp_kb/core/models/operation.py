"""Structured operation results."""

from typing import Any

from pydantic import BaseModel, Field


class OperationError(BaseModel):
    """Failure indicator returned instead of raising into the caller."""

    code: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class OperationResult(BaseModel):
    """Result envelope of every knowledge-base operation."""

    ok: bool
    data: Any = None
    error: OperationError | None = None

    @classmethod
    def success(cls, data: Any = None) -> "OperationResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(
        cls, code: str, message: str, details: dict[str, Any] | None = None
    ) -> "OperationResult":
        return cls(
            ok=False,
            error=OperationError(code=code, message=message, details=details or {}),
        )
