"""RFC 7807 problem-details document schemas."""

from __future__ import annotations

from pydantic import BaseModel


class ProblemViolation(BaseModel):
    """One entry of the problem-details ``violations`` list."""

    field: str
    message: str
    code: str | None = None


class ProblemDetails(BaseModel):
    """Problem-details envelope for validation failures."""

    type: str
    title: str
    status: int
    detail: str
    violations: list[ProblemViolation]
