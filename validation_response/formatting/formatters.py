"""Formatters turning violation lists into response payloads."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from typing import Protocol

from validation_response.core.config import DEFAULT_RFC7807_TITLE
from validation_response.core.config import DEFAULT_RFC7807_TYPE
from validation_response.core.config import FORMAT_NESTED
from validation_response.core.config import FORMAT_RFC7807
from validation_response.core.config import ValidationResponseSettings
from validation_response.formatting.path import split_property_path
from validation_response.formatting.tree import build_error_tree
from validation_response.formatting.tree import render_error_tree
from validation_response.schemas.problem import ProblemDetails
from validation_response.schemas.problem import ProblemViolation
from validation_response.schemas.violation import Violation

PROBLEM_STATUS = 422


class Formatter(Protocol):
    """Shape shared by all violation formatters."""

    def format(self, violations: Sequence[Violation]) -> dict[str, Any]:
        """Format violations into a JSON-serializable payload."""
        ...


class SimpleFormatter:
    """Flat map of the full, unparsed property path to its messages.

    Example output::

        {"errors": {"name": ["This field is required"], "address.city": ["Invalid city"]}}
    """

    def format(self, violations: Sequence[Violation]) -> dict[str, Any]:
        errors: dict[str, list[str]] = {}
        for violation in violations:
            errors.setdefault(violation.path, []).append(violation.message)
        return {"errors": errors}


class NestedFormatter:
    """Nested error objects mirroring the structure of each property path.

    Example output::

        {"errors": {"items": {"0": {"_root": ["Item is invalid"], "name": ["Name is required"]}}}}
    """

    def format(self, violations: Sequence[Violation]) -> dict[str, Any]:
        tree = build_error_tree(
            (split_property_path(violation.path), violation.message) for violation in violations
        )
        return {"errors": render_error_tree(tree)}


class RFC7807Formatter:
    """RFC 7807 problem-details document.

    The embedded ``status`` is always 422, independent of the HTTP status
    the response is sent with.

    See https://www.rfc-editor.org/rfc/rfc7807.html
    """

    def __init__(
        self,
        *,
        type: str = DEFAULT_RFC7807_TYPE,
        title: str = DEFAULT_RFC7807_TITLE,
    ) -> None:
        self.type = type
        self.title = title

    def format(self, violations: Sequence[Violation]) -> dict[str, Any]:
        count = len(violations)
        document = ProblemDetails(
            type=self.type,
            title=self.title,
            status=PROBLEM_STATUS,
            detail=f"{count} validation {'error' if count == 1 else 'errors'} detected",
            violations=[
                ProblemViolation(field=violation.path, message=violation.message, code=violation.code)
                for violation in violations
            ],
        )
        return document.model_dump()


def create_formatter(settings: ValidationResponseSettings) -> Formatter:
    """Return the formatter selected by ``settings.format``."""
    if settings.format == FORMAT_RFC7807:
        return RFC7807Formatter(type=settings.rfc7807_type, title=settings.rfc7807_title)
    if settings.format == FORMAT_NESTED:
        return NestedFormatter()
    return SimpleFormatter()
