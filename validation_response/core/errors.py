"""Validation failure exception and FastAPI response adapter."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from validation_response.core.config import FORMAT_RFC7807
from validation_response.core.config import ValidationResponseSettings
from validation_response.core.config import get_settings
from validation_response.formatting.formatters import Formatter
from validation_response.formatting.formatters import create_formatter
from validation_response.schemas.violation import Violation
from validation_response.violations.mapper import map_pydantic_errors

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


class ValidationFailedError(Exception):
    """Raised by application code when its own validation produced violations."""

    def __init__(self, violations: Sequence[Violation], message: str = "Validation failed") -> None:
        super().__init__(message)
        self.violations = list(violations)


@dataclass(frozen=True)
class ValidationResponder:
    """Formatter and status code bound to an application."""

    settings: ValidationResponseSettings
    formatter: Formatter

    def respond(self, violations: Sequence[Violation]) -> JSONResponse:
        """Format violations and wrap them in a JSON response."""
        payload = self.formatter.format(violations)
        logger.info(
            "Returning %d validation violation(s) with format=%s status=%d",
            len(violations),
            self.settings.format,
            self.settings.status_code,
        )
        media_type = PROBLEM_MEDIA_TYPE if self.settings.format == FORMAT_RFC7807 else None
        return JSONResponse(status_code=self.settings.status_code, content=payload, media_type=media_type)


def _responder(request: Request) -> ValidationResponder:
    return request.app.state.validation_responder


def _request_body_schema(request: Request) -> Any:
    # FastAPI stores the matched route in the scope; body_field describes what follows "body" in locations.
    body_field = getattr(request.scope.get("route"), "body_field", None)
    if body_field is None:
        return None
    field_info = getattr(body_field, "field_info", None)
    return getattr(field_info, "annotation", None) or getattr(body_field, "type_", None)


async def validation_failed_handler(request: Request, exc: ValidationFailedError) -> JSONResponse:
    """Format violations raised explicitly by application code."""

    return _responder(request).respond(exc.violations)


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Format FastAPI request validation errors with the configured formatter."""

    violations = map_pydantic_errors(exc.errors(), from_request=True, schema=_request_body_schema(request))
    return _responder(request).respond(violations)


def register_error_handlers(app: FastAPI, settings: ValidationResponseSettings | None = None) -> None:
    """Attach validation error handlers to a FastAPI app instance."""

    resolved = settings or get_settings()
    logger.debug("Registering validation error handlers with settings=%s", resolved.safe_for_logging())
    app.state.validation_responder = ValidationResponder(settings=resolved, formatter=create_formatter(resolved))
    app.add_exception_handler(ValidationFailedError, validation_failed_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
