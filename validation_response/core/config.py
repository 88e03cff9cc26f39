"""Configuration for validation error responses."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_STATUS_CODE = 422
DEFAULT_FORMAT = "simple"
DEFAULT_RFC7807_TYPE = "about:blank"
DEFAULT_RFC7807_TITLE = "Validation Failed"

FORMAT_SIMPLE = "simple"
FORMAT_NESTED = "nested"
FORMAT_RFC7807 = "rfc7807"
SUPPORTED_FORMATS = (FORMAT_SIMPLE, FORMAT_NESTED, FORMAT_RFC7807)

MIN_STATUS_CODE = 400
MAX_STATUS_CODE = 599


class ConfigurationError(ValueError):
    """Raised when validation response settings are out of range or unknown."""


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class ValidationResponseSettings:
    """Selected formatter and HTTP status for validation failures."""

    status_code: int = DEFAULT_STATUS_CODE
    format: str = DEFAULT_FORMAT
    rfc7807_type: str = DEFAULT_RFC7807_TYPE
    rfc7807_title: str = DEFAULT_RFC7807_TITLE

    def __post_init__(self) -> None:
        if not MIN_STATUS_CODE <= self.status_code <= MAX_STATUS_CODE:
            raise ConfigurationError(
                f"status_code must be between {MIN_STATUS_CODE} and {MAX_STATUS_CODE}, got {self.status_code}"
            )
        if self.format not in SUPPORTED_FORMATS:
            raise ConfigurationError(
                f'Invalid format "{self.format}". Must be one of: {", ".join(SUPPORTED_FORMATS)}'
            )

    def safe_for_logging(self) -> dict[str, str | int]:
        """Return settings as a plain dict for log lines."""
        return {
            "status_code": self.status_code,
            "format": self.format,
            "rfc7807_type": self.rfc7807_type,
            "rfc7807_title": self.rfc7807_title,
        }


def load_settings(*, format: str | None = None) -> ValidationResponseSettings:
    """Load settings from the environment, with ``format`` taking precedence when given."""
    if format is None:
        format = os.getenv("VALIDATION_RESPONSE_FORMAT", DEFAULT_FORMAT).strip().lower()
    return ValidationResponseSettings(
        status_code=_get_int_env("VALIDATION_RESPONSE_STATUS_CODE", DEFAULT_STATUS_CODE),
        format=format,
        rfc7807_type=os.getenv("VALIDATION_RESPONSE_RFC7807_TYPE", DEFAULT_RFC7807_TYPE),
        rfc7807_title=os.getenv("VALIDATION_RESPONSE_RFC7807_TITLE", DEFAULT_RFC7807_TITLE),
    )


@lru_cache(maxsize=1)
def get_settings() -> ValidationResponseSettings:
    """Load validation response settings from the environment."""
    return load_settings()
