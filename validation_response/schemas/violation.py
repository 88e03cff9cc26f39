"""Violation record shared by formatters and response adapters."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict


class Violation(BaseModel):
    """Single field-level validation failure.

    ``path`` uses ``.`` between object segments and ``[key]`` for list or map
    access (``items[0].address.city``). An empty path targets the root object.
    """

    model_config = ConfigDict(frozen=True)

    path: str = ""
    message: str
    code: str | None = None
