"""FastAPI application entrypoint for validation responses."""

from fastapi import FastAPI

from validation_response.core.config import ValidationResponseSettings
from validation_response.core.errors import register_error_handlers


def create_app(settings: ValidationResponseSettings | None = None) -> FastAPI:
    """Build an app whose validation failures use the configured formatter."""
    application = FastAPI(title="Validation Response")
    register_error_handlers(application, settings)

    @application.get("/health")
    def health() -> dict[str, str]:
        """Health check stub endpoint for service readiness."""
        return {"status": "ok"}

    return application


app = create_app()
