"""FastAPI application entry point for the Podman Remote gateway."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from podman_remote.api.exception_handlers import register_exception_handlers
from podman_remote.api.middleware import (
    BearerAuthMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
)
from podman_remote.api.routes import containers_router, health_router, services_router
from podman_remote.core import get_settings
from podman_remote.core.credentials import CredentialStore, TokenValidator
from podman_remote.core.logging import get_logger, setup_logging

logger = get_logger(__name__)

# Path prefixes served by the backend translators; all require a bearer token
PROTECTED_PREFIXES = ("/containers", "/services")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle - startup and shutdown events."""
    settings = get_settings()
    logger.info(
        f"{settings.app_name} {settings.app_version} starting",
        extra={
            "docker_host": settings.docker_host,
            "token_validator": repr(app.state.token_validator),
        },
    )

    yield

    logger.info(f"{settings.app_name} stopped")


def create_app(token_validator: TokenValidator | None = None) -> FastAPI:
    """Build the gateway application.

    Args:
        token_validator: Credential capability for the bearer gate. If None,
            the token is read once from the configured API_TOKEN_FILE.

    Returns:
        Configured FastAPI application
    """
    setup_logging()
    settings = get_settings()

    validator = token_validator if token_validator is not None else CredentialStore.from_settings()

    app = FastAPI(
        title="Podman Remote API",
        description="Authenticated REST gateway for containers and systemd user services",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.token_validator = validator

    # Middleware runs outermost-last-added: request ID, then logging, then auth
    app.add_middleware(
        BearerAuthMiddleware,
        validator=validator,
        protected_prefixes=PROTECTED_PREFIXES,
    )
    if settings.request_logging_enabled:
        app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(containers_router)
    app.include_router(services_router)

    return app


def run() -> None:
    """Serve the gateway with uvicorn on the configured host and port."""
    import uvicorn

    settings = get_settings()
    app = create_app()

    print(f"Server listening on http://{settings.api_host}:{settings.api_port}")
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_config=None)


if __name__ == "__main__":
    run()
