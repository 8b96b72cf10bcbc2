"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.errors import register_exception_handlers
from src.api.health import router as health_router
from src.config import Settings, get_settings
from src.infrastructure.database import init_database
from src.infrastructure.observability import (
    configure_logging,
    init_tracing,
    shutdown_tracing,
)
from src.modules.auth.password import PasswordHasher
from src.modules.auth.repository import UserRepository
from src.modules.auth.routes import router as auth_router
from src.modules.auth.service import AuthService
from src.modules.auth.tokens import TokenConfig, TokenService

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan handler for startup/shutdown.

    Startup fails with ConfigurationError when no JWT secret is set.
    """
    settings: Settings = app.state.settings

    token_config = TokenConfig.from_settings(settings)

    database = await init_database(settings.database_path)
    app.state.database = database

    repository = UserRepository(database)
    app.state.user_repository = repository
    app.state.auth_service = AuthService(
        repository,
        TokenService(token_config),
        PasswordHasher(rounds=settings.bcrypt_rounds),
    )
    logger.info(
        "auth_service_initialized",
        token_ttl_hours=settings.jwt_expire_hours,
        bcrypt_rounds=settings.bcrypt_rounds,
    )

    try:
        yield
    finally:
        await database.disconnect()
        if settings.tracing_enabled:
            shutdown_tracing()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use; defaults to those loaded from the environment.

    Returns:
        Configured FastAPI app. Services are created in the lifespan.
    """
    settings = settings or get_settings()

    configure_logging(settings.log_level, json_output=settings.log_json)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(
        health_router, prefix=f"{settings.api_prefix}/health", tags=["health"]
    )
    app.include_router(auth_router, prefix=settings.api_prefix)

    if settings.tracing_enabled:
        init_tracing(
            settings.app_name,
            settings.app_version,
            otlp_endpoint=settings.otlp_endpoint,
            console_export=settings.tracing_console_export,
            sample_rate=settings.tracing_sample_rate,
            app=app,
        )

    return app


app = create_app()


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
