"""
Ambient.Impact Core Main Application
Flow: main.py -> config -> middleware -> routers -> services -> registry
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ambientimpact_core.config.settings import get_settings
from ambientimpact_core.core.exceptions import AmbientImpactException
from ambientimpact_core.core.logging import setup_logging
from ambientimpact_core.middleware.language import LanguageMiddleware
from ambientimpact_core.middleware.logging import LoggingMiddleware
from ambientimpact_core.services.component_service import get_component_service

logger = structlog.get_logger()
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan manager."""
    logger.info("Starting Ambient.Impact Core", version=settings.APP_VERSION)

    try:
        service = get_component_service()
        definitions = service.create_registry().get_definitions()
        logger.info("Components discovered", total_components=len(definitions))
    except Exception as e:
        logger.error("Failed to initialize application", error=str(e))
        raise

    yield

    logger.info("Shutting down Ambient.Impact Core")


async def handle_ambientimpact_exception(request: Request, exc: AmbientImpactException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    setup_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
    )

    # Add middlewares
    app.add_middleware(LanguageMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    app.add_exception_handler(AmbientImpactException, handle_ambientimpact_exception)

    # Include routers
    from ambientimpact_core.api import components, health

    app.include_router(health.router, prefix="/api/health", tags=["health"])
    app.include_router(components.router, prefix="/api/components", tags=["components"])

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ambientimpact_core.main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.DEBUG,
        log_config=None,  # Use structlog instead
    )
