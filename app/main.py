from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.config import Settings, get_settings
from app.database import create_db_and_tables
from app.logging_config import get_logger, setup_logging
from app.middleware import RequestLoggingMiddleware

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the events table before serving; log start and stop."""
    logger.info(f"Starting {app.title}")
    await create_db_and_tables()
    yield
    logger.info(f"Stopped {app.title}")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the DevEvent API application.

    Args:
        settings: Settings to build from; the cached settings when omitted

    Returns:
        FastAPI: Configured application with the events API mounted
    """
    settings = settings or get_settings()
    setup_logging(settings)

    application = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    # The listing page is served from another origin and only reads/submits events
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID", "X-Conflicting-Slug"],
    )
    application.add_middleware(RequestLoggingMiddleware)
    application.include_router(api_router, prefix=settings.API_V1_STR)

    @application.get("/", tags=["Health"])
    async def health_check():
        """Root endpoint for health checks."""
        return {"status": "healthy", "service": settings.PROJECT_NAME}

    return application


app = create_app()


def run() -> None:
    """Serve the API with uvicorn (``devevent-api`` console script)."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
