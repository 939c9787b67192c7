"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from wacky_pm.api.deps import container
from wacky_pm.api.v1 import agent, health
from wacky_pm.core.config import settings
from wacky_pm.core.constants import API_PREFIX
from wacky_pm.core.exceptions import VerificationFailedError, WackyPMError
from wacky_pm.core.logging import get_logger, setup_logging

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info(
        "Starting Wacky PM agent",
        app_name=settings.app_name,
        env=settings.app_env,
        verify_signatures=settings.github.verify_signatures,
    )
    container.initialize()

    yield

    logger.info("Shutting down Wacky PM agent")
    await container.shutdown()


app = FastAPI(
    title="Wacky PM Copilot Agent",
    description="GitHub Copilot extension that brainstorms wacky product features and writes their PRD",
    version="1.0.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)


# Exception handlers
@app.exception_handler(VerificationFailedError)
async def verification_failed_handler(
    request: Request,
    exc: VerificationFailedError,
) -> PlainTextResponse:
    """Reject unverifiable requests with a plain 401."""
    logger.warning("Request verification failed", path=request.url.path)
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@app.exception_handler(WackyPMError)
async def wacky_pm_error_handler(
    request: Request,
    exc: WackyPMError,
) -> JSONResponse:
    """Handle application errors raised outside the event stream."""
    logger.error(
        "Application error",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected errors."""
    logger.exception(
        "Unexpected error",
        error=str(exc),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            }
        },
    )


# Include routers
app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])
app.include_router(agent.router, tags=["Agent"])


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run(
        "wacky_pm.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
