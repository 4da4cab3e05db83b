"""
KitchAI Discovery - FastAPI application.

Run with: uvicorn kitchai.web.app:app
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kitchai import ALGORITHM_VERSION, __version__
from kitchai.config import configure_logging, settings
from kitchai.errors import (
    BadRequestError,
    ConfigurationError,
    DataUnavailableError,
    RecipeNotFoundError,
)
from kitchai.web.routes import router as discovery_router

logger = logging.getLogger(__name__)

app = FastAPI(title="KitchAI Discovery", version=__version__)


@app.on_event("startup")
async def startup_event():
    """Log configuration on startup."""
    configure_logging()
    logger.info(f"KitchAI Discovery {__version__} starting up...")
    logger.info(f"  Environment: {settings.kitchai_env}")
    logger.info(f"  Algorithm: {ALGORITHM_VERSION}")


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_development else [],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(discovery_router, prefix="/api")


# =============================================================================
# Error mapping
# =============================================================================


@app.exception_handler(RecipeNotFoundError)
async def recipe_not_found_handler(request: Request, exc: RecipeNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(BadRequestError)
async def bad_request_handler(request: Request, exc: BadRequestError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(DataUnavailableError)
async def data_unavailable_handler(request: Request, exc: DataUnavailableError):
    logger.warning(f"{request.url.path}: {exc}")
    return JSONResponse(
        status_code=503,
        content={"detail": str(exc), "transient": exc.transient},
        headers={"Retry-After": "5"} if exc.transient else None,
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Configuration error: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Discovery engine misconfigured"})


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__, "algorithm_version": ALGORITHM_VERSION}
