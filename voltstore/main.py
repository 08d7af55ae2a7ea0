"""
FastAPI application entry point for the VoltStore backend.

This module creates the FastAPI app instance, wires the service objects
in the lifespan and registers all routers.
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from voltstore.config import settings
from voltstore.db.client import get_catalog_client
from voltstore.routes.health import router as health_router
from voltstore.routes.preferences import router as preferences_router
from voltstore.routes.rates import router as rates_router
from voltstore.routes.recommendations import router as recommendations_router
from voltstore.services.ai_recommendation_service import AIRecommendationClient
from voltstore.services.catalog_service import CatalogService
from voltstore.services.generation_client import GenerationClient
from voltstore.services.rate_cache import RateCache
from voltstore.services.rate_quote_service import RateQuoteClient
from voltstore.services.recommendation_service import RecommendationEngine
from voltstore.services.storage import LocalStateStore

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: Uses CORS_ALLOWED_ORIGINS env var
    - ENVIRONMENT=testing/development: Allows all origins for local dev

    Returns:
        List of allowed origin URLs, or ["*"] for development.
    """
    environment = os.getenv("ENVIRONMENT", "development")

    if environment == "production":
        cors_origins = os.getenv("CORS_ALLOWED_ORIGINS", "")
        if cors_origins:
            origins = [origin.strip() for origin in cors_origins.split(",")]
            logger.info(f"CORS configured for production with {len(origins)} allowed origins")
            return origins
        logger.warning(
            "CORS_ALLOWED_ORIGINS not set in production. "
            "No web origins allowed. Set CORS_ALLOWED_ORIGINS for the storefront."
        )
        return []

    logger.info(f"CORS configured for {environment}: allowing all origins")
    return ["*"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    store = LocalStateStore(settings.STATE_FILE)
    generation_client = GenerationClient(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        timeout_seconds=settings.GENERATION_TIMEOUT_SECONDS,
    )
    rate_cache = RateCache(
        store,
        RateQuoteClient(generation_client),
        cache_duration_ms=settings.RATE_CACHE_DURATION_MS,
        suppress_duration_ms=settings.RATE_SUPPRESS_DURATION_MS,
    )
    catalog_service = CatalogService(get_catalog_client())

    app.state.state_store = store
    app.state.rate_cache = rate_cache
    app.state.catalog_service = catalog_service
    app.state.recommendation_engine = RecommendationEngine(
        catalog_service,
        AIRecommendationClient(generation_client),
        rate_cache,
    )

    startup_refresh = rate_cache.schedule_startup_refresh(settings.RATE_REFRESH_DEBOUNCE_SECONDS)
    logger.info(f"Services ready (rate cache state: {rate_cache.state().value})")

    # Application runs
    yield

    # --- Shutdown ---
    startup_refresh.cancel()
    try:
        await startup_refresh
    except asyncio.CancelledError:
        logger.debug("Startup rate refresh cancelled on shutdown")


# Create FastAPI app
app = FastAPI(
    title="VoltStore API",
    description="Solar kit recommendations and localized pricing for the VoltStore storefront",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# Custom validation error handler to log detailed errors
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log detailed validation errors for debugging 422 responses."""
    logger.error(
        f"Validation error on {request.method} {request.url.path}: {exc.errors()}"
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "details": jsonable_encoder(exc.errors()),
        }
    )

# Configure CORS with environment-based origins
cors_origins = _get_cors_origins()
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router)
app.include_router(recommendations_router)
app.include_router(rates_router)
app.include_router(preferences_router)

logger.info("FastAPI app initialized successfully")
