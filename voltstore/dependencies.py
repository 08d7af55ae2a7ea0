"""
FastAPI dependency functions for the service objects.

Services are built once in the application lifespan and kept on
``app.state``. Routes receive them through these functions so tests can
swap them with ``app.dependency_overrides``.
"""

from fastapi import Request

from voltstore.services.catalog_service import CatalogService
from voltstore.services.rate_cache import RateCache
from voltstore.services.recommendation_service import RecommendationEngine
from voltstore.services.storage import LocalStateStore


def get_state_store(request: Request) -> LocalStateStore:
    return request.app.state.state_store


def get_rate_cache(request: Request) -> RateCache:
    return request.app.state.rate_cache


def get_catalog_service(request: Request) -> CatalogService:
    return request.app.state.catalog_service


def get_recommendation_engine(request: Request) -> RecommendationEngine:
    return request.app.state.recommendation_engine
