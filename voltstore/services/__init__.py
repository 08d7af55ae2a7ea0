"""
Service layer for the VoltStore backend.

Services hold the business logic and are called from routes; they never
depend on FastAPI.
"""

from voltstore.services.ai_recommendation_service import (
    AIRecommendationClient,
    parse_recommendation_response,
)
from voltstore.services.catalog_service import CatalogService
from voltstore.services.currency import convert, currency_for_language, format_price
from voltstore.services.fallback_selector import compute_quantities, select_fallback_kit
from voltstore.services.generation_client import GenerationClient, GenerationError
from voltstore.services.preferences_service import get_active_language, set_active_language
from voltstore.services.rate_cache import RateCache
from voltstore.services.rate_quote_service import RateQuoteClient, RateQuoteError
from voltstore.services.recommendation_service import RecommendationEngine
from voltstore.services.storage import LocalStateStore

__all__ = [
    "AIRecommendationClient",
    "parse_recommendation_response",
    "CatalogService",
    "convert",
    "currency_for_language",
    "format_price",
    "compute_quantities",
    "select_fallback_kit",
    "GenerationClient",
    "GenerationError",
    "get_active_language",
    "set_active_language",
    "RateCache",
    "RateQuoteClient",
    "RateQuoteError",
    "RecommendationEngine",
    "LocalStateStore",
]
