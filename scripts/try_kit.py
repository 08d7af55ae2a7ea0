#!/usr/bin/env python3
"""
Kit Recommendation Try-Out Script

Runs the recommendation engine locally without starting the API. With a
GEMINI_API_KEY the AI client is tried first; without one every kit comes
from the fallback selector. The catalog is read from Supabase when
configured, otherwise a small built-in sample is used.

Usage:
    python scripts/try_kit.py
    python scripts/try_kit.py --object "Business" --usage "600+ kWh" --budget Premium
    python scripts/try_kit.py --language da --currency DKK
"""

import argparse
import asyncio
import logging
import os
import sys
from unittest.mock import MagicMock

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from voltstore.config import settings
from voltstore.db.client import get_catalog_client
from voltstore.schemas.configuration import (
    BudgetTier,
    Configuration,
    Language,
    ObjectType,
    Purpose,
    UsageTier,
)
from voltstore.schemas.rates import CurrencyCode
from voltstore.services.ai_recommendation_service import AIRecommendationClient
from voltstore.services.catalog_service import CatalogService
from voltstore.services.generation_client import GenerationClient
from voltstore.services.rate_cache import RateCache
from voltstore.services.rate_quote_service import RateQuoteClient
from voltstore.services.recommendation_service import RecommendationEngine
from voltstore.services.storage import LocalStateStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SAMPLE_ROWS = [
    {"id": "inv-5", "name": "Hybrid Inverter 5 kW", "price": 950, "category": "Inverters", "stock": 8},
    {"id": "inv-8", "name": "Hybrid Inverter 8 kW", "price": 1450, "category": "Inverters", "stock": 5},
    {"id": "inv-12", "name": "Hybrid Inverter 12 kW", "price": 2400, "category": "Inverters", "stock": 2},
    {"id": "bat-5", "name": "LiFePO4 Battery 5 kWh", "price": 1700, "category": "Batteries", "stock": 10},
    {"id": "bat-10", "name": "LiFePO4 Battery 10 kWh", "price": 3100, "category": "Batteries", "stock": 4},
    {"id": "bat-15", "name": "LiFePO4 Battery 15 kWh", "price": 4900, "category": "Batteries", "stock": 1},
]


def create_sample_supabase_client() -> MagicMock:
    """Mock Supabase client returning SAMPLE_ROWS for the products query."""
    mock_client = MagicMock()
    mock_response = MagicMock()
    mock_response.data = SAMPLE_ROWS
    mock_client.table.return_value.select.return_value.order.return_value.execute.return_value = mock_response
    return mock_client


def print_result(response):
    """Pretty print the kit."""
    print("\n" + "=" * 60)
    print(f"SOURCE: {response.source}"
          + (f" (fallback reason: {response.fallback_reason.value})" if response.fallback_reason else ""))
    print("=" * 60)
    print(f"\n{response.title}")
    print(f"{response.description}\n")

    for component in response.components:
        print(f"  {component.quantity} x {component.name}  [{component.id}]  €{component.price_eur:,.2f}")
        for alternative in component.alternatives:
            print(f"      alt: {alternative.name}  €{alternative.price_eur:,.2f}")

    print(f"\nTotal: €{response.total_eur:,.2f}  ->  {response.formatted_total}\n")


async def run(args: argparse.Namespace):
    store = LocalStateStore(args.state_file)
    generation_client = GenerationClient(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        timeout_seconds=settings.GENERATION_TIMEOUT_SECONDS,
    )
    rate_cache = RateCache(store, RateQuoteClient(generation_client))

    if args.refresh_rates:
        outcome = await rate_cache.refresh_now(force=True)
        print(f"Rate refresh: attempted={outcome.attempted} state={outcome.state.value}")

    supabase_client = get_catalog_client() or create_sample_supabase_client()
    engine = RecommendationEngine(
        CatalogService(supabase_client),
        AIRecommendationClient(generation_client),
        rate_cache,
    )

    configuration = Configuration(
        object_type=ObjectType(args.object),
        monthly_usage=UsageTier(args.usage),
        purpose=Purpose(args.purpose),
        budget=BudgetTier(args.budget),
    )

    if not generation_client.has_credential:
        print("\n⚠️  GEMINI_API_KEY not set, the fallback selector will be used.")

    response = await engine.recommend(
        configuration,
        language=Language(args.language),
        currency=CurrencyCode(args.currency) if args.currency else None,
    )
    print_result(response)
    return response


def main():
    parser = argparse.ArgumentParser(description="Try the kit recommendation engine locally")
    parser.add_argument("--object", default=ObjectType.PRIVATE_HOUSE.value,
                        choices=[o.value for o in ObjectType])
    parser.add_argument("--usage", default=UsageTier.MEDIUM.value,
                        choices=[u.value for u in UsageTier])
    parser.add_argument("--purpose", default=Purpose.BACKUP.value,
                        choices=[p.value for p in Purpose])
    parser.add_argument("--budget", default=BudgetTier.OPTIMAL.value,
                        choices=[b.value for b in BudgetTier])
    parser.add_argument("--language", default=Language.EN.value,
                        choices=[lang.value for lang in Language])
    parser.add_argument("--currency", default=None,
                        choices=[c.value for c in CurrencyCode])
    parser.add_argument("--refresh-rates", action="store_true",
                        help="Force a rate refresh before pricing the kit")
    parser.add_argument("--state-file", default=settings.STATE_FILE)

    asyncio.run(run(parser.parse_args()))


if __name__ == "__main__":
    main()
