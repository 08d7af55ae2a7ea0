"""
Pytest configuration for VoltStore backend tests.

Sets up test environment and global fixtures.
"""
import os
from unittest.mock import AsyncMock, MagicMock

import pytest

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_PUBLISHABLE_KEY", "test-publishable-key")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-api-key")

from voltstore.schemas.catalog import CatalogItem  # noqa: E402
from voltstore.schemas.configuration import (  # noqa: E402
    BudgetTier,
    Configuration,
    ObjectType,
    Purpose,
    UsageTier,
)
from voltstore.services.storage import LocalStateStore  # noqa: E402


@pytest.fixture
def supabase_client():
    """
    Mock Supabase client for catalog reads.
    Returns a MagicMock that simulates Supabase client behavior.
    """
    return MagicMock()


@pytest.fixture
def state_store(tmp_path):
    """LocalStateStore backed by a file in the test's temp directory."""
    return LocalStateStore(tmp_path / "state.json")


@pytest.fixture
def quote_client():
    """Rate quote client whose fetch_rates is an AsyncMock."""
    client = MagicMock()
    client.credential = "test-gemini-api-key"
    client.fetch_rates = AsyncMock(
        return_value={"DKK": 7.45, "NOK": 11.5, "SEK": 11.1, "USD": 1.1}
    )
    return client


@pytest.fixture
def make_configuration():
    """Factory for questionnaire answers with sensible defaults."""
    def _make(
        object_type=ObjectType.PRIVATE_HOUSE,
        monthly_usage=UsageTier.MEDIUM,
        purpose=Purpose.BACKUP,
        budget=BudgetTier.OPTIMAL,
    ) -> Configuration:
        return Configuration(
            object_type=object_type,
            monthly_usage=monthly_usage,
            purpose=purpose,
            budget=budget,
        )
    return _make


@pytest.fixture
def sample_catalog():
    """Three inverters and three batteries, in stock, in non-sorted order."""
    return [
        CatalogItem(id="inv-mid", display_name={"en": "Hybrid 8 kW", "da": "Hybrid 8 kW (DK)"},
                    price_eur=1500, category="Inverters", stock_count=4),
        CatalogItem(id="inv-low", display_name="Hybrid 5 kW", price_eur=900,
                    category="Inverters", stock_count=10),
        CatalogItem(id="inv-high", display_name="Hybrid 12 kW", price_eur=2600,
                    category="Inverters", stock_count=1),
        CatalogItem(id="bat-high", display_name="LiFePO4 15 kWh", price_eur=5200,
                    category="Batteries", stock_count=2),
        CatalogItem(id="bat-low", display_name="LiFePO4 5 kWh", price_eur=1800,
                    category="Batteries", stock_count=6),
        CatalogItem(id="bat-mid", display_name="LiFePO4 10 kWh", price_eur=3300,
                    category="Batteries", stock_count=3),
    ]
