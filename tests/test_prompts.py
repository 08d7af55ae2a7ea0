"""
Tests for prompt builders and LLM output helpers.
"""

import pytest

from voltstore.agents.rates.prompts import RATE_QUOTE_CURRENCIES, build_rate_quote_prompt
from voltstore.agents.recommendation.prompts import (
    build_inventory_context,
    build_kit_recommendation_user_prompt,
)
from voltstore.schemas.catalog import CatalogItem
from voltstore.schemas.configuration import Language
from voltstore.utils.llm_output import strip_code_fences


class TestInventoryContext:

    def test_in_stock_only_in_catalog_order(self, sample_catalog):
        catalog = sample_catalog + [
            CatalogItem(id="gone", display_name="Gone", price_eur=1, category="Inverters", stock_count=0)
        ]

        context = build_inventory_context(catalog)

        assert [entry["id"] for entry in context] == [item.id for item in sample_catalog]
        assert context[0] == {"id": "inv-mid", "name": "Hybrid 8 kW", "price": 1500, "category": "Inverters"}

    def test_capped_at_limit(self):
        catalog = [
            CatalogItem(id=f"item-{i}", display_name=f"Item {i}", price_eur=i,
                        category="Batteries", stock_count=1)
            for i in range(40)
        ]

        assert len(build_inventory_context(catalog)) == 15
        assert len(build_inventory_context(catalog, limit=3)) == 3

    def test_names_are_localized(self, sample_catalog):
        context = build_inventory_context(sample_catalog, Language.DA)

        assert context[0]["name"] == "Hybrid 8 kW (DK)"


class TestKitPrompt:

    def test_contains_questionnaire_inventory_and_language(self, make_configuration, sample_catalog):
        prompt = build_kit_recommendation_user_prompt(
            make_configuration(),
            build_inventory_context(sample_catalog),
            Language.DA,
        )

        assert "Object: Private House" in prompt
        assert "Monthly usage: 300-600 kWh" in prompt
        assert "Respond in Danish" in prompt
        assert '"bat-low"' in prompt

    def test_empty_inventory(self, make_configuration):
        prompt = build_kit_recommendation_user_prompt(make_configuration(), [])

        assert "<inventory>\n[]\n</inventory>" in prompt


def test_rate_quote_prompt_lists_currencies():
    prompt = build_rate_quote_prompt(RATE_QUOTE_CURRENCIES)

    for code in ("DKK", "NOK", "SEK", "USD"):
        assert code in prompt


@pytest.mark.parametrize("content", [
    '```json\n{"a": 1}\n```',
    '```JSON\n{"a": 1}\n```',
    '```\n{"a": 1}\n```',
    'Sure! {"a": 1}',
    '  {"a": 1}  ',
])
def test_strip_code_fences(content):
    assert strip_code_fences(content) == '{"a": 1}'
