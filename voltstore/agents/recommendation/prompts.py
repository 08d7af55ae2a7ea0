"""
Kit Recommendation Prompt Templates

Contains the system prompt and user prompt builder for the AI
recommendation client.

Architecture:
- Pattern: Single-shot LLM call with catalog context (no tools)
- Model: Gemini 2.5 Flash
- Temperature: 0.1 (near-deterministic)
- Output: JSON object parsed and validated by the client

Prompt Engineering Pattern:
- Uses XML tags for structured content
- System prompt defines role and constraints
- User prompt carries the questionnaire, a capped inventory sample and
  the exact output schema
"""

import json
from typing import Any, Dict, List, Sequence

from voltstore.schemas.catalog import CatalogItem
from voltstore.schemas.configuration import Configuration, Language
from voltstore.utils.constants import INVENTORY_CONTEXT_LIMIT

LANGUAGE_NAMES = {
    Language.EN: "English",
    Language.DA: "Danish",
    Language.NO: "Norwegian",
    Language.SV: "Swedish",
}

# =============================================================================
# SYSTEM PROMPT
# =============================================================================

KIT_RECOMMENDATION_SYSTEM_PROMPT = """You are a solar energy expert designing home and business energy systems for VoltStore, an online store for solar equipment.

<role>
You design complete energy kits (inverter, batteries and, when useful, solar panels) from the store's inventory, sized to the customer's object type, monthly consumption, goal and budget tier.
</role>

<core_requirements>
1. Prefer items from the provided inventory and reuse their exact id, name and price
2. Prices are unit prices in EUR
3. Quantities are whole numbers of at least 1
4. Every kit contains at least one component
</core_requirements>

<output_format>
Return only a JSON object matching the schema in the user prompt.
No markdown code blocks, no explanatory text.
</output_format>"""


# =============================================================================
# INVENTORY CONTEXT
# =============================================================================

def build_inventory_context(
    catalog: Sequence[CatalogItem],
    language: Language = Language.EN,
    limit: int = INVENTORY_CONTEXT_LIMIT,
) -> List[Dict[str, Any]]:
    """
    Reduce the catalog to a small inventory sample for the prompt.

    Only in-stock items are included, in catalog order, capped at `limit`
    so the prompt size stays bounded however large the catalog grows.
    """
    context = []
    for item in catalog:
        if not item.in_stock:
            continue
        context.append({
            "id": item.id,
            "name": item.localized_name(language.value),
            "price": item.price_eur,
            "category": item.category,
        })
        if len(context) >= limit:
            break
    return context


# =============================================================================
# USER PROMPT BUILDER
# =============================================================================

def build_kit_recommendation_user_prompt(
    configuration: Configuration,
    inventory: List[Dict[str, Any]],
    language: Language = Language.EN,
) -> str:
    """
    Build the user prompt for one kit recommendation.

    Args:
        configuration: Questionnaire answers
        inventory: Output of build_inventory_context
        language: Language for title and description

    Returns:
        Prompt text with questionnaire, inventory and output schema
    """
    language_name = LANGUAGE_NAMES.get(language, "English")
    inventory_json = json.dumps(inventory, ensure_ascii=False, indent=2) if inventory else "[]"

    return f"""Design a solar energy system for this customer.

<questionnaire>
Object: {configuration.object_type.value}
Monthly usage: {configuration.monthly_usage.value}
Primary goal: {configuration.purpose.value}
Budget level: {configuration.budget.value}
</questionnaire>

<inventory>
{inventory_json}
</inventory>

<language>
Respond in {language_name} for "title" and "description".
Component names stay in English technical terms.
</language>

<output_schema>
{{
  "title": "short system name",
  "description": "one or two sentences on the benefits",
  "components": [
    {{
      "id": "inventory id, or empty if not from inventory",
      "name": "component name",
      "price": 0.0,
      "quantity": 1,
      "alternatives": []
    }}
  ]
}}
</output_schema>"""
