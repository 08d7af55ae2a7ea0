"""
Fallback Selector - deterministic kit selection without network access.

This is the terminal fallback of the recommendation flow: whenever the
generation service is missing, failing or returns something unusable,
the kit is built here from the local catalog. It cannot fail.

Algorithm:
1. Partition the in-stock catalog into inverters and batteries
2. Sort each partition by price (ascending, stable)
3. Pick an index by budget tier:
   - Economy -> cheapest
   - Premium -> most expensive
   - Optimal -> floor(n / 2), i.e. the upper of the two middle items when n is even
   An empty partition is replaced by a built-in default item.
4. Quantities start at 1; Business doubles both, and the highest usage
   tier doubles batteries again (Business + 600+ kWh -> 2 inverters, 4 batteries)
5. Title/description come from a static (budget tier, language) table
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from voltstore.schemas.catalog import CatalogItem
from voltstore.schemas.configuration import (
    HIGHEST_USAGE_TIER,
    BudgetTier,
    Configuration,
    Language,
    ObjectType,
)
from voltstore.schemas.recommendations import KitComponent, RecommendationResult
from voltstore.utils.constants import (
    CATEGORY_BATTERIES,
    CATEGORY_INVERTERS,
    DEFAULT_COMPONENTS,
)

logger = logging.getLogger(__name__)


# =============================================================================
# TEMPLATES
# =============================================================================

KIT_TEMPLATES: Dict[BudgetTier, Dict[Language, Tuple[str, str]]] = {
    BudgetTier.ECONOMY: {
        Language.EN: (
            "Economy Energy Kit",
            "An entry-level system built from our most affordable in-stock inverter and battery.",
        ),
        Language.DA: (
            "Økonomi-energisæt",
            "Et basissystem med vores mest prisvenlige inverter og batteri på lager.",
        ),
        Language.NO: (
            "Økonomi-energisett",
            "Et rimelig startsystem med vår billigste inverter og batteri på lager.",
        ),
        Language.SV: (
            "Ekonomi-energipaket",
            "Ett prisvärt grundsystem med vår billigaste växelriktare och batteri i lager.",
        ),
    },
    BudgetTier.OPTIMAL: {
        Language.EN: (
            "Optimal Energy Kit",
            "A balanced system pairing a mid-range inverter with a mid-range battery.",
        ),
        Language.DA: (
            "Optimalt energisæt",
            "Et afbalanceret system med en inverter og et batteri i mellemklassen.",
        ),
        Language.NO: (
            "Optimalt energisett",
            "Et balansert system med inverter og batteri i mellomklassen.",
        ),
        Language.SV: (
            "Optimalt energipaket",
            "Ett balanserat system med växelriktare och batteri i mellanklassen.",
        ),
    },
    BudgetTier.PREMIUM: {
        Language.EN: (
            "Premium Energy Kit",
            "Our top-tier inverter and battery for maximum capacity and longevity.",
        ),
        Language.DA: (
            "Premium-energisæt",
            "Vores bedste inverter og batteri for maksimal kapacitet og levetid.",
        ),
        Language.NO: (
            "Premium-energisett",
            "Vår beste inverter og batteri for maksimal kapasitet og levetid.",
        ),
        Language.SV: (
            "Premium-energipaket",
            "Vår främsta växelriktare och batteri för maximal kapacitet och livslängd.",
        ),
    },
}


def kit_template(budget: BudgetTier, language: Language) -> Tuple[str, str]:
    """(title, description) for a tier, English when the language is missing."""
    by_language = KIT_TEMPLATES[budget]
    return by_language.get(language) or by_language[Language.EN]


# =============================================================================
# SELECTION
# =============================================================================

def select_index(budget: BudgetTier, count: int) -> int:
    """
    Index into a price-ascending list of `count` items for a budget tier.

    Optimal uses floor(count / 2): for [a, b, c, d] it picks c.
    """
    if budget == BudgetTier.ECONOMY:
        return 0
    if budget == BudgetTier.PREMIUM:
        return count - 1
    return count // 2


def _sorted_partition(catalog: Sequence[CatalogItem], category: str) -> List[CatalogItem]:
    items = [item for item in catalog if item.category == category and item.in_stock]
    # sorted() is stable, so equal prices keep catalog order
    return sorted(items, key=lambda item: item.price_eur)


def _pick_component(
    catalog: Sequence[CatalogItem],
    category: str,
    budget: BudgetTier,
    quantity: int,
    language: Language,
) -> KitComponent:
    partition = _sorted_partition(catalog, category)

    if not partition:
        default = DEFAULT_COMPONENTS[category]
        logger.info(f"No in-stock {category}, using default item {default['id']}")
        return KitComponent(
            id=default["id"],
            name=default["name"],
            price_eur=default["price_eur"],
            quantity=quantity,
        )

    item = partition[select_index(budget, len(partition))]
    return KitComponent(
        id=item.id,
        name=item.localized_name(language.value) or item.id,
        price_eur=item.price_eur,
        quantity=quantity,
    )


def compute_quantities(configuration: Configuration) -> Tuple[int, int]:
    """(inverter_quantity, battery_quantity) for a configuration."""
    inverters = 1
    batteries = 1

    if configuration.object_type == ObjectType.BUSINESS:
        inverters *= 2
        batteries *= 2

    if configuration.monthly_usage == HIGHEST_USAGE_TIER:
        batteries *= 2

    return inverters, batteries


def select_fallback_kit(
    configuration: Configuration,
    catalog: Sequence[CatalogItem],
    language: Optional[Language] = None,
) -> RecommendationResult:
    """
    Build a kit deterministically from the local catalog.

    Args:
        configuration: Questionnaire answers
        catalog: In-stock catalog items (out-of-stock rows are skipped anyway)
        language: Display language for names and copy (defaults to English)

    Returns:
        RecommendationResult with exactly one inverter line and one battery line
    """
    language = language or Language.EN
    inverter_qty, battery_qty = compute_quantities(configuration)

    components = [
        _pick_component(catalog, CATEGORY_INVERTERS, configuration.budget, inverter_qty, language),
        _pick_component(catalog, CATEGORY_BATTERIES, configuration.budget, battery_qty, language),
    ]

    title, description = kit_template(configuration.budget, language)

    logger.info(
        f"Fallback kit selected: budget={configuration.budget.value}, "
        f"components={[c.id for c in components]}"
    )

    return RecommendationResult(title=title, description=description, components=components)
