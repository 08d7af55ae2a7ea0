"""
Recommendation Service - AI first, deterministic fallback always.

This service turns a questionnaire into a priced kit:

1. Load the in-stock catalog
2. Ask the AI recommendation client for a kit
3. On any RecommendationError, build the kit with the fallback selector
4. Check the cancellation token before applying the result
5. Price the kit in EUR and format the total with the latest rates

The customer always gets a kit; the generation service is an enhancement.
"""

import logging
from typing import Optional, Union

from voltstore.schemas.configuration import Configuration, Language
from voltstore.schemas.rates import CurrencyCode
from voltstore.schemas.recommendations import (
    KitRecommendationResponse,
    RecommendationError,
    RecommendationErrorKind,
    RecommendationResult,
)
from voltstore.services.ai_recommendation_service import AIRecommendationClient
from voltstore.services.catalog_service import CatalogService
from voltstore.services.currency import currency_for_language, format_price
from voltstore.services.fallback_selector import kit_template, select_fallback_kit
from voltstore.services.rate_cache import RateCache
from voltstore.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class RecommendationEngine:
    """
    Orchestrates catalog, AI client, fallback selector and rate cache.

    Args:
        catalog_service: Read-only catalog access
        ai_client: AI recommendation client
        rate_cache: Exchange-rate cache used for the formatted total
    """

    def __init__(
        self,
        catalog_service: CatalogService,
        ai_client: AIRecommendationClient,
        rate_cache: RateCache,
    ):
        self.catalog_service = catalog_service
        self.ai_client = ai_client
        self.rate_cache = rate_cache

    async def recommend(
        self,
        configuration: Configuration,
        language: Language = Language.EN,
        currency: Optional[Union[CurrencyCode, str]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> KitRecommendationResponse:
        """
        Produce a priced kit for a configuration.

        Args:
            configuration: Questionnaire answers
            language: Display language for names, copy and number grouping
            currency: Display currency (defaults to the language's currency)
            cancel_token: Checked after the AI call; abandons the request if set

        Returns:
            KitRecommendationResponse (never empty)

        Raises:
            RecommendationCancelled: the requester abandoned the request
        """
        catalog = await self.catalog_service.list_in_stock()

        outcome = await self.ai_client.recommend(configuration, catalog, language)

        if cancel_token is not None:
            await cancel_token.raise_if_cancelled()

        if isinstance(outcome, RecommendationError):
            logger.info(
                f"AI recommendation unavailable ({outcome.kind.value}), using fallback selector"
            )
            result = select_fallback_kit(configuration, catalog, language)
            source = "fallback"
            fallback_reason = outcome.kind
        else:
            result = self._fill_copy(outcome, configuration, language)
            source = "ai"
            fallback_reason = None

        display_currency = CurrencyCode(currency) if currency else currency_for_language(language)
        rates = self.rate_cache.current_rates()

        try:
            formatted_total = format_price(result.total_eur, display_currency, rates, language)
        except ValueError as e:
            if source != "ai":
                raise
            logger.warning(f"AI kit total cannot be priced ({e}), using fallback selector")
            result = select_fallback_kit(configuration, catalog, language)
            source = "fallback"
            fallback_reason = RecommendationErrorKind.INVALID_RESPONSE
            formatted_total = format_price(result.total_eur, display_currency, rates, language)

        total_eur = result.total_eur

        return KitRecommendationResponse(
            source=source,
            fallback_reason=fallback_reason,
            title=result.title,
            description=result.description,
            components=result.components,
            total_eur=total_eur,
            currency=display_currency,
            formatted_total=formatted_total,
        )

    @staticmethod
    def _fill_copy(
        result: RecommendationResult,
        configuration: Configuration,
        language: Language,
    ) -> RecommendationResult:
        """Use the tier template for any title/description the AI left blank."""
        if result.title and result.description:
            return result
        title, description = kit_template(configuration.budget, language)
        return result.model_copy(update={
            "title": result.title or title,
            "description": result.description or description,
        })
