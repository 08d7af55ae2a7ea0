"""
AI Recommendation Service - catalog-aware kits from Gemini.

This client asks the generation service for a complete kit and validates
the answer strictly. It never raises for expected failures: the outcome is
either a RecommendationResult or a RecommendationError, and the caller
must fall back to the deterministic selector on any error.

Validation rules (any violation rejects the whole response):
- Markdown code fences are stripped before parsing
- The text must parse as a JSON object
- "components" must be a list (INVALID_RESPONSE) and non-empty (EMPTY_RESULT)
- Each component needs a name, a finite numeric price >= 0 and an
  integral quantity >= 1; numeric strings are coerced, booleans and
  non-numeric values are rejected
- Alternatives follow the same rules
"""

import json
import logging
import math
import uuid
from typing import Any, Dict, List, Optional, Sequence, Union

from voltstore.agents.recommendation.prompts import (
    KIT_RECOMMENDATION_SYSTEM_PROMPT,
    build_inventory_context,
    build_kit_recommendation_user_prompt,
)
from voltstore.schemas.catalog import CatalogItem
from voltstore.schemas.configuration import Configuration, Language
from voltstore.schemas.recommendations import (
    KitComponent,
    RecommendationError,
    RecommendationErrorKind,
    RecommendationResult,
)
from voltstore.services.generation_client import (
    GenerationClient,
    GenerationError,
    GenerationErrorKind,
)
from voltstore.utils.llm_output import strip_code_fences

logger = logging.getLogger(__name__)

RecommendationOutcome = Union[RecommendationResult, RecommendationError]


MAX_QUANTITY = 10_000


class ComponentValidationError(ValueError):
    """A component in the generated kit does not satisfy the schema."""


# =============================================================================
# RESPONSE PARSING
# =============================================================================

def _coerce_price(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        raise ComponentValidationError(f"price must be numeric, got {value!r}")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ComponentValidationError(f"price must be numeric, got {value!r}")
    if not isinstance(value, (int, float)):
        raise ComponentValidationError(f"price must be numeric, got {type(value).__name__}")

    try:
        price = float(value)
    except OverflowError:
        raise ComponentValidationError("price is out of range")
    if not math.isfinite(price) or price < 0:
        raise ComponentValidationError(f"price must be finite and >= 0, got {price}")
    return price


def _coerce_quantity(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        raise ComponentValidationError(f"quantity must be an integer, got {value!r}")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ComponentValidationError(f"quantity must be an integer, got {value!r}")
    if not isinstance(value, (int, float)):
        raise ComponentValidationError(f"quantity must be an integer, got {type(value).__name__}")

    if isinstance(value, float) and (not math.isfinite(value) or not value.is_integer()):
        raise ComponentValidationError(f"quantity must be a whole number, got {value}")

    quantity = int(value)
    if not 1 <= quantity <= MAX_QUANTITY:
        raise ComponentValidationError(f"quantity must be between 1 and {MAX_QUANTITY}, got {quantity}")
    return quantity


def _generated_id() -> str:
    return f"ai-{uuid.uuid4().hex[:9]}"


def parse_component(raw: Any) -> KitComponent:
    """
    Validate and normalize one generated component.

    Raises:
        ComponentValidationError: when the component breaks any rule
    """
    if not isinstance(raw, dict):
        raise ComponentValidationError("component must be an object")

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ComponentValidationError("component name is required")

    raw_alternatives = raw.get("alternatives") or []
    if not isinstance(raw_alternatives, list):
        raise ComponentValidationError("alternatives must be a list")

    raw_id = raw.get("id")
    component_id = str(raw_id).strip() if raw_id not in (None, "") else ""

    return KitComponent(
        id=component_id or _generated_id(),
        name=name.strip(),
        price_eur=_coerce_price(raw.get("price")),
        quantity=_coerce_quantity(raw.get("quantity")),
        alternatives=[parse_component(alt) for alt in raw_alternatives],
    )


def parse_recommendation_response(content: str) -> RecommendationOutcome:
    """
    Turn raw generation text into a validated result or an error.

    Returns:
        RecommendationResult, or RecommendationError with kind
        INVALID_RESPONSE / EMPTY_RESULT
    """
    try:
        response_data = json.loads(strip_code_fences(content))
    except (ValueError, RecursionError) as e:
        logger.error(f"Failed to parse JSON response: {e}")
        return RecommendationError(
            kind=RecommendationErrorKind.INVALID_RESPONSE,
            message="Response is not valid JSON",
        )

    if not isinstance(response_data, dict):
        logger.error("LLM response is not a JSON object")
        return RecommendationError(
            kind=RecommendationErrorKind.INVALID_RESPONSE,
            message="Response is not a JSON object",
        )

    raw_components = response_data.get("components")
    if not isinstance(raw_components, list):
        logger.error("LLM response missing 'components' list")
        return RecommendationError(
            kind=RecommendationErrorKind.INVALID_RESPONSE,
            message="Response has no components list",
        )

    if len(raw_components) == 0:
        logger.error("LLM response has an empty components list")
        return RecommendationError(
            kind=RecommendationErrorKind.EMPTY_RESULT,
            message="Response has no components",
        )

    components: List[KitComponent] = []
    for idx, raw in enumerate(raw_components):
        try:
            components.append(parse_component(raw))
        except (ValueError, OverflowError, RecursionError) as e:
            logger.error(f"Component {idx} rejected: {e}")
            return RecommendationError(
                kind=RecommendationErrorKind.INVALID_RESPONSE,
                message=f"Component {idx} is invalid: {e}",
            )

    title = response_data.get("title")
    description = response_data.get("description")

    result = RecommendationResult(
        title=title.strip() if isinstance(title, str) else "",
        description=description.strip() if isinstance(description, str) else "",
        components=components,
    )
    if not math.isfinite(result.total_eur):
        logger.error("LLM kit total is not a finite number")
        return RecommendationError(
            kind=RecommendationErrorKind.INVALID_RESPONSE,
            message="Kit total is out of range",
        )
    return result


# =============================================================================
# CLIENT
# =============================================================================

_GENERATION_ERROR_KINDS: Dict[GenerationErrorKind, RecommendationErrorKind] = {
    GenerationErrorKind.MISSING_CREDENTIAL: RecommendationErrorKind.MISSING_CREDENTIAL,
    GenerationErrorKind.RATE_LIMITED: RecommendationErrorKind.RATE_LIMITED,
    GenerationErrorKind.CREDENTIAL_REJECTED: RecommendationErrorKind.TRANSPORT,
    GenerationErrorKind.TRANSPORT: RecommendationErrorKind.TRANSPORT,
}


class AIRecommendationClient:
    """
    Requests a kit from the generation service and validates it.

    Args:
        generation_client: Shared GenerationClient
    """

    def __init__(self, generation_client: GenerationClient):
        self.generation_client = generation_client

    async def recommend(
        self,
        configuration: Configuration,
        catalog: Sequence[CatalogItem],
        language: Optional[Language] = None,
    ) -> RecommendationOutcome:
        """
        Ask for one kit. Exactly one outbound request, no retries.

        Args:
            configuration: Questionnaire answers
            catalog: In-stock catalog (sampled down to the inventory cap)
            language: Language for title/description

        Returns:
            RecommendationResult on success, RecommendationError otherwise
        """
        language = language or Language.EN

        if not self.generation_client.has_credential:
            logger.warning("AI recommendation skipped: no API key configured")
            return RecommendationError(
                kind=RecommendationErrorKind.MISSING_CREDENTIAL,
                message="Generation API key is not configured",
            )

        inventory = build_inventory_context(catalog, language)
        prompt = build_kit_recommendation_user_prompt(configuration, inventory, language)

        logger.info(
            f"Requesting AI kit: budget={configuration.budget.value}, "
            f"inventory_items={len(inventory)}"
        )

        try:
            content = await self.generation_client.generate(
                prompt,
                response_format="json",
                system_instruction=KIT_RECOMMENDATION_SYSTEM_PROMPT,
            )
        except GenerationError as e:
            return RecommendationError(
                kind=_GENERATION_ERROR_KINDS[e.kind],
                message=e.message,
                retry_after_seconds=e.retry_after_seconds,
            )

        try:
            outcome = parse_recommendation_response(content)
        except Exception as e:
            logger.exception(f"Unexpected error while parsing AI kit: {e}")
            return RecommendationError(
                kind=RecommendationErrorKind.INVALID_RESPONSE,
                message="Response could not be parsed",
            )

        if isinstance(outcome, RecommendationResult):
            logger.info(f"AI kit accepted with {len(outcome.components)} components")
        return outcome
