"""
FastAPI routes for kit recommendations.

Endpoints:
- POST /recommendations/kit: Questionnaire answers in, priced kit out

The response always carries a kit. ``source`` tells whether it came from
the AI client or the deterministic fallback selector.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from voltstore.dependencies import get_recommendation_engine, get_state_store
from voltstore.schemas.recommendations import (
    KitRecommendationRequest,
    KitRecommendationResponse,
)
from voltstore.services.preferences_service import get_active_language
from voltstore.services.recommendation_service import RecommendationEngine
from voltstore.services.storage import LocalStateStore
from voltstore.utils.cancellation import CancellationToken, RecommendationCancelled

logger = logging.getLogger(__name__)

# Non-standard status used by nginx for "client closed request"
CLIENT_CLOSED_REQUEST = 499

router = APIRouter(
    prefix="/recommendations",
    tags=["recommendations"]
)


@router.post(
    "/kit",
    response_model=KitRecommendationResponse,
    status_code=200,
    summary="Recommend a solar kit",
    description="""
    Builds a kit for the questionnaire answers.

    **Flow:**
    1. Load the in-stock catalog
    2. Ask the AI recommendation client for a kit
    3. Fall back to the deterministic selector on any AI failure
    4. Price the kit and format the total in the display currency

    Language defaults to the persisted storefront language; currency
    defaults to the language's currency.
    """,
)
async def recommend_kit(
    request: Request,
    body: KitRecommendationRequest,
    engine: RecommendationEngine = Depends(get_recommendation_engine),
    store: LocalStateStore = Depends(get_state_store),
) -> KitRecommendationResponse:
    language = body.language or get_active_language(store)
    configuration = body.to_configuration()

    logger.info(
        f"Kit recommendation requested: object={configuration.object_type.value}, "
        f"usage={configuration.monthly_usage.value}, budget={configuration.budget.value}, "
        f"language={language.value}"
    )

    try:
        return await engine.recommend(
            configuration,
            language=language,
            currency=body.currency,
            cancel_token=CancellationToken(disconnect_check=request.is_disconnected),
        )
    except RecommendationCancelled:
        logger.info("Kit recommendation abandoned by client")
        raise HTTPException(
            status_code=CLIENT_CLOSED_REQUEST,
            detail="Client closed request",
        )
