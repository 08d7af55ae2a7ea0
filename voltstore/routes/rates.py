"""
FastAPI routes for exchange rates.

Endpoints:
- GET /rates: Current rates and cache state
- POST /rates/refresh: Manual refresh (bypasses TTL and suppression, never a block)
- PATCH /rates: Partial manual update
- GET /rates/format: Convert and format an EUR amount
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from voltstore.dependencies import get_rate_cache, get_state_store
from voltstore.schemas.configuration import Language
from voltstore.schemas.rates import (
    CurrencyCode,
    FormattedPriceResponse,
    RateRefreshResponse,
    RateStatusResponse,
    RateUpdateRequest,
)
from voltstore.services.currency import convert, currency_for_language, format_price
from voltstore.services.preferences_service import get_active_language
from voltstore.services.rate_cache import RateCache
from voltstore.services.storage import LocalStateStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rates", tags=["rates"])


@router.get("", response_model=RateStatusResponse, summary="Current exchange rates")
async def get_rates(rate_cache: RateCache = Depends(get_rate_cache)) -> RateStatusResponse:
    return rate_cache.status()


@router.post(
    "/refresh",
    response_model=RateRefreshResponse,
    summary="Refresh exchange rates now",
    description="Forced refresh. Skipped without an outbound call while the credential is blocked.",
)
async def refresh_rates(rate_cache: RateCache = Depends(get_rate_cache)) -> RateRefreshResponse:
    outcome = await rate_cache.refresh_now(force=True)
    logger.info(
        f"Manual rate refresh: attempted={outcome.attempted}, "
        f"succeeded={outcome.succeeded}, state={outcome.state.value}"
    )
    return RateRefreshResponse(outcome=outcome, status=rate_cache.status())


@router.patch("", response_model=RateStatusResponse, summary="Update exchange rates manually")
async def update_rates(
    body: RateUpdateRequest,
    rate_cache: RateCache = Depends(get_rate_cache),
) -> RateStatusResponse:
    try:
        rate_cache.update_rates(body.model_dump(exclude_none=True))
    except ValueError as e:
        logger.warning(f"Rejected manual rate update: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return rate_cache.status()


@router.get("/format", response_model=FormattedPriceResponse, summary="Format an EUR amount")
async def format_amount(
    amount_eur: float = Query(..., allow_inf_nan=False, description="Amount in EUR"),
    currency: Optional[CurrencyCode] = Query(None, description="Defaults to the language's currency"),
    language: Optional[Language] = Query(None, description="Defaults to the active language"),
    rate_cache: RateCache = Depends(get_rate_cache),
    store: LocalStateStore = Depends(get_state_store),
) -> FormattedPriceResponse:
    language = language or get_active_language(store)
    currency = currency or currency_for_language(language)
    rates = rate_cache.current_rates()

    try:
        formatted = format_price(amount_eur, currency, rates, language)
    except ValueError as e:
        logger.warning(f"Rejected amount for formatting: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return FormattedPriceResponse(
        amount_eur=amount_eur,
        currency=currency,
        converted=convert(amount_eur, currency, rates),
        formatted=formatted,
    )
