"""
FastAPI routes for storefront preferences.

Endpoints:
- GET /preferences/language: Active language and its display currency
- PUT /preferences/language: Switch the active language
"""

import logging

from fastapi import APIRouter, Depends

from voltstore.dependencies import get_state_store
from voltstore.schemas.preferences import LanguagePreference, LanguageUpdateRequest
from voltstore.services.currency import currency_for_language
from voltstore.services.preferences_service import get_active_language, set_active_language
from voltstore.services.storage import LocalStateStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("/language", response_model=LanguagePreference, summary="Active storefront language")
async def get_language(store: LocalStateStore = Depends(get_state_store)) -> LanguagePreference:
    language = get_active_language(store)
    return LanguagePreference(language=language, currency=currency_for_language(language))


@router.put("/language", response_model=LanguagePreference, summary="Set the storefront language")
async def put_language(
    body: LanguageUpdateRequest,
    store: LocalStateStore = Depends(get_state_store),
) -> LanguagePreference:
    language = set_active_language(store, body.language)
    return LanguagePreference(language=language, currency=currency_for_language(language))
