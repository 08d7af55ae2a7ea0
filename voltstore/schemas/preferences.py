"""
Schemas for storefront display preferences.
"""

from pydantic import BaseModel, Field

from voltstore.schemas.configuration import Language
from voltstore.schemas.rates import CurrencyCode


class LanguagePreference(BaseModel):
    """Active UI locale and the currency prices are shown in for it."""
    language: Language = Field(..., examples=["en", "da"])
    currency: CurrencyCode = Field(..., examples=["EUR", "DKK"])


class LanguageUpdateRequest(BaseModel):
    language: Language = Field(..., examples=["sv"])
