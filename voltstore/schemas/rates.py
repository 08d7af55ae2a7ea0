"""
Pydantic schemas for exchange rates and the rate cache.

All prices are stored in EUR; rates express how many units of a currency
one EUR buys.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class CurrencyCode(str, Enum):
    EUR = "EUR"
    DKK = "DKK"
    NOK = "NOK"
    SEK = "SEK"
    USD = "USD"


class ExchangeRates(BaseModel):
    """
    EUR-based exchange rates with the epoch-ms time they were fetched.

    EUR is the base currency and is always 1.0.
    """
    EUR: float = 1.0
    DKK: float = Field(..., gt=0, allow_inf_nan=False)
    NOK: float = Field(..., gt=0, allow_inf_nan=False)
    SEK: float = Field(..., gt=0, allow_inf_nan=False)
    USD: float = Field(..., gt=0, allow_inf_nan=False)
    timestamp: int = Field(0, ge=0, description="Epoch milliseconds")

    @field_validator("EUR")
    @classmethod
    def eur_is_base(cls, value: float) -> float:
        if value != 1.0:
            raise ValueError("EUR is the base currency and must be 1.0")
        return value

    def rate_for(self, currency: str) -> float:
        """Rate for a currency code, or 1.0 (treat as EUR) when unknown."""
        code = getattr(currency, "value", currency)
        if code in CurrencyCode.__members__:
            return float(getattr(self, code))
        return 1.0


class RateCacheState(str, Enum):
    FRESH = "FRESH"
    STALE = "STALE"
    SUPPRESSED = "SUPPRESSED"
    BLOCKED = "BLOCKED"


class RefreshOutcome(BaseModel):
    """Result of one refresh call on the rate cache."""
    attempted: bool = Field(..., description="Whether an outbound quote request was made")
    succeeded: bool = False
    state: RateCacheState
    error: Optional[str] = None


class RateStatusResponse(BaseModel):
    """Snapshot of the rate cache for operators and the storefront."""
    rates: ExchangeRates
    state: RateCacheState
    suppress_until: Optional[int] = Field(None, description="Epoch milliseconds")
    blocked: bool = False
    blocked_reason: Optional[str] = None
    last_error: Optional[str] = None


class RateRefreshResponse(BaseModel):
    outcome: RefreshOutcome
    status: RateStatusResponse


class RateUpdateRequest(BaseModel):
    """
    Manual partial update of rates. Omitted currencies keep their value.

    Positivity and finiteness are validated by RateCache.update_rates (400 at the API).
    """
    DKK: Optional[float] = None
    NOK: Optional[float] = None
    SEK: Optional[float] = None
    USD: Optional[float] = None


class FormattedPriceResponse(BaseModel):
    amount_eur: float
    currency: CurrencyCode
    converted: float
    formatted: str = Field(..., examples=["DKK 24,618", "€3,300"])
