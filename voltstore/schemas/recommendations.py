"""
Pydantic schemas for kit recommendations.

These models define the contracts between the AI recommendation client,
the fallback selector, the recommendation engine and the HTTP layer.
"""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from voltstore.schemas.configuration import (
    BudgetTier,
    Configuration,
    Language,
    ObjectType,
    Purpose,
    UsageTier,
)
from voltstore.schemas.rates import CurrencyCode

# ============================================================================
# DOMAIN MODELS
# ============================================================================

class KitComponent(BaseModel):
    """
    A single priced line of a recommended kit.

    Produced by either the AI client or the fallback selector. The fallback
    path never fills `alternatives`.
    """
    id: str = Field(..., description="Catalog id, or generated 'ai-...' id")
    name: str = Field(..., examples=["Deye SUN-8K-SG04LP3 Hybrid Inverter"])
    price_eur: float = Field(..., ge=0, allow_inf_nan=False, description="Unit price in EUR")
    quantity: int = Field(..., ge=1)
    alternatives: List["KitComponent"] = Field(default_factory=list)

    @property
    def line_total_eur(self) -> float:
        return self.price_eur * self.quantity


class RecommendationResult(BaseModel):
    """A complete kit. Must contain at least one component to be valid."""
    title: str
    description: str
    components: List[KitComponent] = Field(..., min_length=1)

    @property
    def total_eur(self) -> float:
        """Sum of top-level line totals (alternatives are not counted)."""
        return sum(component.line_total_eur for component in self.components)


class RecommendationErrorKind(str, Enum):
    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    TRANSPORT = "TRANSPORT"
    RATE_LIMITED = "RATE_LIMITED"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    EMPTY_RESULT = "EMPTY_RESULT"


class RecommendationError(BaseModel):
    """
    Failure returned by the AI recommendation client.

    Every kind is non-fatal: the caller must fall back to the
    deterministic selector.
    """
    kind: RecommendationErrorKind
    message: str = ""
    retry_after_seconds: Optional[float] = Field(
        None,
        description="Upstream retry hint, only for RATE_LIMITED"
    )


# ============================================================================
# REQUEST MODELS
# ============================================================================

class KitRecommendationRequest(BaseModel):
    """
    Request for a kit recommendation.

    The four questionnaire answers plus optional display preferences.
    `language` defaults to the persisted active language and `currency`
    to that language's currency.
    """
    object_type: ObjectType = Field(..., examples=["Private House"])
    monthly_usage: UsageTier = Field(..., examples=["300-600 kWh"])
    purpose: Purpose = Field(..., examples=["Backup"])
    budget: BudgetTier = Field(..., examples=["Optimal"])
    language: Optional[Language] = Field(None, examples=["en", "da"])
    currency: Optional[CurrencyCode] = Field(None, examples=["DKK"])

    def to_configuration(self) -> Configuration:
        return Configuration(
            object_type=self.object_type,
            monthly_usage=self.monthly_usage,
            purpose=self.purpose,
            budget=self.budget,
        )


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class KitRecommendationResponse(BaseModel):
    """
    A priced kit ready for display.

    `source` tells whether the generation service produced the kit or the
    local selector did; `fallback_reason` carries the AI error kind when
    the fallback was used.
    """
    source: Literal["ai", "fallback"]
    fallback_reason: Optional[RecommendationErrorKind] = None
    title: str
    description: str
    components: List[KitComponent] = Field(..., min_length=1)
    total_eur: float = Field(..., ge=0)
    currency: CurrencyCode
    formatted_total: str = Field(..., examples=["DKK 24,618"])
