"""
Pydantic schemas for the kit configuration questionnaire.

A Configuration is the four answers a customer gives in the kit
calculator. All fields come from closed enumerations; anything else is
rejected at validation time (422 at the API boundary).
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Language(str, Enum):
    """Supported storefront locales."""
    EN = "en"
    DA = "da"
    NO = "no"
    SV = "sv"


class ObjectType(str, Enum):
    PRIVATE_HOUSE = "Private House"
    BUSINESS = "Business"
    APARTMENT = "Apartment"


class UsageTier(str, Enum):
    LOW = "< 300 kWh"
    MEDIUM = "300-600 kWh"
    HIGH = "600+ kWh"


class Purpose(str, Enum):
    BACKUP = "Backup"
    AUTONOMY = "Autonomy"
    SAVINGS = "Savings"


class BudgetTier(str, Enum):
    ECONOMY = "Economy"
    OPTIMAL = "Optimal"
    PREMIUM = "Premium"


# Highest monthly usage tier doubles the battery quantity
HIGHEST_USAGE_TIER = UsageTier.HIGH


class Configuration(BaseModel):
    """
    Questionnaire answers for one kit recommendation.

    Frozen: once handed to the selector or the AI client it cannot change.
    """
    model_config = ConfigDict(frozen=True)

    object_type: ObjectType = Field(
        ...,
        description="Kind of property the system is for",
        examples=["Private House", "Business"]
    )
    monthly_usage: UsageTier = Field(
        ...,
        description="Monthly electricity consumption tier",
        examples=["300-600 kWh"]
    )
    purpose: Purpose = Field(
        ...,
        description="Primary goal of the installation",
        examples=["Backup"]
    )
    budget: BudgetTier = Field(
        ...,
        description="Budget tier driving which catalog price point is chosen",
        examples=["Optimal"]
    )
