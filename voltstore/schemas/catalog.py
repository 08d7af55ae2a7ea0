"""
Catalog item schema.

Catalog rows are owned by the products table; the engine only reads them.
Product names are stored either as a plain string or as a per-locale
mapping ({"en": "...", "da": "..."}).
"""

from typing import Dict, Union

from pydantic import BaseModel, ConfigDict, Field


class CatalogItem(BaseModel):
    """Read-only view of one product row."""
    model_config = ConfigDict(frozen=True)

    id: str
    display_name: Union[str, Dict[str, str]] = Field(
        ...,
        description="Plain name or per-locale mapping of names"
    )
    price_eur: float = Field(..., ge=0, allow_inf_nan=False, description="Unit price in EUR")
    category: str = Field(..., examples=["Inverters", "Batteries"])
    stock_count: int = Field(0, ge=0)
    is_active: bool = True

    @property
    def in_stock(self) -> bool:
        return self.is_active and self.stock_count > 0

    def localized_name(self, language: str) -> str:
        """
        Resolve the display name for a locale.

        Order: requested language, English, first available value, "".
        """
        name = self.display_name
        if isinstance(name, str):
            return name
        if not name:
            return ""
        language = getattr(language, "value", language)
        return name.get(language) or name.get("en") or next(iter(name.values()), "") or ""
