"""
Catalog service.

Reads the products table and turns rows into CatalogItem objects. The
engine never writes to the catalog.

Rows are sanitized the way the admin panel stores them: price and stock
may arrive as strings or nulls and are coerced to numbers (invalid -> 0).
"""

import logging
import math
from typing import Any, Dict, List, Optional, cast

from supabase import Client

from voltstore.schemas.catalog import CatalogItem

logger = logging.getLogger(__name__)

PRODUCTS_TABLE = "products"


def _to_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) and number >= 0 else 0.0


def row_to_catalog_item(row: Dict[str, Any]) -> Optional[CatalogItem]:
    """
    Convert one products row into a CatalogItem.

    Returns None for rows without an id or category.
    """
    if row.get("id") in (None, "") or not row.get("category"):
        return None

    name = row.get("name")
    if isinstance(name, dict):
        display_name: Any = {str(k): str(v) for k, v in name.items() if v}
    else:
        display_name = str(name) if name else ""

    return CatalogItem(
        id=str(row["id"]),
        display_name=display_name,
        price_eur=_to_number(row.get("price")),
        category=str(row["category"]),
        stock_count=int(_to_number(row.get("stock"))),
        is_active=row.get("is_active") is not False,
    )


class CatalogService:
    """
    Read-only access to the product catalog.

    Args:
        supabase_client: Supabase client, or None when the catalog is not
            configured (every read then returns an empty list)
    """

    def __init__(self, supabase_client: Optional[Client]):
        self.supabase_client = supabase_client

    async def list_items(self) -> List[CatalogItem]:
        """All valid catalog rows, newest first."""
        if self.supabase_client is None:
            return []

        try:
            response = (
                self.supabase_client.table(PRODUCTS_TABLE)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching catalog: {e}")
            return []

        rows = cast(List[Dict[str, Any]], response.data or [])
        items = [item for item in (row_to_catalog_item(row) for row in rows) if item is not None]
        logger.info(f"Loaded {len(items)} catalog items")
        return items

    async def list_in_stock(self) -> List[CatalogItem]:
        """Active catalog items with stock_count > 0."""
        return [item for item in await self.list_items() if item.in_stock]
