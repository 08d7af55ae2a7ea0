"""
Supabase client factory for read-only catalog access.

The engine only ever reads the products table, so the client is created
with the publishable key. It never writes to the catalog.
"""

import logging
from typing import Optional

from supabase import Client, create_client

from voltstore.config import settings

logger = logging.getLogger(__name__)

_PLACEHOLDER_MARKERS = ("placeholder", "xyz.supabase.co")


def is_catalog_configured(url: str, key: str) -> bool:
    """False for an empty or placeholder Supabase project."""
    if not url or not key:
        return False
    return not any(marker in url for marker in _PLACEHOLDER_MARKERS)


def get_catalog_client(
    url: Optional[str] = None,
    key: Optional[str] = None,
) -> Optional[Client]:
    """
    Create a Supabase client for catalog reads.

    Args:
        url: Project URL (defaults to SUPABASE_URL)
        key: Publishable key (defaults to SUPABASE_PUBLISHABLE_KEY)

    Returns:
        A Supabase client, or None when the project is not configured.
        Callers treat None as an empty catalog.
    """
    url = url if url is not None else settings.SUPABASE_URL
    key = key if key is not None else settings.SUPABASE_PUBLISHABLE_KEY

    if not is_catalog_configured(url, key):
        logger.warning(
            "Supabase URL or key is missing or a placeholder. "
            "Catalog reads will return no items."
        )
        return None

    client: Client = create_client(supabase_url=url, supabase_key=key)
    logger.debug("Created Supabase catalog client (publishable key)")
    return client
