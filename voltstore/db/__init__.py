"""
Database access layer for the VoltStore backend.

Read-only: the engine queries the products table and never writes to it.
Product CRUD belongs to the admin application.
"""

from .client import get_catalog_client

__all__ = ["get_catalog_client"]
