"""
SRTM Repositories

In-memory repositories owning runtime state (the STIG family catalog).
"""

from .stig_catalog_repository import CatalogSnapshot, StigCatalogRepository  # noqa: F401

__all__ = ["StigCatalogRepository", "CatalogSnapshot"]
