"""Catalog loading module."""

from .loader import CatalogLoader

__all__ = ['CatalogLoader']
