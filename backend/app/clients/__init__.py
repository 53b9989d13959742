"""Clients for external services."""

from .catalog import CatalogClient


__all__ = ["CatalogClient"]
