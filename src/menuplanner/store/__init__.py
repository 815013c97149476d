"""Persistence of the conversion table."""

from menuplanner.store.conversion_table import ConversionTableStore, get_conversion_store

__all__ = ["ConversionTableStore", "get_conversion_store"]
