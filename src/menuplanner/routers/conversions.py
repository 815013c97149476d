"""API routes for the conversion table."""

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from menuplanner.schemas import ConversionEntry
from menuplanner.store.conversion_table import ConversionTableStore, get_conversion_store

router = APIRouter(prefix="/api/v1/conversions", tags=["conversions"])


@router.get("", response_model=list[ConversionEntry])
async def list_conversions(
    store: Annotated[ConversionTableStore, Depends(get_conversion_store)],
) -> list[ConversionEntry]:
    """All conversion table entries, including uncurated ones."""
    table = await asyncio.to_thread(store.load)
    return list(table.entries)


@router.get("/uncurated", response_model=list[ConversionEntry])
async def list_uncurated_conversions(
    store: Annotated[ConversionTableStore, Depends(get_conversion_store)],
) -> list[ConversionEntry]:
    """Entries that still have neither grams nor milliliters."""
    table = await asyncio.to_thread(store.load)
    return [entry for entry in table.entries if entry.target() is None]
