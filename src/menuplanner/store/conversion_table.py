"""JSON file storage for the user-maintained conversion table."""

import asyncio
import json
import os
import tempfile
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path

from menuplanner.config import get_settings
from menuplanner.logging_config import get_logger
from menuplanner.normalize.conversion import ConversionTable
from menuplanner.schemas import MissingConversion

logger = get_logger(__name__)


class ConversionTableStore:
    """
    Loads and saves the conversion table as a JSON list of entries.

    New missing conversions are appended as empty entries so an admin can fill
    in grams or milliliters later.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path or get_settings().conversion_table_path)
        self._lock = asyncio.Lock()

    def load(self) -> ConversionTable:
        """Read the table; a missing or unreadable file yields an empty table."""
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.info(f"Conversion table not found at {self.path}, starting empty")
            return ConversionTable()
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in conversion table {self.path}: {e}")
            return ConversionTable()

        if not isinstance(data, list):
            logger.error(f"Conversion table {self.path} is not a list of entries")
            return ConversionTable()

        return ConversionTable.from_entries(data)

    def save(self, table: ConversionTable) -> None:
        """Write the table atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [entry.model_dump() for entry in table.entries]

        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    def _append_missing_sync(self, missing: list[MissingConversion]) -> int:
        table = self.load()
        new_entries = table.missing_entries(missing)
        if not new_entries:
            return 0

        self.save(ConversionTable(entries=table.entries + tuple(new_entries)))
        logger.info(
            f"Added {len(new_entries)} conversion entries for curation: "
            + ", ".join(f"{e.unit} {e.ingredient}" for e in new_entries)
        )
        return len(new_entries)

    async def append_missing(self, missing: Iterable[MissingConversion]) -> int:
        """Append empty entries for pairs not yet in the table; returns how many were added."""
        async with self._lock:
            return await asyncio.to_thread(self._append_missing_sync, list(missing))


@lru_cache
def get_conversion_store() -> ConversionTableStore:
    """Get the shared conversion table store."""
    return ConversionTableStore()
