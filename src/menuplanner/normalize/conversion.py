"""Conversion of ingredient amounts to grams and milliliters."""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from menuplanner.logging_config import get_logger
from menuplanner.normalize.parsing import ParsedIngredient, parse_ingredient
from menuplanner.normalize.units import (
    DEFAULT_VOCABULARY,
    UnitVocabulary,
    canonical_unit,
    is_target_unit,
    metric_conversion,
)
from menuplanner.schemas import ConversionEntry, MissingConversion

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConversionTable:
    """Ordered, read-only view of the conversion table entries."""

    entries: tuple[ConversionEntry, ...] = ()

    @classmethod
    def from_entries(cls, entries: Iterable[ConversionEntry | dict[str, Any]] | None) -> "ConversionTable":
        """Build a table from entry models or raw dicts, skipping invalid rows."""
        parsed: list[ConversionEntry] = []
        for entry in entries or ():
            if isinstance(entry, ConversionEntry):
                parsed.append(entry)
                continue
            try:
                parsed.append(ConversionEntry.model_validate(entry))
            except ValueError as e:
                logger.warning(f"Skipping invalid conversion entry {entry!r}: {e}")
        return cls(entries=tuple(parsed))

    def __len__(self) -> int:
        return len(self.entries)

    def find(self, ingredient: str, unit: str) -> ConversionEntry | None:
        """First entry for the (ingredient, unit) pair, case-insensitive."""
        for entry in self.entries:
            if entry.matches(ingredient, unit):
                return entry
        return None

    def missing_entries(self, missing: Iterable[MissingConversion]) -> list[ConversionEntry]:
        """Empty curation entries for missing pairs not yet in the table."""
        new_entries: list[ConversionEntry] = []
        seen: set[str] = set()
        for item in missing:
            if item.key in seen or self.find(item.ingredient, item.unit) is not None:
                continue
            seen.add(item.key)
            new_entries.append(ConversionEntry(ingredient=item.ingredient, unit=item.unit))
        return new_entries


@dataclass
class ConversionResult:
    """Converted lines plus the pairs the table could not resolve."""

    converted: list[Any]
    missing: list[MissingConversion] = field(default_factory=list)


def convert_ingredient(
    parsed: ParsedIngredient,
    table: ConversionTable,
) -> tuple[ParsedIngredient | None, MissingConversion | None]:
    """
    Convert a single parsed ingredient.

    Returns (converted, None) on success, (None, None) when the line needs no
    conversion or the converted amount overflows, and (None, missing) when the
    table has no usable entry.
    """
    if parsed.amount is None or not parsed.unit:
        return None, None

    unit = canonical_unit(parsed.unit)
    if is_target_unit(unit):
        return None, None

    rule = metric_conversion(unit)
    if rule is None:
        entry = table.find(parsed.name, unit)
        rule = entry.target() if entry else None

    if rule is None:
        return None, MissingConversion(unit=unit, ingredient=parsed.name)

    target_unit, factor = rule
    amount = parsed.amount * factor
    if not math.isfinite(amount):
        return None, None

    return (
        ParsedIngredient(
            amount=amount,
            unit=target_unit,
            name=parsed.name,
            original=parsed.original,
        ),
        None,
    )


def convert_ingredient_units(
    lines: Any,
    table: ConversionTable | Iterable[ConversionEntry | dict[str, Any]] | None = None,
    vocabulary: UnitVocabulary = DEFAULT_VOCABULARY,
) -> ConversionResult:
    """
    Convert every line to grams or milliliters where possible.

    - g and ml are kept as they are
    - kg and l are converted without a table entry
    - everything else is looked up by ingredient name and unit

    Lines that cannot be converted are returned unchanged and their
    (unit, ingredient) pair is reported once in `missing`.
    """
    if not isinstance(lines, list):
        return ConversionResult(converted=lines, missing=[])

    if not isinstance(table, ConversionTable):
        table = ConversionTable.from_entries(table)

    converted: list[Any] = []
    missing: list[MissingConversion] = []
    seen_missing: set[str] = set()

    for line in lines:
        parsed = parse_ingredient(line, vocabulary)
        result, gap = convert_ingredient(parsed, table)

        if result is not None:
            converted.append(result.render())
            continue

        converted.append(line)
        if gap is not None and gap.key not in seen_missing:
            seen_missing.add(gap.key)
            missing.append(gap)

    if missing:
        logger.debug(
            f"No conversion for {len(missing)} ingredient/unit pairs: "
            + ", ".join(f"{m.unit} {m.ingredient}" for m in missing)
        )

    return ConversionResult(converted=converted, missing=missing)
