"""Unit vocabulary, synonym canonicalization and built-in metric rules."""

import re
from dataclasses import dataclass
from functools import cached_property

from menuplanner.logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# Unit Tables
# =============================================================================

# Units recognized after a leading amount (matched case-insensitively)
DEFAULT_UNITS: tuple[str, ...] = (
    # Metric
    "g",
    "kg",
    "mg",
    "ml",
    "l",
    "cl",
    "dl",
    # German colloquial
    "EL",
    "TL",
    "Esslöffel",
    "Teelöffel",
    "Prise",
    "Prisen",
    "Tasse",
    "Tassen",
    "Becher",
    "Stück",
    "Stk",
    "Bund",
    "Pck",
    "Pkg",
    "Dose",
    "Dosen",
    # International
    "tsp",
    "tbsp",
    "cup",
    "oz",
    "lb",
    "piece",
    "pinch",
)

# Spoon synonyms mapped to the form conversion table entries are keyed by
UNIT_SYNONYMS: dict[str, str] = {
    "tl": "TL",
    "teel": "TL",
    "teelöffel": "TL",
    "tsp": "TL",
    "teaspoon": "TL",
    "el": "EL",
    "essl": "EL",
    "esslöffel": "EL",
    "tbsp": "EL",
    "tablespoon": "EL",
}

# Units every shopping list line is converted into
TARGET_UNITS: frozenset[str] = frozenset({"g", "ml"})

# Conversions that never need a table entry: unit -> (target unit, factor)
METRIC_CONVERSIONS: dict[str, tuple[str, float]] = {
    "kg": ("g", 1000.0),
    "l": ("ml", 1000.0),
}

# Letters that may not follow a unit token, otherwise the unit is part of a word
_WORD_CHARS = "a-zA-ZäöüÄÖÜß"


def canonical_unit(unit: str | None) -> str | None:
    """
    Map a unit to the form used for table lookups.

    Examples:
        "Teelöffel" -> "TL"
        "tbsp" -> "EL"
        "Tasse" -> "Tasse"
    """
    if not unit:
        return unit
    return UNIT_SYNONYMS.get(unit.strip().lower(), unit.strip())


def is_target_unit(unit: str | None) -> bool:
    """Check whether a unit is already grams or milliliters."""
    return bool(unit) and unit.lower() in TARGET_UNITS


def metric_conversion(unit: str | None) -> tuple[str, float] | None:
    """Get the built-in (target unit, factor) rule for a unit, if any."""
    if not unit:
        return None
    return METRIC_CONVERSIONS.get(unit.lower())


# =============================================================================
# Vocabulary
# =============================================================================


@dataclass(frozen=True)
class UnitVocabulary:
    """
    The set of unit tokens the parser recognizes.

    Passed explicitly to the parser and spacing normalizer so callers can
    extend the list (e.g. with units maintained in the settings UI).
    """

    units: tuple[str, ...] = DEFAULT_UNITS

    @cached_property
    def alternation(self) -> str:
        """Regex alternation of all units, longest first."""
        ordered = sorted({u for u in self.units if u}, key=len, reverse=True)
        return "|".join(re.escape(u) for u in ordered)

    @cached_property
    def amount_with_unit_pattern(self) -> re.Pattern[str]:
        """`<number> <unit> <name>` at the start of a line."""
        return re.compile(
            rf"^(\d+/\d+|\d+(?:[.,]\d+)?)\s*({self.alternation})\s+(.+)$",
            re.IGNORECASE | re.DOTALL,
        )

    @cached_property
    def spacing_pattern(self) -> re.Pattern[str]:
        """A number glued (or loosely spaced) to a unit that is not part of a word."""
        return re.compile(
            rf"(\d+(?:[.,]\d+)?)(\s*)({self.alternation})(?=\s|$|[^{_WORD_CHARS}])",
            re.IGNORECASE,
        )

    def __contains__(self, unit: object) -> bool:
        if not isinstance(unit, str):
            return False
        unit_lower = unit.lower()
        return any(u.lower() == unit_lower for u in self.units)

    def with_units(self, *extra: str) -> "UnitVocabulary":
        """Return a vocabulary extended by additional unit tokens."""
        known = {u.lower() for u in self.units}
        added = tuple(
            dict.fromkeys(u.strip() for u in extra if u and u.strip().lower() not in known)
        )
        if added:
            logger.debug(f"Extending unit vocabulary with {list(added)}")
        return UnitVocabulary(units=self.units + added)


DEFAULT_VOCABULARY = UnitVocabulary()
