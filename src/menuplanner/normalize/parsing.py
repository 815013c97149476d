"""Free-text ingredient parsing, spacing normalization and quantity scaling."""

import math
import re
from dataclasses import dataclass
from typing import Any

from menuplanner.normalize.units import DEFAULT_VOCABULARY, UnitVocabulary

# Number followed by a name, no recognized unit: "3 Eier"
_AMOUNT_ONLY = re.compile(r"^(\d+/\d+|\d+(?:[.,]\d+)?)\s+(.+)$", re.DOTALL)

# First numeric token at the start of the text or after whitespace
_SCALABLE_NUMBER = re.compile(r"(^|\s)(\d+/\d+|\d+(?:[.,]\d+)?)")

WATER_NAME = "wasser"


@dataclass(frozen=True)
class ParsedIngredient:
    """An ingredient line split into amount, unit and name."""

    amount: float | None
    unit: str | None
    name: str
    original: Any = None

    def render(self) -> str:
        """Recombine the parts, rendering the amount with one decimal at most."""
        if self.amount is None:
            return self.name
        if self.unit:
            return f"{format_amount(self.amount)} {self.unit} {self.name}"
        return f"{format_amount(self.amount)} {self.name}"


# =============================================================================
# Numbers
# =============================================================================


def parse_amount(raw: str | None) -> float | None:
    """
    Parse an amount token into a float.

    Handles formats like:
    - "2"
    - "1.5" and "1,5"
    - "1/2"

    Returns None for anything else, including a zero denominator and numbers
    too large for a float.
    """
    if not raw:
        return None

    raw = raw.strip()
    if "/" in raw:
        numerator, _, denominator = raw.partition("/")
        try:
            denom = float(denominator)
            if denom == 0:
                return None
            value = float(numerator) / denom
        except ValueError:
            return None
    else:
        try:
            value = float(raw.replace(",", "."))
        except ValueError:
            return None

    return value if math.isfinite(value) else None


def format_amount(value: float) -> str:
    """
    Render an amount: integers without decimals, others with one decimal place.

    Examples:
        400.0 -> "400"
        7.5 -> "7.5"
        0.96 -> "1.0"
        0.333 -> "0.3"
    """
    if not math.isfinite(value):
        return str(value)
    if value == int(value):
        return str(int(value))
    return f"{value:.1f}"


# =============================================================================
# Parsing
# =============================================================================


def parse_ingredient(
    text: Any,
    vocabulary: UnitVocabulary = DEFAULT_VOCABULARY,
) -> ParsedIngredient:
    """
    Split an ingredient line into its amount, unit and name.

    Examples:
        "200 g Mehl" -> (200.0, "g", "Mehl")
        "2EL Öl" -> (2.0, "EL", "Öl")
        "3 Eier" -> (3.0, None, "Eier")
        "Salz nach Geschmack" -> (None, None, "Salz nach Geschmack")
    """
    if not text or not isinstance(text, str):
        return ParsedIngredient(amount=None, unit=None, name=text or "", original=text)

    stripped = text.strip()

    match = vocabulary.amount_with_unit_pattern.match(stripped)
    if match:
        amount = parse_amount(match.group(1))
        if amount is not None:
            return ParsedIngredient(
                amount=amount,
                unit=match.group(2),
                name=match.group(3).strip(),
                original=text,
            )

    match = _AMOUNT_ONLY.match(stripped)
    if match:
        amount = parse_amount(match.group(1))
        if amount is not None:
            return ParsedIngredient(
                amount=amount,
                unit=None,
                name=match.group(2).strip(),
                original=text,
            )

    return ParsedIngredient(amount=None, unit=None, name=stripped, original=text)


def is_water_ingredient(text: Any, vocabulary: UnitVocabulary = DEFAULT_VOCABULARY) -> bool:
    """Check whether a line is plain water, which never goes on a shopping list."""
    parsed = parse_ingredient(text, vocabulary)
    return isinstance(parsed.name, str) and parsed.name.strip().lower() == WATER_NAME


# =============================================================================
# Spacing
# =============================================================================


def format_ingredient_spacing(text: Any, vocabulary: UnitVocabulary = DEFAULT_VOCABULARY) -> Any:
    """
    Put exactly one space between a number and the unit following it.

    Examples:
        "200g Mehl" -> "200 g Mehl"
        "1,5kg" -> "1,5 kg"
        "100 Gramm" -> "100 Gramm" (not a unit)
    """
    if not text or not isinstance(text, str):
        return text

    return vocabulary.spacing_pattern.sub(lambda m: f"{m.group(1)} {m.group(3)}", text)


def format_ingredients(lines: Any, vocabulary: UnitVocabulary = DEFAULT_VOCABULARY) -> Any:
    """Apply spacing normalization to every line of a list."""
    if not isinstance(lines, list):
        return lines
    return [format_ingredient_spacing(line, vocabulary) for line in lines]


# =============================================================================
# Scaling
# =============================================================================


def scale_ingredient(text: Any, multiplier: float) -> Any:
    """
    Multiply the first number of an ingredient line.

    Examples:
        ("200 g Mehl", 2) -> "400 g Mehl"
        ("1/2 TL Salz", 2) -> "1 TL Salz"
        ("Salz nach Geschmack", 2) -> "Salz nach Geschmack"
    """
    if not text or not isinstance(text, str) or multiplier == 1:
        return text

    match = _SCALABLE_NUMBER.search(text)
    if not match:
        return text

    value = parse_amount(match.group(2))
    if value is None:
        return text

    scaled_value = value * multiplier
    if not math.isfinite(scaled_value):
        return text

    scaled = format_amount(scaled_value)
    return f"{text[: match.start(2)]}{scaled}{text[match.end(2):]}"
