"""Combining duplicate ingredient lines into one summed line."""

from dataclasses import dataclass
from typing import Any

from menuplanner.normalize.parsing import parse_ingredient
from menuplanner.normalize.units import DEFAULT_VOCABULARY, UnitVocabulary


@dataclass
class CombinedIngredient:
    """Running total for one (name, unit) group."""

    amount: float | None
    unit: str | None
    name: str

    def display(self) -> str:
        if self.amount is None:
            return self.name
        if self.unit:
            return f"{format_total(self.amount)} {self.unit} {self.name}"
        return f"{format_total(self.amount)} {self.name}"


def format_total(value: float) -> str:
    """Up to three decimals, insignificant zeros trimmed: 150.50 -> "150.5"."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def combine_key(name: str, unit: str | None) -> str:
    return f"{name.lower()}|{(unit or '').lower()}"


def combine_ingredients(lines: Any, vocabulary: UnitVocabulary = DEFAULT_VOCABULARY) -> Any:
    """
    Merge lines naming the same ingredient in the same unit.

    Amounts of matching lines are summed; lines without an amount are kept
    once. Groups keep the order in which they first appear.

    Example: ["100 g Zucker", "50 g zucker"] -> ["150 g Zucker"]
    """
    if not isinstance(lines, list):
        return lines

    combined: dict[str, CombinedIngredient] = {}

    for line in lines:
        if not line or not isinstance(line, str):
            continue

        parsed = parse_ingredient(line, vocabulary)
        key = combine_key(parsed.name, parsed.unit)

        existing = combined.get(key)
        if existing is None:
            combined[key] = CombinedIngredient(
                amount=parsed.amount,
                unit=parsed.unit,
                name=parsed.name,
            )
        elif existing.amount is not None and parsed.amount is not None:
            existing.amount += parsed.amount

    return [item.display() for item in combined.values()]
