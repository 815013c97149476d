"""Recipe ingredient lines as a tagged variant: headings or ingredients."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Heading:
    """Section label inside an ingredient list, never part of quantity math."""

    text: str


@dataclass(frozen=True)
class Ingredient:
    """A single free-text ingredient line."""

    text: str


IngredientLine = Heading | Ingredient


def normalize_line(raw: Any) -> IngredientLine | None:
    """
    Convert one stored ingredient entry to a Heading or Ingredient.

    Entries are either plain strings or records with "type" and "text". Records
    may be dicts or objects exposing those attributes. Entries without text are
    dropped (None).
    """
    if isinstance(raw, str):
        return Ingredient(raw) if raw.strip() else None

    if isinstance(raw, dict):
        kind, text = raw.get("type"), raw.get("text")
    else:
        kind, text = getattr(raw, "type", None), getattr(raw, "text", None)

    if not isinstance(text, str) or not text.strip():
        return None
    if kind == "heading":
        return Heading(text)
    return Ingredient(text)


def normalize_lines(raw_lines: Iterable[Any] | None) -> list[IngredientLine]:
    """Normalize a recipe's stored ingredient list, skipping empty entries."""
    if not raw_lines:
        return []
    lines = []
    for raw in raw_lines:
        line = normalize_line(raw)
        if line is not None:
            lines.append(line)
    return lines
