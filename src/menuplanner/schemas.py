"""Common data schemas for recipes, menus and the conversion table."""

import uuid
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IngredientItem(BaseModel):
    """Structured ingredient entry: an ingredient line or a section heading."""

    type: Literal["ingredient", "heading"] = "ingredient"
    text: str


class Recipe(BaseModel):
    """Recipe as loaded by the recipe store."""

    id: str
    title: str = ""
    portionen: float | None = Field(None, ge=0, description="Native yield (portions or Teile)")
    ingredients: list[str | IngredientItem] = Field(default_factory=list)


class MenuSection(BaseModel):
    """Named group of recipes inside a menu."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    recipe_ids: list[str] = Field(default_factory=list, alias="recipeIds")


class Menu(BaseModel):
    """Menu with sections, or a legacy flat list of recipe IDs."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    name: str = ""
    sections: list[MenuSection] | None = None
    recipe_ids: list[str] = Field(default_factory=list, alias="recipeIds")


class ConversionEntry(BaseModel):
    """One row of the user-maintained conversion table."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    ingredient: str
    unit: str
    grams: str = ""
    milliliters: str = ""

    @field_validator("grams", "milliliters", mode="before")
    @classmethod
    def _coerce_factor(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def matches(self, ingredient: str, unit: str) -> bool:
        """Case-insensitive match on ingredient name and unit."""
        return (
            bool(self.ingredient)
            and bool(self.unit)
            and self.ingredient.strip().lower() == ingredient.strip().lower()
            and self.unit.strip().lower() == unit.strip().lower()
        )

    def target(self) -> tuple[str, float] | None:
        """
        Get the (target unit, factor) this entry converts to.

        Grams take precedence when both fields are populated. Returns None when
        neither field holds a positive number.
        """
        grams = _positive_float(self.grams)
        if grams is not None:
            return "g", grams
        milliliters = _positive_float(self.milliliters)
        if milliliters is not None:
            return "ml", milliliters
        return None


class MissingConversion(BaseModel):
    """An (ingredient, unit) pair the conversion table cannot resolve."""

    model_config = ConfigDict(frozen=True)

    unit: str
    ingredient: str

    @property
    def key(self) -> str:
        return f"{self.unit.lower()}|{self.ingredient.lower()}"


def _positive_float(raw: str) -> float | None:
    if not raw or not raw.strip():
        return None
    try:
        value = float(raw.strip().replace(",", "."))
    except ValueError:
        return None
    return value if value > 0 else None
