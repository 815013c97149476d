"""Parse, scale, convert and combine free-text ingredient lines."""

from menuplanner.normalize.aggregate import combine_ingredients
from menuplanner.normalize.conversion import (
    ConversionResult,
    ConversionTable,
    convert_ingredient_units,
)
from menuplanner.normalize.lines import Heading, Ingredient, IngredientLine, normalize_lines
from menuplanner.normalize.parsing import (
    ParsedIngredient,
    format_ingredient_spacing,
    format_ingredients,
    is_water_ingredient,
    parse_amount,
    parse_ingredient,
    scale_ingredient,
)
from menuplanner.normalize.units import DEFAULT_VOCABULARY, UnitVocabulary, canonical_unit

__all__ = [
    "DEFAULT_VOCABULARY",
    "ConversionResult",
    "ConversionTable",
    "Heading",
    "Ingredient",
    "IngredientLine",
    "ParsedIngredient",
    "UnitVocabulary",
    "canonical_unit",
    "combine_ingredients",
    "convert_ingredient_units",
    "format_ingredient_spacing",
    "format_ingredients",
    "is_water_ingredient",
    "normalize_lines",
    "parse_amount",
    "parse_ingredient",
    "scale_ingredient",
]
