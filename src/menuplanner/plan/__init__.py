"""Shopping list building for menus."""

from menuplanner.plan.missing_conversions import MissingConversionReporter
from menuplanner.plan.recipe_links import RecipeLink, decode_recipe_link, encode_recipe_link
from menuplanner.plan.service import ShoppingListService
from menuplanner.plan.shopping_list import (
    LinkedRecipeUsage,
    ShoppingListBuilder,
    ShoppingListResult,
    build_shopping_list,
    menu_sections,
)

__all__ = [
    "LinkedRecipeUsage",
    "MissingConversionReporter",
    "RecipeLink",
    "ShoppingListBuilder",
    "ShoppingListResult",
    "ShoppingListService",
    "build_shopping_list",
    "decode_recipe_link",
    "encode_recipe_link",
    "menu_sections",
]
