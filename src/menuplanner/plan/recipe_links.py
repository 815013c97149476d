"""Links from one recipe's ingredient list to another recipe."""

import re
from dataclasses import dataclass
from typing import Any

from menuplanner.normalize.parsing import parse_ingredient

# "<prefix> #recipe:<id>:<display name>"
RECIPE_LINK_PATTERN = re.compile(r"^(.*?)\s*#recipe:([^:\s]+):(.*)$", re.DOTALL)

DEFAULT_QUANTITY_PREFIX = "1 Teil"


@dataclass(frozen=True)
class RecipeLink:
    """A decoded reference to another recipe used as an ingredient."""

    recipe_id: str
    recipe_name: str
    quantity_prefix: str | None = None

    @property
    def quantity(self) -> float:
        """
        Share of the linked recipe's yield one reference consumes.

        "0,5 Teil" -> 0.5; a missing or number-less prefix counts as one Teil.
        """
        parsed = parse_ingredient(self.quantity_prefix or DEFAULT_QUANTITY_PREFIX)
        if parsed.amount is None:
            return 1.0
        return parsed.amount

    def encode(self) -> str:
        return encode_recipe_link(self.recipe_id, self.recipe_name, self.quantity_prefix)


def encode_recipe_link(recipe_id: str, recipe_name: str, quantity_prefix: str | None = None) -> str:
    """Build the ingredient text that links to a recipe."""
    token = f"#recipe:{recipe_id}:{recipe_name}"
    if quantity_prefix and quantity_prefix.strip():
        return f"{quantity_prefix.strip()} {token}"
    return token


def decode_recipe_link(text: Any) -> RecipeLink | None:
    """
    Decode a recipe link from ingredient text.

    Examples:
        "1 Teil #recipe:pizzateig:Pizzateig" -> RecipeLink("pizzateig", "Pizzateig", "1 Teil")
        "#recipe:abc:Soße" -> RecipeLink("abc", "Soße", None)
        "200 g Mehl" -> None
    """
    if not text or not isinstance(text, str):
        return None

    match = RECIPE_LINK_PATTERN.match(text.strip())
    if not match:
        return None

    prefix = match.group(1).strip() or None
    return RecipeLink(
        recipe_id=match.group(2),
        recipe_name=match.group(3).strip(),
        quantity_prefix=prefix,
    )


def is_recipe_link(text: Any) -> bool:
    return decode_recipe_link(text) is not None
