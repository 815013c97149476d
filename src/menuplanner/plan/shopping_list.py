"""Shopping list generation from menus."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from menuplanner.config import get_settings
from menuplanner.logging_config import get_logger
from menuplanner.normalize.aggregate import combine_ingredients
from menuplanner.normalize.conversion import ConversionTable, convert_ingredient_units
from menuplanner.normalize.lines import Heading, normalize_lines
from menuplanner.normalize.parsing import is_water_ingredient, scale_ingredient
from menuplanner.normalize.units import DEFAULT_VOCABULARY, UnitVocabulary
from menuplanner.plan.recipe_links import decode_recipe_link
from menuplanner.schemas import ConversionEntry, Menu, MenuSection, MissingConversion, Recipe

logger = get_logger(__name__)


@dataclass
class ShoppingListResult:
    """Final shopping list lines plus conversions the table could not provide."""

    items: list[str] = field(default_factory=list)
    missing: list[MissingConversion] = field(default_factory=list)


@dataclass
class LinkedRecipeUsage:
    """How much of a linked recipe a menu consumes."""

    recipe: Recipe
    usage: float = 0.0  # sum of (parent multiplier x Teile) over all references
    referenced_by: list[str] = field(default_factory=list)


@dataclass
class _RecipeBlock:
    """Lines contributed by one visited recipe."""

    lines: list[str] = field(default_factory=list)
    first_linked: list[str] = field(default_factory=list)


@dataclass
class _MenuWalk:
    blocks: list[_RecipeBlock] = field(default_factory=list)
    linked: dict[str, LinkedRecipeUsage] = field(default_factory=dict)
    recipe_count: int = 0


def menu_sections(menu: Menu | Mapping[str, Any] | Iterable[Any] | None) -> list[MenuSection]:
    """
    Get the sections of a menu.

    Legacy menus without sections become a single section holding all of the
    menu's recipe IDs. A plain list of sections is validated and returned.
    """
    if menu is None:
        return []

    if isinstance(menu, Mapping):
        try:
            menu = Menu.model_validate(menu)
        except ValidationError as e:
            logger.warning(f"Invalid menu record, treating it as empty: {e}")
            return []

    if isinstance(menu, Menu):
        if menu.sections:
            return list(menu.sections)
        if menu.recipe_ids:
            return [MenuSection(name="", recipe_ids=list(menu.recipe_ids))]
        return []

    sections: list[MenuSection] = []
    for section in menu:
        if isinstance(section, MenuSection):
            sections.append(section)
            continue
        try:
            sections.append(MenuSection.model_validate(section))
        except ValidationError as e:
            logger.warning(f"Skipping invalid menu section {section!r}: {e}")
    return sections


def _index_recipes(recipes: Iterable[Recipe | Mapping[str, Any]] | None) -> dict[str, Recipe]:
    index: dict[str, Recipe] = {}
    for recipe in recipes or ():
        if not isinstance(recipe, Recipe):
            try:
                recipe = Recipe.model_validate(recipe)
            except ValidationError as e:
                logger.warning(f"Skipping invalid recipe record: {e}")
                continue
        index.setdefault(recipe.id, recipe)
    return index


class ShoppingListBuilder:
    """
    Builds a shopping list for a menu:
    - Portion scaling per recipe (target / native portions)
    - One-level expansion of linked recipes, scaled by their total usage
    - Water removal
    - Conversion to g/ml via the conversion table
    - Combination of duplicate lines
    """

    def __init__(
        self,
        vocabulary: UnitVocabulary = DEFAULT_VOCABULARY,
        default_portions: float | None = None,
    ):
        self.vocabulary = vocabulary
        self.default_portions = default_portions or get_settings().default_portions

    # -------------------------------------------------------------------------
    # Portions
    # -------------------------------------------------------------------------

    def native_portions(self, recipe: Recipe) -> float:
        """The recipe's declared yield, or the default when it declares none."""
        return recipe.portionen or self.default_portions

    def portion_target(self, recipe: Recipe, targets: Mapping[str, float] | None) -> float:
        """The selected portion count for a recipe, defaulting to its own yield."""
        if targets and targets.get(recipe.id) is not None:
            return targets[recipe.id]
        return self.native_portions(recipe)

    def portion_multiplier(self, recipe: Recipe, targets: Mapping[str, float] | None) -> float:
        return self.portion_target(recipe, targets) / self.native_portions(recipe)

    # -------------------------------------------------------------------------
    # Walking the menu
    # -------------------------------------------------------------------------

    def _walk(
        self,
        sections: list[MenuSection],
        recipes: dict[str, Recipe],
        portion_targets: Mapping[str, float] | None,
    ) -> _MenuWalk:
        walk = _MenuWalk()

        for section in sections:
            for recipe_id in section.recipe_ids:
                recipe = recipes.get(recipe_id)
                if recipe is None:
                    logger.debug(f"Recipe {recipe_id} in section '{section.name}' not loaded, skipping")
                    continue

                if self.portion_target(recipe, portion_targets) == 0:
                    logger.debug(f"Recipe {recipe.id} has 0 portions selected, skipping")
                    continue

                multiplier = self.portion_multiplier(recipe, portion_targets)
                walk.blocks.append(self._direct_lines(recipe, multiplier, recipes, walk.linked))
                walk.recipe_count += 1

        return walk

    def _direct_lines(
        self,
        recipe: Recipe,
        multiplier: float,
        recipes: dict[str, Recipe],
        linked: dict[str, LinkedRecipeUsage],
    ) -> _RecipeBlock:
        block = _RecipeBlock()

        for line in normalize_lines(recipe.ingredients):
            if isinstance(line, Heading):
                continue

            link = decode_recipe_link(line.text)
            if link is not None:
                target = recipes.get(link.recipe_id)
                if target is None:
                    logger.warning(
                        f"Recipe {recipe.id} links to unknown recipe {link.recipe_id} "
                        f"('{link.recipe_name}'), dropping the link"
                    )
                    continue

                usage = linked.get(target.id)
                if usage is None:
                    usage = linked[target.id] = LinkedRecipeUsage(recipe=target)
                    block.first_linked.append(target.id)
                usage.usage += multiplier * link.quantity
                if recipe.id not in usage.referenced_by:
                    usage.referenced_by.append(recipe.id)
                continue

            if is_water_ingredient(line.text, self.vocabulary):
                continue

            block.lines.append(scale_ingredient(line.text, multiplier))

        return block

    def _linked_lines(self, recipe: Recipe, multiplier: float) -> list[str]:
        lines: list[str] = []

        for line in normalize_lines(recipe.ingredients):
            if isinstance(line, Heading):
                continue
            if decode_recipe_link(line.text) is not None:
                # Linked recipes are expanded one level deep only
                logger.debug(f"Skipping nested recipe link in linked recipe {recipe.id}: {line.text}")
                continue
            if is_water_ingredient(line.text, self.vocabulary):
                continue
            lines.append(scale_ingredient(line.text, multiplier))

        return lines

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def linked_recipe_usage(
        self,
        menu: Menu | Iterable[MenuSection] | None,
        recipes: Iterable[Recipe | Mapping[str, Any]] | None,
        portion_targets: Mapping[str, float] | None = None,
    ) -> list[LinkedRecipeUsage]:
        """
        Distinct linked recipes of a menu with their default usage.

        Each linked recipe appears once, in order of first reference, however
        many recipes of the menu use it.
        """
        walk = self._walk(menu_sections(menu), _index_recipes(recipes), portion_targets)
        return list(walk.linked.values())

    def collect_lines(
        self,
        menu: Menu | Iterable[MenuSection] | None,
        recipes: Iterable[Recipe | Mapping[str, Any]] | None,
        portion_targets: Mapping[str, float] | None = None,
        linked_portion_targets: Mapping[str, float] | None = None,
    ) -> list[str]:
        """Scaled, water-free lines of all recipes before conversion and combining."""
        walk = self._walk(menu_sections(menu), _index_recipes(recipes), portion_targets)

        lines: list[str] = []
        for block in walk.blocks:
            lines.extend(block.lines)
            for linked_id in block.first_linked:
                usage = walk.linked[linked_id]
                target = usage.usage
                if linked_portion_targets and linked_portion_targets.get(linked_id) is not None:
                    target = linked_portion_targets[linked_id]
                if target == 0:
                    continue
                multiplier = target / self.native_portions(usage.recipe)
                lines.extend(self._linked_lines(usage.recipe, multiplier))

        logger.debug(
            f"Collected {len(lines)} lines from {walk.recipe_count} recipes "
            f"and {len(walk.linked)} linked recipes"
        )
        return lines

    def build(
        self,
        menu: Menu | Iterable[MenuSection] | None,
        recipes: Iterable[Recipe | Mapping[str, Any]] | None,
        portion_targets: Mapping[str, float] | None = None,
        linked_portion_targets: Mapping[str, float] | None = None,
        conversion_table: ConversionTable | Iterable[ConversionEntry | dict[str, Any]] | None = None,
    ) -> ShoppingListResult:
        """
        Build the shopping list for a menu.

        Args:
            menu: Menu (sections or legacy recipe IDs) or a list of sections.
            recipes: All loaded recipes, including the ones linked from others.
            portion_targets: Selected portions per recipe ID.
            linked_portion_targets: Selected yield per linked recipe ID.
            conversion_table: Conversion table entries.

        Returns:
            ShoppingListResult with the combined lines and missing conversions.
        """
        lines = self.collect_lines(menu, recipes, portion_targets, linked_portion_targets)
        conversion = convert_ingredient_units(lines, conversion_table, self.vocabulary)
        items = combine_ingredients(conversion.converted, self.vocabulary)

        logger.info(
            f"Built shopping list: {len(items)} items, "
            f"{len(conversion.missing)} missing conversions"
        )

        return ShoppingListResult(items=items, missing=conversion.missing)


def build_shopping_list(
    menu: Menu | Iterable[MenuSection] | None,
    recipes: Iterable[Recipe | Mapping[str, Any]] | None,
    portion_targets: Mapping[str, float] | None = None,
    linked_portion_targets: Mapping[str, float] | None = None,
    conversion_table: ConversionTable | Iterable[ConversionEntry | dict[str, Any]] | None = None,
) -> ShoppingListResult:
    """Build a shopping list with the default vocabulary and settings."""
    return ShoppingListBuilder().build(
        menu,
        recipes,
        portion_targets=portion_targets,
        linked_portion_targets=linked_portion_targets,
        conversion_table=conversion_table,
    )
