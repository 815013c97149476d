"""Service layer tying the shopping list builder to the conversion table store."""

import asyncio
import uuid
from collections.abc import Iterable, Mapping
from typing import Any

from menuplanner.logging_config import LoggingContext, get_logger
from menuplanner.normalize.conversion import ConversionTable
from menuplanner.plan.missing_conversions import MissingConversionReporter
from menuplanner.plan.shopping_list import (
    LinkedRecipeUsage,
    ShoppingListBuilder,
    ShoppingListResult,
)
from menuplanner.schemas import Menu, MenuSection, Recipe
from menuplanner.store.conversion_table import ConversionTableStore

logger = get_logger(__name__)


class ShoppingListService:
    """
    Builds shopping lists and records their missing conversions.

    One service instance corresponds to one shopping-list session (e.g. one
    opening of the portion dialog). Call `new_session()` to report missing
    conversions again.
    """

    def __init__(
        self,
        store: ConversionTableStore,
        builder: ShoppingListBuilder | None = None,
        reporter: MissingConversionReporter | None = None,
    ):
        self.store = store
        self.builder = builder or ShoppingListBuilder()
        self.reporter = reporter or MissingConversionReporter(store.append_missing)
        self.session_id = uuid.uuid4().hex

    def new_session(self) -> str:
        """Reset the one-shot reporting flag and start a new session."""
        self.reporter.reset()
        self.session_id = uuid.uuid4().hex
        logger.debug(f"Started shopping list session {self.session_id}")
        return self.session_id

    async def generate(
        self,
        menu: Menu | Iterable[MenuSection] | None,
        recipes: Iterable[Recipe | Mapping[str, Any]] | None,
        portion_targets: Mapping[str, float] | None = None,
        linked_portion_targets: Mapping[str, float] | None = None,
        conversion_table: ConversionTable | None = None,
    ) -> ShoppingListResult:
        """
        Build the shopping list and schedule recording of missing conversions.

        The stored conversion table is used unless one is passed in. Recording
        runs in the background and does not delay the result.
        """
        menu_id = menu.id if isinstance(menu, Menu) else None
        with LoggingContext(menu_id=menu_id, session_id=self.session_id):
            table = conversion_table
            if table is None:
                table = await asyncio.to_thread(self.store.load)
            result = self.builder.build(
                menu,
                recipes,
                portion_targets=portion_targets,
                linked_portion_targets=linked_portion_targets,
                conversion_table=table,
            )
            self.reporter.report(result.missing)
        return result

    def linked_recipes(
        self,
        menu: Menu | Iterable[MenuSection] | None,
        recipes: Iterable[Recipe | Mapping[str, Any]] | None,
        portion_targets: Mapping[str, float] | None = None,
    ) -> list[LinkedRecipeUsage]:
        return self.builder.linked_recipe_usage(menu, recipes, portion_targets)
