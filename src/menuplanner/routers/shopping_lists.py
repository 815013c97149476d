"""API routes for shopping list generation."""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends
from pydantic import BaseModel, Field

from menuplanner.normalize.conversion import ConversionTable
from menuplanner.plan.service import ShoppingListService
from menuplanner.schemas import ConversionEntry, Menu, MissingConversion, Recipe
from menuplanner.store.conversion_table import ConversionTableStore, get_conversion_store

router = APIRouter(prefix="/api/v1/shopping-lists", tags=["shopping-lists"])


# =============================================================================
# Request/Response Schemas
# =============================================================================


class ShoppingListRequest(BaseModel):
    """Menu, its recipes and the selected portions."""

    menu: Menu
    recipes: list[Recipe] = Field(default_factory=list)
    portion_targets: dict[str, float] = Field(
        default_factory=dict, description="Selected portions per recipe ID"
    )
    linked_portion_targets: dict[str, float] = Field(
        default_factory=dict, description="Selected yield per linked recipe ID"
    )
    conversion_table: list[ConversionEntry] | None = Field(
        None, description="Conversion table to use instead of the stored one"
    )


class ShoppingListResponse(BaseModel):
    """Shopping list lines and the conversions that were missing."""

    items: list[str]
    missing: list[MissingConversion] = Field(default_factory=list)


class LinkedRecipesRequest(BaseModel):
    menu: Menu
    recipes: list[Recipe] = Field(default_factory=list)
    portion_targets: dict[str, float] = Field(default_factory=dict)


class LinkedRecipeResponse(BaseModel):
    """A linked recipe with its default yield for the portion dialog."""

    recipe_id: str
    title: str
    portionen: float
    usage: float
    referenced_by: list[str]


def get_shopping_list_service(
    store: Annotated[ConversionTableStore, Depends(get_conversion_store)],
) -> ShoppingListService:
    """Each request is its own shopping list session."""
    return ShoppingListService(store)


# =============================================================================
# Routes
# =============================================================================


@router.post("", response_model=ShoppingListResponse)
async def create_shopping_list(
    request: ShoppingListRequest,
    background_tasks: BackgroundTasks,
    service: Annotated[ShoppingListService, Depends(get_shopping_list_service)],
) -> ShoppingListResponse:
    """Build the shopping list for a menu."""
    table = (
        ConversionTable.from_entries(request.conversion_table)
        if request.conversion_table is not None
        else None
    )

    result = await service.generate(
        request.menu,
        request.recipes,
        portion_targets=request.portion_targets,
        linked_portion_targets=request.linked_portion_targets,
        conversion_table=table,
    )

    # Let missing conversion recording finish after the response is sent
    background_tasks.add_task(service.reporter.drain)

    return ShoppingListResponse(items=result.items, missing=result.missing)


@router.post("/linked-recipes", response_model=list[LinkedRecipeResponse])
async def list_linked_recipes(
    request: LinkedRecipesRequest,
    service: Annotated[ShoppingListService, Depends(get_shopping_list_service)],
) -> list[LinkedRecipeResponse]:
    """Distinct linked recipes of a menu with their default yield."""
    usages = service.linked_recipes(request.menu, request.recipes, request.portion_targets)
    return [
        LinkedRecipeResponse(
            recipe_id=usage.recipe.id,
            title=usage.recipe.title,
            portionen=service.builder.native_portions(usage.recipe),
            usage=usage.usage,
            referenced_by=usage.referenced_by,
        )
        for usage in usages
    ]
