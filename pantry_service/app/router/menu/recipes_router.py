from uuid import UUID
from fastapi import APIRouter, Depends

from shared.core.auth import validate_current_token
from shared.core.errors import NotFoundError
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...core.dependencies import get_current_restaurant_id, get_store
from ...schemas.menu.recipes_schemas import (
    CostBreakdown,
    DeductionRequest,
    DeductionResponse,
    MessageOut,
    RecipeIngredientIn,
    RecipeIngredientUpdate,
    RecipeLineOut,
    RecipeOut,
    RecipeSaveOut,
    RecipeSaveRequest,
    RecipeValidationOut,
)
from ...services.kitchen_store import KitchenStore
from ...services.menu_item_service import get_owned_menu_item
from ...services.recipe_service import RecipeService

router = APIRouter(prefix="/api/recipes", tags=["Recipes"], dependencies=[Depends(validate_current_token)])


def get_recipe_service(store: KitchenStore = Depends(get_store)) -> RecipeService:
    return RecipeService(store)


def _check_line_owner(store: KitchenStore, recipe_ingredient_id: UUID, restaurant_id: UUID) -> RecipeLineOut:
    line = store.get_recipe_line(recipe_ingredient_id)
    if not line:
        raise NotFoundError("Recipe ingredient not found")
    get_owned_menu_item(store, line.menu_item_id, restaurant_id)
    return line


@router.get("/{menu_item_id}", response_model=RecipeOut)
def get_recipe(
    menu_item_id: UUID,
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    store: KitchenStore = Depends(get_store),
    service: RecipeService = Depends(get_recipe_service)
):
    get_owned_menu_item(store, menu_item_id, restaurant_id)
    return service.get_recipe(menu_item_id)


@router.post("/{menu_item_id}", response_model=RecipeSaveOut, status_code=201)
def save_recipe(
    menu_item_id: UUID,
    request: RecipeSaveRequest,
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    store: KitchenStore = Depends(get_store),
    service: RecipeService = Depends(get_recipe_service)
):
    """Replace the whole recipe of a menu item."""
    get_owned_menu_item(store, menu_item_id, restaurant_id)
    lines = service.save_recipe(menu_item_id, request.ingredients)
    return RecipeSaveOut(message="Recipe saved successfully", ingredients=lines)


@router.post("/{menu_item_id}/ingredients", status_code=201)
def add_ingredient(
    menu_item_id: UUID,
    ingredient: RecipeIngredientIn,
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    store: KitchenStore = Depends(get_store),
    service: RecipeService = Depends(get_recipe_service)
):
    get_owned_menu_item(store, menu_item_id, restaurant_id)
    line = service.add_ingredient(menu_item_id, ingredient)
    return success_response(
        data=line,
        message="Ingredient added successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/ingredients/{recipe_ingredient_id}")
def update_ingredient(
    recipe_ingredient_id: UUID,
    updates: RecipeIngredientUpdate,
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    store: KitchenStore = Depends(get_store),
    service: RecipeService = Depends(get_recipe_service)
):
    _check_line_owner(store, recipe_ingredient_id, restaurant_id)
    line = service.update_ingredient(recipe_ingredient_id, updates.model_dump(exclude_unset=True))
    return success_response(
        data=line,
        message="Ingredient updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/ingredients/{recipe_ingredient_id}", response_model=MessageOut)
def remove_ingredient(
    recipe_ingredient_id: UUID,
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    store: KitchenStore = Depends(get_store),
    service: RecipeService = Depends(get_recipe_service)
):
    _check_line_owner(store, recipe_ingredient_id, restaurant_id)
    service.remove_ingredient(recipe_ingredient_id)
    return MessageOut(message="Ingredient removed from recipe")


@router.get("/{menu_item_id}/cost", response_model=CostBreakdown)
def get_recipe_cost(
    menu_item_id: UUID,
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    store: KitchenStore = Depends(get_store),
    service: RecipeService = Depends(get_recipe_service)
):
    get_owned_menu_item(store, menu_item_id, restaurant_id)
    return service.compute_recipe_cost(menu_item_id, restaurant_id)


@router.get("/{menu_item_id}/validate", response_model=RecipeValidationOut)
def validate_recipe(
    menu_item_id: UUID,
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    store: KitchenStore = Depends(get_store),
    service: RecipeService = Depends(get_recipe_service)
):
    get_owned_menu_item(store, menu_item_id, restaurant_id)
    return service.validate_recipe(menu_item_id, restaurant_id)


@router.post("/{menu_item_id}/calculate-deductions", response_model=DeductionResponse)
def calculate_deductions(
    menu_item_id: UUID,
    request: DeductionRequest,
    restaurant_id: UUID = Depends(get_current_restaurant_id),
    store: KitchenStore = Depends(get_store),
    service: RecipeService = Depends(get_recipe_service)
):
    """Inventory that would be consumed by selling ``quantity`` portions."""
    get_owned_menu_item(store, menu_item_id, restaurant_id)
    return service.calculate_ingredient_deductions(menu_item_id, request.quantity)
