import logging
from typing import Any, Dict, List, Optional, Set
from uuid import UUID

from shared.core.errors import ConflictError, NotFoundError, ValidationError
from shared.utils.units import to_float
from ..schemas.menu.recipes_schemas import (
    CostBreakdown,
    DeductionResponse,
    RecipeIngredientIn,
    RecipeLineOut,
    RecipeOut,
    RecipeValidationOut,
)
from .kitchen_store import KitchenStore
from .recipe_costing import build_cost_lookups, calculate_deductions, compute_recipe_cost

logger = logging.getLogger(__name__)


def validate_recipe_line(line: RecipeIngredientIn) -> None:
    if not line.ingredient_id:
        raise ValidationError("Each ingredient must have an ingredient_id")
    if line.quantity is None or line.quantity <= 0:
        raise ValidationError("Each ingredient must have a quantity greater than 0")
    if not line.unit or not line.unit.strip():
        raise ValidationError("Each ingredient must have a unit")
    validate_prep_loss(line.prep_loss_factor)


def validate_prep_loss(prep_loss_factor: Optional[float]) -> None:
    if prep_loss_factor is not None and not 0 <= prep_loss_factor <= 100:
        raise ValidationError("Prep loss factor must be between 0 and 100")


class RecipeService:
    """Recipe maintenance and costing for a single menu item."""

    def __init__(self, store: KitchenStore):
        self.store = store

    def get_recipe(self, menu_item_id: UUID) -> RecipeOut:
        lines = self.store.get_recipe_lines(menu_item_id)
        return RecipeOut(menu_item_id=menu_item_id, ingredients=lines, ingredient_count=len(lines))

    def save_recipe(self, menu_item_id: UUID, ingredients: List[RecipeIngredientIn]) -> List[RecipeLineOut]:
        if not ingredients:
            raise ValidationError("Ingredients array is required")

        seen: Set[UUID] = set()
        for line in ingredients:
            validate_recipe_line(line)
            if line.ingredient_id in seen:
                raise ConflictError("Duplicate ingredient in recipe")
            seen.add(line.ingredient_id)

        saved = self.store.replace_recipe(menu_item_id, ingredients)
        logger.info("Saved recipe for menu item %s with %d ingredients", menu_item_id, len(saved))
        return saved

    def add_ingredient(self, menu_item_id: UUID, ingredient: RecipeIngredientIn) -> RecipeLineOut:
        validate_recipe_line(ingredient)
        if self.store.find_recipe_line(menu_item_id, ingredient.ingredient_id):
            raise ConflictError("Ingredient already exists in this recipe")
        return self.store.add_recipe_line(menu_item_id, ingredient)

    def update_ingredient(self, recipe_ingredient_id: UUID, updates: Dict[str, Any]) -> RecipeLineOut:
        updates = {k: v for k, v in updates.items() if v is not None}

        if "quantity" in updates and updates["quantity"] <= 0:
            raise ValidationError("Quantity must be greater than 0")
        if "unit" in updates and not str(updates["unit"]).strip():
            raise ValidationError("Unit cannot be empty")
        validate_prep_loss(updates.get("prep_loss_factor"))

        updated = self.store.update_recipe_line(recipe_ingredient_id, updates)
        if not updated:
            raise NotFoundError("Recipe ingredient not found")
        return updated

    def remove_ingredient(self, recipe_ingredient_id: UUID) -> None:
        if not self.store.delete_recipe_line(recipe_ingredient_id):
            raise NotFoundError("Recipe ingredient not found")

    def compute_recipe_cost(self, menu_item_id: UUID, restaurant_id: UUID) -> CostBreakdown:
        menu_item = self.store.get_menu_item(menu_item_id)
        if not menu_item or menu_item.restaurant_id != restaurant_id:
            raise NotFoundError("Menu item not found")

        lines = self.store.get_recipe_lines(menu_item_id)
        cost_lookup, stock_lookup = build_cost_lookups(
            self.store.get_inventory_records(restaurant_id, [line.ingredient_id for line in lines]))
        return compute_recipe_cost(lines, cost_lookup, stock_lookup, menu_price=to_float(menu_item.price))

    def validate_recipe(self, menu_item_id: UUID, restaurant_id: UUID) -> RecipeValidationOut:
        lines = self.store.get_recipe_lines(menu_item_id)
        if not lines:
            return RecipeValidationOut(
                is_valid=False,
                has_recipe=False,
                all_in_stock=False,
                errors=["No recipe defined"],
                warnings=[],
            )

        records = self.store.get_inventory_records(restaurant_id, [line.ingredient_id for line in lines])
        _, stock_lookup = build_cost_lookups(records)

        errors: List[str] = []
        warnings: List[str] = []
        all_in_stock = True
        for line in lines:
            if line.ingredient_id not in stock_lookup:
                errors.append(f"{line.ingredient_name} does not exist in inventory")
                all_in_stock = False
            elif stock_lookup[line.ingredient_id] <= 0:
                warnings.append(f"{line.ingredient_name} is out of stock")
                all_in_stock = False

        return RecipeValidationOut(
            is_valid=not errors,
            has_recipe=True,
            all_in_stock=all_in_stock,
            errors=errors,
            warnings=warnings,
        )

    def calculate_ingredient_deductions(self, menu_item_id: UUID, quantity_sold: Optional[float]) -> DeductionResponse:
        if quantity_sold is None or quantity_sold <= 0:
            raise ValidationError("Valid quantity is required")

        lines = self.store.get_recipe_lines(menu_item_id)
        if not lines:
            raise NotFoundError("No recipe found for this menu item")

        return DeductionResponse(
            menu_item_id=menu_item_id,
            quantity_sold=quantity_sold,
            deductions=calculate_deductions(lines, quantity_sold),
        )
