"""
Recipe cost engine.

Pure functions over recipe lines and inventory lookups; nothing here talks to
the database. Money is accumulated in full precision and only rounded when
the breakdown is built.
"""
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
from uuid import UUID

from shared.utils.units import (
    adjust_for_prep_loss,
    convert_to_pounds,
    round_money,
    round_quantity,
    to_float,
)
from ..schemas.menu.recipes_schemas import (
    CostBreakdown,
    DeductionOut,
    IngredientCostOut,
    MenuItemWithRecipe,
    RecipeLineOut,
)
from ..schemas.overview.metrics_schemas import MenuItemsMetrics

NO_RECIPE_WARNING = "No recipe defined for this menu item"


def ingredient_warning(name: str, has_record: bool, current_stock: float, cost_per_unit: float) -> Optional[str]:
    # first matching rule wins
    if not has_record:
        return f"{name} not found in inventory"
    if current_stock == 0:
        return f"{name} is out of stock"
    if cost_per_unit == 0:
        return f"{name} has no cost defined - cost calculation may be inaccurate"
    return None


def food_cost_percent(total_cost: float, menu_price: Optional[float]) -> float:
    menu_price = to_float(menu_price)
    if menu_price <= 0:
        return 0.0
    return total_cost / menu_price * 100


def compute_recipe_cost(
    ingredients: Sequence[RecipeLineOut],
    cost_lookup: Mapping[UUID, float],
    stock_lookup: Mapping[UUID, float],
    menu_price: Optional[float] = None,
) -> CostBreakdown:
    """
    Theoretical food cost of one recipe.

    An ingredient missing from ``cost_lookup`` has no inventory record: it is
    costed at 0 and reported as a warning. Quantities stay in the recipe's
    own unit; the inventory cost is assumed to be expressed in that unit.
    """
    if not ingredients:
        return CostBreakdown(
            total_cost=0,
            ingredients=[],
            warnings=[NO_RECIPE_WARNING],
            menu_price=menu_price,
            food_cost_percent=0,
            gross_profit=round_money(menu_price) if menu_price is not None else None,
        )

    warnings: List[str] = []
    breakdown: List[IngredientCostOut] = []
    total_cost = 0.0

    for line in ingredients:
        has_record = line.ingredient_id in cost_lookup
        cost_per_unit = to_float(cost_lookup.get(line.ingredient_id))
        current_stock = to_float(stock_lookup.get(line.ingredient_id))
        quantity = to_float(line.quantity)
        prep_loss_factor = to_float(line.prep_loss_factor)

        adjusted_quantity = adjust_for_prep_loss(quantity, prep_loss_factor)
        ingredient_cost = adjusted_quantity * cost_per_unit
        total_cost += ingredient_cost

        warning = ingredient_warning(line.ingredient_name, has_record, current_stock, cost_per_unit)
        if warning:
            warnings.append(warning)

        breakdown.append(IngredientCostOut(
            ingredient_id=line.ingredient_id,
            ingredient_name=line.ingredient_name,
            quantity=quantity,
            unit=line.unit,
            prep_loss_factor=prep_loss_factor,
            adjusted_quantity=round_quantity(adjusted_quantity),
            cost_per_unit=cost_per_unit,
            ingredient_cost=round_money(ingredient_cost),
            in_stock=current_stock > 0,
            current_stock=current_stock,
        ))

    gross_profit = None
    if menu_price is not None:
        gross_profit = round_money(to_float(menu_price) - total_cost)

    return CostBreakdown(
        total_cost=round_money(total_cost),
        ingredients=breakdown,
        warnings=warnings,
        menu_price=menu_price,
        food_cost_percent=round_money(food_cost_percent(total_cost, menu_price)),
        gross_profit=gross_profit,
    )


def calculate_deductions(ingredients: Iterable[RecipeLineOut], quantity_sold: float) -> List[DeductionOut]:
    """Inventory to deduct when ``quantity_sold`` portions are sold."""
    return [
        DeductionOut(
            ingredient_id=line.ingredient_id,
            quantity=round_quantity(
                adjust_for_prep_loss(line.quantity, line.prep_loss_factor) * quantity_sold),
            unit=line.unit,
        )
        for line in ingredients
    ]


def aggregate_recipe_cost(recipe: Iterable[RecipeLineOut], cost_lookup: Mapping[UUID, float]) -> float:
    """Recipe cost for cross-menu metrics: ounces are normalized to pounds first."""
    cost = 0.0
    for line in recipe:
        quantity_in_pounds = convert_to_pounds(line.quantity, line.unit)
        adjusted_quantity = adjust_for_prep_loss(quantity_in_pounds, line.prep_loss_factor)
        cost += adjusted_quantity * to_float(cost_lookup.get(line.ingredient_id))
    return cost


def summarize_menu_costs(
    menu_items: Sequence[MenuItemWithRecipe],
    cost_lookup: Mapping[UUID, float],
    total_menu_items: Optional[int] = None,
) -> MenuItemsMetrics:
    items_without_recipes = 0
    total_price = 0.0
    total_recipe_cost = 0.0
    items_with_recipes = 0
    worst_food_cost_item = None
    worst_food_cost_percent = 0.0
    highest_priced_item = "N/A"
    highest_price = 0.0

    for item in menu_items:
        price = to_float(item.price)
        total_price += price

        if item.recipe:
            recipe_cost = aggregate_recipe_cost(item.recipe, cost_lookup)
            total_recipe_cost += recipe_cost
            items_with_recipes += 1

            percent = food_cost_percent(recipe_cost, price)
            if percent > worst_food_cost_percent:
                worst_food_cost_percent = percent
                worst_food_cost_item = item.name
        else:
            items_without_recipes += 1

        if price > highest_price:
            highest_price = price
            highest_priced_item = f"{item.name} (${highest_price:.2f})"

    avg_menu_price = total_price / len(menu_items) if menu_items else 0.0
    avg_recipe_cost = total_recipe_cost / items_with_recipes if items_with_recipes else 0.0

    return MenuItemsMetrics(
        total_menu_items=total_menu_items if total_menu_items is not None else len(menu_items),
        items_without_recipes=items_without_recipes,
        avg_menu_price=round_money(avg_menu_price),
        avg_recipe_cost=round_money(avg_recipe_cost),
        avg_food_cost_percent=round(food_cost_percent(avg_recipe_cost, avg_menu_price), 1),
        worst_food_cost_item=worst_food_cost_item or "N/A",
        highest_priced_item=highest_priced_item,
    )


def build_cost_lookups(records) -> Tuple[Dict[UUID, float], Dict[UUID, float]]:
    """Split inventory records into the cost and stock lookups the engine expects."""
    cost_lookup: Dict[UUID, float] = {}
    stock_lookup: Dict[UUID, float] = {}
    for record in records:
        cost_lookup[record.ingredient_id] = to_float(record.cost_per_unit)
        stock_lookup[record.ingredient_id] = to_float(record.quantity)
    return cost_lookup, stock_lookup
