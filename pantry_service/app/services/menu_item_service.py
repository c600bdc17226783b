import logging
from typing import List, Optional
from uuid import UUID

from shared.core.errors import ForbiddenError, NotFoundError, ValidationError
from shared.utils.units import to_float
from ..schemas.menu.menu_items_schemas import (
    MenuItemCreate,
    MenuItemDetailOut,
    MenuItemOut,
    MenuItemUpdate,
)
from .kitchen_store import KitchenStore
from .recipe_costing import build_cost_lookups, compute_recipe_cost

logger = logging.getLogger(__name__)


def get_owned_menu_item(store: KitchenStore, menu_item_id: UUID, restaurant_id: UUID) -> MenuItemOut:
    menu_item = store.get_menu_item(menu_item_id)
    if not menu_item:
        raise NotFoundError("Menu item not found")
    if menu_item.restaurant_id != restaurant_id:
        raise ForbiddenError("Access denied")
    return menu_item


class MenuItemService:
    def __init__(self, store: KitchenStore):
        self.store = store

    def list_menu_items(self, restaurant_id: UUID, category: Optional[str] = None,
                        is_active: Optional[bool] = None) -> List[MenuItemOut]:
        return self.store.list_menu_items(restaurant_id, category, is_active)

    def get_menu_item(self, menu_item_id: UUID, restaurant_id: UUID) -> MenuItemDetailOut:
        """Menu item together with its costed recipe."""
        menu_item = get_owned_menu_item(self.store, menu_item_id, restaurant_id)

        lines = self.store.get_recipe_lines(menu_item_id)
        cost_lookup, stock_lookup = build_cost_lookups(
            self.store.get_inventory_records(restaurant_id, [line.ingredient_id for line in lines]))
        breakdown = compute_recipe_cost(lines, cost_lookup, stock_lookup, menu_price=to_float(menu_item.price))

        return MenuItemDetailOut(
            **menu_item.model_dump(),
            recipe=breakdown.ingredients,
            recipe_cost=breakdown.total_cost,
            food_cost_percent=breakdown.food_cost_percent,
            gross_profit=breakdown.gross_profit or 0,
        )

    def create_menu_item(self, restaurant_id: UUID, data: MenuItemCreate) -> MenuItemOut:
        if not data.name or not data.category:
            raise ValidationError("Name and category are required")
        if data.price < 0:
            raise ValidationError("Price cannot be negative")

        fields = data.model_dump()
        if data.pos_system is not None:
            fields["pos_system"] = data.pos_system.value

        menu_item = self.store.create_menu_item(restaurant_id, fields)
        logger.info("Created menu item %s (%s)", menu_item.id, menu_item.name)
        return menu_item

    def update_menu_item(self, menu_item_id: UUID, restaurant_id: UUID, updates: MenuItemUpdate) -> MenuItemOut:
        get_owned_menu_item(self.store, menu_item_id, restaurant_id)

        fields = {k: v for k, v in updates.model_dump(exclude_unset=True).items() if v is not None}
        if "name" in fields and not fields["name"]:
            raise ValidationError("Name cannot be empty")
        if "category" in fields and not fields["category"]:
            raise ValidationError("Category cannot be empty")
        if "price" in fields and fields["price"] < 0:
            raise ValidationError("Price cannot be negative")
        if "pos_system" in fields:
            fields["pos_system"] = updates.pos_system.value

        return self.store.update_menu_item(menu_item_id, fields)

    def delete_menu_item(self, menu_item_id: UUID, restaurant_id: UUID) -> MenuItemOut:
        # soft delete, recipe history stays attached
        get_owned_menu_item(self.store, menu_item_id, restaurant_id)
        return self.store.update_menu_item(menu_item_id, {"is_active": False})

    def get_categories(self, restaurant_id: UUID) -> List[str]:
        return self.store.get_menu_categories(restaurant_id)
