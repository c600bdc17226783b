"""
Storage port for the kitchen services.

Services receive a ``KitchenStore`` when they are built instead of reaching for
a module-level database client. ``SqlKitchenStore`` is the SQLAlchemy
implementation used by the API; tests substitute an in-memory store.
"""
from typing import Any, Dict, Iterable, List, Optional, Protocol
from uuid import UUID

from sqlalchemy.orm import Session

from ..crud.inventory import restaurant_inventory_crud
from ..crud.menu import menu_items_crud, recipes_crud
from ..crud.restaurants import restaurants_crud
from ..models.menu.recipe_ingredients import RecipeIngredient
from ..schemas.menu.menu_items_schemas import MenuItemOut
from ..schemas.menu.recipes_schemas import (
    InventoryRecordOut,
    RecipeIngredientIn,
    RecipeLineOut,
)
from ..schemas.restaurants.restaurants_schemas import RestaurantOut


class KitchenStore(Protocol):
    # restaurants
    def get_restaurant(self, restaurant_id: UUID) -> Optional[RestaurantOut]: ...
    def get_restaurant_by_business(self, business_id: UUID) -> Optional[RestaurantOut]: ...
    def save_pos_credentials(self, restaurant_id: UUID, pos_system: str,
                             credentials: Dict[str, Any]) -> Optional[RestaurantOut]: ...

    # menu items
    def list_menu_items(self, restaurant_id: UUID, category: Optional[str] = None,
                        is_active: Optional[bool] = None) -> List[MenuItemOut]: ...
    def get_menu_item(self, menu_item_id: UUID) -> Optional[MenuItemOut]: ...
    def get_pos_linked_items(self, restaurant_id: UUID, pos_system: str) -> List[MenuItemOut]: ...
    def create_menu_item(self, restaurant_id: UUID, fields: Dict[str, Any]) -> MenuItemOut: ...
    def update_menu_item(self, menu_item_id: UUID, fields: Dict[str, Any]) -> Optional[MenuItemOut]: ...
    def get_menu_categories(self, restaurant_id: UUID) -> List[str]: ...

    # recipes
    def get_recipe_lines(self, menu_item_id: UUID) -> List[RecipeLineOut]: ...
    def find_recipe_line(self, menu_item_id: UUID, ingredient_id: UUID) -> Optional[RecipeLineOut]: ...
    def get_recipe_line(self, recipe_ingredient_id: UUID) -> Optional[RecipeLineOut]: ...
    def replace_recipe(self, menu_item_id: UUID, lines: List[RecipeIngredientIn]) -> List[RecipeLineOut]: ...
    def add_recipe_line(self, menu_item_id: UUID, line: RecipeIngredientIn) -> RecipeLineOut: ...
    def update_recipe_line(self, recipe_ingredient_id: UUID,
                           fields: Dict[str, Any]) -> Optional[RecipeLineOut]: ...
    def delete_recipe_line(self, recipe_ingredient_id: UUID) -> bool: ...

    # inventory (read-only)
    def get_inventory_records(self, restaurant_id: UUID,
                              ingredient_ids: Optional[Iterable[UUID]] = None) -> List[InventoryRecordOut]: ...


def to_recipe_line(db_line: RecipeIngredient) -> RecipeLineOut:
    ingredient = db_line.ingredient
    return RecipeLineOut(
        id=db_line.id,
        menu_item_id=db_line.menu_item_id,
        ingredient_id=db_line.ingredient_id,
        ingredient_name=ingredient.name if ingredient and ingredient.name else "Unknown",
        ingredient_category=ingredient.category if ingredient and ingredient.category else "uncategorized",
        quantity=float(db_line.quantity),
        unit=db_line.unit,
        prep_loss_factor=float(db_line.prep_loss_factor or 0),
    )


def _out(schema, obj):
    return schema.model_validate(obj) if obj is not None else None


class SqlKitchenStore:
    def __init__(self, db: Session):
        self.db = db

    def get_restaurant(self, restaurant_id):
        return _out(RestaurantOut, restaurants_crud.get_restaurant_by_id(self.db, restaurant_id))

    def get_restaurant_by_business(self, business_id):
        return _out(RestaurantOut, restaurants_crud.get_restaurant_by_business_id(self.db, business_id))

    def save_pos_credentials(self, restaurant_id, pos_system, credentials):
        return _out(RestaurantOut, restaurants_crud.save_pos_credentials(
            self.db, restaurant_id, pos_system, credentials))

    def list_menu_items(self, restaurant_id, category=None, is_active=None):
        items = menu_items_crud.get_menu_items(self.db, restaurant_id, category, is_active)
        return [MenuItemOut.model_validate(i) for i in items]

    def get_menu_item(self, menu_item_id):
        return _out(MenuItemOut, menu_items_crud.get_menu_item_by_id(self.db, menu_item_id))

    def get_pos_linked_items(self, restaurant_id, pos_system):
        items = menu_items_crud.get_pos_linked_menu_items(self.db, restaurant_id, pos_system)
        return [MenuItemOut.model_validate(i) for i in items]

    def create_menu_item(self, restaurant_id, fields):
        return MenuItemOut.model_validate(menu_items_crud.create_menu_item(self.db, restaurant_id, fields))

    def update_menu_item(self, menu_item_id, fields):
        return _out(MenuItemOut, menu_items_crud.update_menu_item(self.db, menu_item_id, fields))

    def get_menu_categories(self, restaurant_id):
        return menu_items_crud.get_menu_categories(self.db, restaurant_id)

    def get_recipe_lines(self, menu_item_id):
        return [to_recipe_line(ri) for ri in recipes_crud.get_recipe_ingredients(self.db, menu_item_id)]

    def find_recipe_line(self, menu_item_id, ingredient_id):
        db_line = recipes_crud.get_recipe_ingredient_by_ingredient(self.db, menu_item_id, ingredient_id)
        return to_recipe_line(db_line) if db_line else None

    def get_recipe_line(self, recipe_ingredient_id):
        db_line = recipes_crud.get_recipe_ingredient_by_id(self.db, recipe_ingredient_id)
        return to_recipe_line(db_line) if db_line else None

    def replace_recipe(self, menu_item_id, lines):
        return [to_recipe_line(ri) for ri in recipes_crud.replace_recipe(self.db, menu_item_id, lines)]

    def add_recipe_line(self, menu_item_id, line):
        return to_recipe_line(recipes_crud.add_recipe_ingredient(self.db, menu_item_id, line))

    def update_recipe_line(self, recipe_ingredient_id, fields):
        db_line = recipes_crud.update_recipe_ingredient(self.db, recipe_ingredient_id, fields)
        return to_recipe_line(db_line) if db_line else None

    def delete_recipe_line(self, recipe_ingredient_id):
        return recipes_crud.delete_recipe_ingredient(self.db, recipe_ingredient_id)

    def get_inventory_records(self, restaurant_id, ingredient_ids=None):
        records = restaurant_inventory_crud.get_inventory_records(self.db, restaurant_id, ingredient_ids)
        return [InventoryRecordOut.model_validate(r) for r in records]
