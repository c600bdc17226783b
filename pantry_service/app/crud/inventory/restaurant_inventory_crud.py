# app/crud/restaurant_inventory_crud.py
from typing import Iterable, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from ...models.inventory.restaurant_inventory import RestaurantInventory


def get_inventory_records(
    db: Session,
    restaurant_id: UUID,
    ingredient_ids: Optional[Iterable[UUID]] = None
) -> List[RestaurantInventory]:
    query = db.query(RestaurantInventory).filter(
        RestaurantInventory.restaurant_id == restaurant_id
    )
    if ingredient_ids is not None:
        ingredient_ids = list(ingredient_ids)
        if not ingredient_ids:
            return []
        query = query.filter(RestaurantInventory.ingredient_id.in_(ingredient_ids))
    return query.all()
