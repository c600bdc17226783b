# app/crud/menu_items_crud.py
from typing import Any, Dict, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from ...models.menu.menu_items import MenuItem


def get_menu_items(
    db: Session,
    restaurant_id: UUID,
    category: Optional[str] = None,
    is_active: Optional[bool] = None
) -> List[MenuItem]:
    query = db.query(MenuItem).filter(MenuItem.restaurant_id == restaurant_id)

    if category:
        query = query.filter(MenuItem.category == category)

    # active items only unless asked otherwise
    query = query.filter(MenuItem.is_active == (True if is_active is None else is_active))

    return query.order_by(MenuItem.name.asc()).all()


def get_menu_item_by_id(db: Session, menu_item_id: UUID) -> Optional[MenuItem]:
    return db.query(MenuItem).filter(MenuItem.id == menu_item_id).first()


def get_pos_linked_menu_items(db: Session, restaurant_id: UUID, pos_system: str) -> List[MenuItem]:
    """All items (active or not) that carry an external id for this POS system."""
    return db.query(MenuItem).filter(
        MenuItem.restaurant_id == restaurant_id,
        MenuItem.pos_system == pos_system,
        MenuItem.external_pos_id.isnot(None)
    ).all()


def create_menu_item(db: Session, restaurant_id: UUID, data: Dict[str, Any]) -> MenuItem:
    data = dict(data)
    data["restaurant_id"] = restaurant_id
    db_item = MenuItem(**data)
    try:
        db.add(db_item)
        db.commit()
    except Exception:
        # leave the session usable for the next write in a batch
        db.rollback()
        raise
    db.refresh(db_item)
    return db_item


def update_menu_item(db: Session, menu_item_id: UUID, data: Dict[str, Any]) -> Optional[MenuItem]:
    db_item = get_menu_item_by_id(db, menu_item_id)
    if not db_item:
        return None

    # Update only the fields that are provided
    try:
        for k, v in data.items():
            setattr(db_item, k, v)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_item)
    return db_item


def get_menu_categories(db: Session, restaurant_id: UUID) -> List[str]:
    rows = db.query(MenuItem.category).filter(
        MenuItem.restaurant_id == restaurant_id,
        MenuItem.is_active == True
    ).distinct().all()
    return sorted(category for (category,) in rows if category)


def count_active_menu_items(db: Session, restaurant_id: UUID) -> int:
    return db.query(MenuItem).filter(
        MenuItem.restaurant_id == restaurant_id,
        MenuItem.is_active == True
    ).count()
