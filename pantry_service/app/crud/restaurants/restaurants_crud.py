# app/crud/restaurants_crud.py
from typing import Any, Dict, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from ...models.restaurants.restaurants import Restaurant


def get_restaurant_by_id(db: Session, restaurant_id: UUID) -> Optional[Restaurant]:
    return db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()


def get_restaurant_by_business_id(db: Session, business_id: UUID) -> Optional[Restaurant]:
    return db.query(Restaurant).filter(Restaurant.business_id == business_id).first()


def save_pos_credentials(db: Session, restaurant_id: UUID, pos_system: str, credentials: Dict[str, Any]) -> Optional[Restaurant]:
    db_restaurant = get_restaurant_by_id(db, restaurant_id)
    if not db_restaurant:
        return None

    db_restaurant.pos_system = pos_system
    db_restaurant.pos_integration_data = credentials
    db.commit()
    db.refresh(db_restaurant)
    return db_restaurant
