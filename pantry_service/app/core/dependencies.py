from uuid import UUID

from fastapi import Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_db
from shared.core.errors import NotFoundError
from shared.core.schemas import UserToken
from ..services.kitchen_store import KitchenStore, SqlKitchenStore


def get_store(db: Session = Depends(get_db)) -> KitchenStore:
    return SqlKitchenStore(db)


def get_current_restaurant_id(
    store: KitchenStore = Depends(get_store),
    current_user: UserToken = Depends(validate_current_token)
) -> UUID:
    """Restaurant owned by the business in the caller's token."""
    restaurant = store.get_restaurant_by_business(current_user.business_id)
    if not restaurant:
        raise NotFoundError("No restaurant found for this business")
    return restaurant.id
