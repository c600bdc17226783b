# app/models/restaurant_inventory.py
import uuid
from sqlalchemy import Column, Date, ForeignKey, Numeric, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from shared.core.database import Base


class RestaurantInventory(Base):
    __tablename__ = "restaurant_inventory"
    __table_args__ = (
        UniqueConstraint("restaurant_id", "ingredient_id",
                         name="uq_restaurant_inventory_ingredient"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(Uuid, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    ingredient_id = Column(Uuid, ForeignKey("ingredient_library.id"), nullable=False)
    quantity = Column(Numeric(14, 3), default=0)
    minimum_quantity = Column(Numeric(14, 3), default=0)
    cost_per_unit = Column(Numeric(12, 4), default=0)
    unit = Column(String(16))
    expiration_date = Column(Date)

    ingredient = relationship("IngredientLibrary")
