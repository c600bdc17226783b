# app/models/menu_items.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Numeric, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import relationship
from shared.core.database import Base


class MenuItem(Base):
    __tablename__ = "menu_items"
    __table_args__ = (
        UniqueConstraint("restaurant_id", "pos_system", "external_pos_id",
                         name="uq_menu_items_restaurant_pos_external_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(Uuid, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    category = Column(String(128), nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    pos_system = Column(String(16))
    external_pos_id = Column(String(128))
    # soft delete: menu items are deactivated, never removed
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    restaurant = relationship("Restaurant", back_populates="menu_items")
    recipe_ingredients = relationship(
        "RecipeIngredient",
        back_populates="menu_item",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
