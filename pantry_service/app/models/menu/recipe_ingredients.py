# app/models/recipe_ingredients.py
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import relationship
from shared.core.database import Base


class RecipeIngredient(Base):
    __tablename__ = "recipe_ingredients"
    __table_args__ = (
        UniqueConstraint("menu_item_id", "ingredient_id",
                         name="uq_recipe_ingredients_menu_item_ingredient"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    menu_item_id = Column(Uuid, ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False, index=True)
    ingredient_id = Column(Uuid, ForeignKey("ingredient_library.id"), nullable=False)
    quantity = Column(Numeric(12, 4), nullable=False)
    unit = Column(String(16), nullable=False)
    prep_loss_factor = Column(Numeric(5, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    menu_item = relationship("MenuItem", back_populates="recipe_ingredients")
    ingredient = relationship("IngredientLibrary")
