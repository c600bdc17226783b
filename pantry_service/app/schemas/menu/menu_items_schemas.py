from pydantic import BaseModel, Field
from uuid import UUID
from typing import List, Optional
from datetime import datetime

from ...enum.pos_enum import PosSystem
from .recipes_schemas import IngredientCostOut


class MenuItemBase(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    price: float = Field(default=0, ge=0)
    is_active: bool = True


class MenuItemCreate(MenuItemBase):
    pos_system: Optional[PosSystem] = None
    external_pos_id: Optional[str] = None


class MenuItemUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    pos_system: Optional[PosSystem] = None
    external_pos_id: Optional[str] = None
    is_active: Optional[bool] = None


class MenuItemOut(BaseModel):
    id: UUID
    restaurant_id: UUID
    name: str
    category: str
    price: float
    pos_system: Optional[str] = None
    external_pos_id: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MenuItemDetailOut(MenuItemOut):
    recipe: List[IngredientCostOut] = []
    recipe_cost: float = 0
    food_cost_percent: float = 0
    gross_profit: float = 0
