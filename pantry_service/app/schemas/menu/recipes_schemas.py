from pydantic import BaseModel
from uuid import UUID
from typing import List, Optional
from datetime import date


class RecipeIngredientIn(BaseModel):
    # left optional so missing values surface as domain validation messages
    ingredient_id: Optional[UUID] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    prep_loss_factor: float = 0


class RecipeSaveRequest(BaseModel):
    ingredients: List[RecipeIngredientIn] = []


class RecipeIngredientUpdate(BaseModel):
    quantity: Optional[float] = None
    unit: Optional[str] = None
    prep_loss_factor: Optional[float] = None


class RecipeLineOut(BaseModel):
    id: UUID
    menu_item_id: UUID
    ingredient_id: UUID
    ingredient_name: str = "Unknown"
    ingredient_category: str = "uncategorized"
    quantity: float
    unit: str
    prep_loss_factor: float = 0


class RecipeOut(BaseModel):
    menu_item_id: UUID
    ingredients: List[RecipeLineOut]
    ingredient_count: int


class RecipeSaveOut(BaseModel):
    success: bool = True
    message: str
    ingredients: List[RecipeLineOut]


class InventoryRecordOut(BaseModel):
    ingredient_id: UUID
    quantity: float = 0
    minimum_quantity: float = 0
    cost_per_unit: float = 0
    unit: Optional[str] = None
    expiration_date: Optional[date] = None

    class Config:
        from_attributes = True


class IngredientCostOut(BaseModel):
    ingredient_id: UUID
    ingredient_name: str
    quantity: float
    unit: str
    prep_loss_factor: float
    adjusted_quantity: float
    cost_per_unit: float
    ingredient_cost: float
    in_stock: bool
    current_stock: float


class CostBreakdown(BaseModel):
    total_cost: float
    ingredients: List[IngredientCostOut]
    warnings: List[str]
    menu_price: Optional[float] = None
    food_cost_percent: float = 0
    gross_profit: Optional[float] = None


class RecipeValidationOut(BaseModel):
    is_valid: bool
    has_recipe: bool
    all_in_stock: bool
    errors: List[str]
    warnings: List[str]


class DeductionRequest(BaseModel):
    quantity: Optional[float] = None


class DeductionOut(BaseModel):
    ingredient_id: UUID
    quantity: float
    unit: str


class DeductionResponse(BaseModel):
    menu_item_id: UUID
    quantity_sold: float
    deductions: List[DeductionOut]


class MessageOut(BaseModel):
    success: bool = True
    message: str


class MenuItemWithRecipe(BaseModel):
    id: UUID
    name: str
    price: float
    recipe: List[RecipeLineOut] = []
