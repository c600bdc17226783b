from pydantic import BaseModel
from typing import Optional

from ...enum.procurement_enum import MetricsPeriod


class DashboardMetrics(BaseModel):
    low_stock_count: int
    expiring_items_count: int
    open_orders_count: int


class InventoryMetrics(BaseModel):
    below_reorder_count: int
    expiring_this_week: int
    top_used_ingredient: str


class OrderMetrics(BaseModel):
    pending_orders_value: float
    overdue_deliveries_count: int
    top_supplier_name: str
    avg_fulfillment_days: int


class ReceivingMetrics(BaseModel):
    pending_shipments_count: int
    received_today_count: int
    on_time_delivery_percent: int


class WasteMetrics(BaseModel):
    period: MetricsPeriod
    total_waste_value: float
    waste_incident_count: int
    top_waste_reason: Optional[str] = None
    avg_waste_per_incident: float


class MenuItemsMetrics(BaseModel):
    total_menu_items: int = 0
    items_without_recipes: int
    avg_menu_price: float
    avg_recipe_cost: float
    avg_food_cost_percent: float
    worst_food_cost_item: str
    highest_priced_item: str
