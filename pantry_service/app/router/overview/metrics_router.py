from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_db
from ...core.dependencies import get_current_restaurant_id
from ...crud.overview import metrics_crud
from ...enum.procurement_enum import MetricsPeriod
from ...schemas.overview.metrics_schemas import (
    DashboardMetrics,
    InventoryMetrics,
    MenuItemsMetrics,
    OrderMetrics,
    ReceivingMetrics,
    WasteMetrics,
)

router = APIRouter(prefix="/api/metrics", tags=["Metrics"], dependencies=[Depends(validate_current_token)])


@router.get("/dashboard", response_model=DashboardMetrics)
def get_dashboard_metrics(
    db: Session = Depends(get_db),
    restaurant_id: UUID = Depends(get_current_restaurant_id)
):
    return metrics_crud.get_dashboard_metrics(db, restaurant_id)


@router.get("/inventory", response_model=InventoryMetrics)
def get_inventory_metrics(
    db: Session = Depends(get_db),
    restaurant_id: UUID = Depends(get_current_restaurant_id)
):
    return metrics_crud.get_inventory_metrics(db, restaurant_id)


@router.get("/orders", response_model=OrderMetrics)
def get_order_metrics(
    db: Session = Depends(get_db),
    restaurant_id: UUID = Depends(get_current_restaurant_id)
):
    return metrics_crud.get_order_metrics(db, restaurant_id)


@router.get("/receiving", response_model=ReceivingMetrics)
def get_receiving_metrics(
    db: Session = Depends(get_db),
    restaurant_id: UUID = Depends(get_current_restaurant_id)
):
    return metrics_crud.get_receiving_metrics(db, restaurant_id)


@router.get("/waste", response_model=WasteMetrics)
def get_waste_metrics(
    period: MetricsPeriod = Query(MetricsPeriod.week),
    db: Session = Depends(get_db),
    restaurant_id: UUID = Depends(get_current_restaurant_id)
):
    return metrics_crud.get_waste_metrics(db, restaurant_id, period)


@router.get("/menu-items", response_model=MenuItemsMetrics)
def get_menu_items_metrics(
    db: Session = Depends(get_db),
    restaurant_id: UUID = Depends(get_current_restaurant_id)
):
    return metrics_crud.get_menu_items_metrics(db, restaurant_id)
