from collections import Counter, defaultdict
from datetime import date, datetime, timedelta
from typing import Optional
from uuid import UUID

from dateutil.relativedelta import relativedelta
from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.utils.units import round_money, to_float
from ...enum.procurement_enum import MetricsPeriod, PurchaseOrderStatus, WasteCategory
from ...models.inventory.restaurant_inventory import RestaurantInventory
from ...models.inventory.waste_log import WasteLog
from ...models.menu.ingredient_library import IngredientLibrary
from ...models.menu.menu_items import MenuItem
from ...models.menu.recipe_ingredients import RecipeIngredient
from ...models.procurement.purchase_orders import PurchaseOrder
from ...schemas.menu.recipes_schemas import MenuItemWithRecipe
from ...schemas.overview.metrics_schemas import (
    DashboardMetrics,
    InventoryMetrics,
    MenuItemsMetrics,
    OrderMetrics,
    ReceivingMetrics,
    WasteMetrics,
)
from ...services.kitchen_store import to_recipe_line
from ...services.recipe_costing import summarize_menu_costs
from ..inventory.restaurant_inventory_crud import get_inventory_records
from ..menu.menu_items_crud import count_active_menu_items, get_menu_items
from ..menu.recipes_crud import get_recipes_for_menu_items

EXPIRING_WINDOW_DAYS = 7
RECENT_DELIVERIES_LIMIT = 50
OPEN_ORDER_STATUSES = (PurchaseOrderStatus.draft.value, PurchaseOrderStatus.ordered.value)


def _count_low_stock(db: Session, restaurant_id: UUID) -> int:
    return db.query(func.count(RestaurantInventory.id)).filter(
        RestaurantInventory.restaurant_id == restaurant_id,
        RestaurantInventory.quantity <= func.coalesce(RestaurantInventory.minimum_quantity, 0)
    ).scalar() or 0


def _count_expiring(db: Session, restaurant_id: UUID, today: date) -> int:
    return db.query(func.count(RestaurantInventory.id)).filter(
        RestaurantInventory.restaurant_id == restaurant_id,
        RestaurantInventory.expiration_date >= today,
        RestaurantInventory.expiration_date <= today + timedelta(days=EXPIRING_WINDOW_DAYS)
    ).scalar() or 0


def _recent_deliveries(db: Session, restaurant_id: UUID):
    return db.query(PurchaseOrder).filter(
        PurchaseOrder.restaurant_id == restaurant_id,
        PurchaseOrder.actual_delivery_date.isnot(None)
    ).order_by(PurchaseOrder.actual_delivery_date.desc()).limit(RECENT_DELIVERIES_LIMIT).all()


def get_dashboard_metrics(db: Session, restaurant_id: UUID, today: Optional[date] = None) -> DashboardMetrics:
    today = today or date.today()

    open_orders_count = db.query(func.count(PurchaseOrder.id)).filter(
        PurchaseOrder.restaurant_id == restaurant_id,
        PurchaseOrder.status.in_(OPEN_ORDER_STATUSES)
    ).scalar() or 0

    return DashboardMetrics(
        low_stock_count=_count_low_stock(db, restaurant_id),
        expiring_items_count=_count_expiring(db, restaurant_id, today),
        open_orders_count=open_orders_count,
    )


def get_inventory_metrics(db: Session, restaurant_id: UUID, today: Optional[date] = None) -> InventoryMetrics:
    today = today or date.today()

    # ingredient that shows up in the most active recipes
    top_used = db.query(
        IngredientLibrary.name, func.count(RecipeIngredient.id).label("usage")
    ).join(
        RecipeIngredient, RecipeIngredient.ingredient_id == IngredientLibrary.id
    ).join(
        MenuItem, MenuItem.id == RecipeIngredient.menu_item_id
    ).filter(
        MenuItem.restaurant_id == restaurant_id,
        MenuItem.is_active == True
    ).group_by(IngredientLibrary.name).order_by(
        func.count(RecipeIngredient.id).desc(), IngredientLibrary.name.asc()
    ).first()

    return InventoryMetrics(
        below_reorder_count=_count_low_stock(db, restaurant_id),
        expiring_this_week=_count_expiring(db, restaurant_id, today),
        top_used_ingredient=top_used[0] if top_used else "N/A",
    )


def get_order_metrics(db: Session, restaurant_id: UUID, today: Optional[date] = None) -> OrderMetrics:
    today = today or date.today()

    pending_orders_value = db.query(func.coalesce(func.sum(PurchaseOrder.total), 0)).filter(
        PurchaseOrder.restaurant_id == restaurant_id,
        PurchaseOrder.status.in_(OPEN_ORDER_STATUSES)
    ).scalar() or 0

    overdue_deliveries_count = db.query(func.count(PurchaseOrder.id)).filter(
        PurchaseOrder.restaurant_id == restaurant_id,
        PurchaseOrder.status == PurchaseOrderStatus.ordered.value,
        PurchaseOrder.expected_delivery_date < today
    ).scalar() or 0

    first_of_month = datetime.combine(today + relativedelta(day=1), datetime.min.time())
    suppliers = Counter(
        name for (name,) in db.query(PurchaseOrder.supplier_name).filter(
            PurchaseOrder.restaurant_id == restaurant_id,
            PurchaseOrder.order_date >= first_of_month
        ).all() if name
    )
    top_supplier_name = suppliers.most_common(1)[0][0] if suppliers else "N/A"

    delivered = [o for o in _recent_deliveries(db, restaurant_id) if o.order_date]
    avg_fulfillment_days = 0
    if delivered:
        total_days = sum(
            max((o.actual_delivery_date - o.order_date.date()).days, 0) for o in delivered
        )
        avg_fulfillment_days = round(total_days / len(delivered))

    return OrderMetrics(
        pending_orders_value=round_money(to_float(pending_orders_value)),
        overdue_deliveries_count=overdue_deliveries_count,
        top_supplier_name=top_supplier_name,
        avg_fulfillment_days=avg_fulfillment_days,
    )


def get_receiving_metrics(db: Session, restaurant_id: UUID, today: Optional[date] = None) -> ReceivingMetrics:
    today = today or date.today()

    pending_shipments_count = db.query(func.count(PurchaseOrder.id)).filter(
        PurchaseOrder.restaurant_id == restaurant_id,
        PurchaseOrder.status == PurchaseOrderStatus.ordered.value
    ).scalar() or 0

    received_today_count = db.query(func.count(PurchaseOrder.id)).filter(
        PurchaseOrder.restaurant_id == restaurant_id,
        PurchaseOrder.actual_delivery_date == today
    ).scalar() or 0

    delivered = _recent_deliveries(db, restaurant_id)
    on_time_delivery_percent = 0
    if delivered:
        on_time = sum(
            1 for o in delivered
            if o.expected_delivery_date and o.actual_delivery_date <= o.expected_delivery_date
        )
        on_time_delivery_percent = round(on_time / len(delivered) * 100)

    return ReceivingMetrics(
        pending_shipments_count=pending_shipments_count,
        received_today_count=received_today_count,
        on_time_delivery_percent=on_time_delivery_percent,
    )


def period_start(period: MetricsPeriod, today: date) -> datetime:
    if period == MetricsPeriod.today:
        start = today
    elif period == MetricsPeriod.month:
        start = today + relativedelta(day=1)
    else:
        # weeks start on Sunday
        start = today - timedelta(days=(today.weekday() + 1) % 7)
    return datetime.combine(start, datetime.min.time())


def get_waste_metrics(
    db: Session,
    restaurant_id: UUID,
    period: MetricsPeriod = MetricsPeriod.week,
    today: Optional[date] = None
) -> WasteMetrics:
    today = today or date.today()

    # reductions are tracked separately and do not count as waste
    rows = db.query(WasteLog.cost_value, WasteLog.reason).filter(
        WasteLog.restaurant_id == restaurant_id,
        WasteLog.category == WasteCategory.waste.value,
        WasteLog.logged_at >= period_start(period, today)
    ).all()

    total_waste_value = sum(to_float(cost_value) for cost_value, _ in rows)
    reasons = Counter(reason for _, reason in rows)
    incident_count = len(rows)

    return WasteMetrics(
        period=period,
        total_waste_value=round_money(total_waste_value),
        waste_incident_count=incident_count,
        top_waste_reason=reasons.most_common(1)[0][0] if reasons else None,
        avg_waste_per_incident=round_money(total_waste_value / incident_count) if incident_count else 0,
    )


def get_menu_items_metrics(db: Session, restaurant_id: UUID) -> MenuItemsMetrics:
    menu_items = get_menu_items(db, restaurant_id, is_active=True)

    recipes = defaultdict(list)
    for db_line in get_recipes_for_menu_items(db, [item.id for item in menu_items]):
        recipes[db_line.menu_item_id].append(to_recipe_line(db_line))

    cost_lookup = {
        record.ingredient_id: to_float(record.cost_per_unit)
        for record in get_inventory_records(db, restaurant_id)
    }

    return summarize_menu_costs(
        [
            MenuItemWithRecipe(id=item.id, name=item.name, price=to_float(item.price), recipe=recipes[item.id])
            for item in menu_items
        ],
        cost_lookup,
        total_menu_items=count_active_menu_items(db, restaurant_id),
    )
