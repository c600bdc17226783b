from enum import Enum


class PurchaseOrderStatus(str, Enum):
    draft = "draft"
    ordered = "ordered"
    received = "received"
    cancelled = "cancelled"


class WasteCategory(str, Enum):
    waste = "waste"
    reduction = "reduction"


class MetricsPeriod(str, Enum):
    today = "today"
    week = "week"
    month = "month"
