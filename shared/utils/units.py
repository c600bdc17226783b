"""Numeric coercion and unit helpers shared by costing and metrics."""
from decimal import Decimal
from typing import Any, Optional, Union

Number = Union[int, float, Decimal]

OUNCES_PER_POUND = 16


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce a stored Decimal / numeric string / None into a float."""
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def round_money(value: Number) -> float:
    return round(float(value), 2)


def round_quantity(value: Number) -> float:
    return round(float(value), 4)


def convert_to_pounds(quantity: Number, unit: Optional[str]) -> float:
    """
    Express a weight in the base weight unit (lbs).

    Only ounces are converted; every other unit is returned as-is, so a
    caller combining mixed units must make sure costs share that unit.
    """
    quantity = to_float(quantity)
    if unit == "oz":
        return quantity / OUNCES_PER_POUND
    return quantity


def adjust_for_prep_loss(quantity: Number, prep_loss_factor: Optional[Number]) -> float:
    """Raw quantity needed once prep shrink (percent) is accounted for."""
    return to_float(quantity) * (1 + to_float(prep_loss_factor) / 100)
