"""
POS menu reconciliation.

``reconcile`` classifies a POS feed against the restaurant's POS-linked menu
items without touching storage. ``preview_import`` renders that plan as a dry
run; ``apply_import`` walks the same plan and persists one action at a time
through a ``MenuItemWriter``.
"""
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence
from uuid import UUID

from shared.core.errors import PartialBatchError
from shared.utils.units import to_float
from ..enum.menu_enum import ImportAction, ReconcileAction
from ..schemas.menu.menu_items_schemas import MenuItemOut
from ..schemas.pos_import.pos_import_schemas import (
    FieldChange,
    ImportOptions,
    ImportResult,
    ImportStats,
    PlannedAction,
    PosMenuItemRecord,
    PreviewBody,
    PreviewItem,
    PreviewResult,
    PreviewStats,
    ReconciliationPlan,
    ReconciliationResult,
)

logger = logging.getLogger(__name__)

SKIP_EXISTING_REASON = "Already exists and updateExisting=false"
DUPLICATE_FEED_REASON = "Duplicate POS menu item id in feed"
DEACTIVATE_REASON = "Not found in POS menu"


class MenuItemWriter(Protocol):
    """Persists reconciliation actions for one restaurant and POS system."""

    def create_menu_item(self, fields: Dict[str, Any]) -> MenuItemOut: ...

    def update_menu_item(self, menu_item_id: UUID, fields: Dict[str, Any]) -> Optional[MenuItemOut]: ...


def prices_differ(stored: Any, incoming: Any) -> bool:
    return round(to_float(stored), 2) != round(to_float(incoming), 2)


def diff_menu_item(local_item: MenuItemOut, pos_item: PosMenuItemRecord) -> Dict[str, FieldChange]:
    changes: Dict[str, FieldChange] = {}
    if local_item.name != pos_item.name:
        changes["name"] = FieldChange(old=local_item.name, new=pos_item.name)
    if local_item.category != pos_item.category:
        changes["category"] = FieldChange(old=local_item.category, new=pos_item.category)
    if prices_differ(local_item.price, pos_item.price):
        changes["price"] = FieldChange(old=round(to_float(local_item.price), 2), new=pos_item.price)
    if local_item.is_active != pos_item.is_active:
        changes["is_active"] = FieldChange(old=local_item.is_active, new=pos_item.is_active)
    return changes


def menu_item_fields(pos_item: PosMenuItemRecord) -> Dict[str, Any]:
    return {
        "name": pos_item.name,
        "category": pos_item.category,
        "price": pos_item.price,
        "is_active": pos_item.is_active,
        "external_pos_id": pos_item.external_id,
    }


def reconcile(
    pos_items: Sequence[PosMenuItemRecord],
    local_items: Sequence[MenuItemOut],
    update_existing: bool = True,
    deactivate_missing: bool = False,
) -> ReconciliationPlan:
    """
    Classify every POS item, in feed order, as create / update / skip /
    no-change, then (optionally) mark the leftover active local items for
    deactivation. Local items without an external id never match.
    """
    unmatched: Dict[str, MenuItemOut] = {
        item.external_pos_id: item for item in local_items if item.external_pos_id
    }
    seen_ids = set()
    actions: List[PlannedAction] = []

    for pos_item in pos_items:
        if pos_item.external_id in seen_ids:
            actions.append(PlannedAction(
                action=ReconcileAction.skip, pos_item=pos_item, reason=DUPLICATE_FEED_REASON))
            continue
        seen_ids.add(pos_item.external_id)

        local_item = unmatched.pop(pos_item.external_id, None)
        if local_item is None:
            actions.append(PlannedAction(action=ReconcileAction.create, pos_item=pos_item))
        elif not update_existing:
            actions.append(PlannedAction(
                action=ReconcileAction.skip, pos_item=pos_item, local_item=local_item,
                reason=SKIP_EXISTING_REASON))
        else:
            changes = diff_menu_item(local_item, pos_item)
            actions.append(PlannedAction(
                action=ReconcileAction.update if changes else ReconcileAction.no_change,
                pos_item=pos_item, local_item=local_item, changes=changes))

    if deactivate_missing:
        # inactive leftovers are already in the target state
        for local_item in unmatched.values():
            if local_item.is_active:
                actions.append(PlannedAction(
                    action=ReconcileAction.deactivate, local_item=local_item, reason=DEACTIVATE_REASON))

    return ReconciliationPlan(actions=actions)


def _preview_item(pos_item: PosMenuItemRecord, changes: Optional[Dict[str, FieldChange]] = None) -> PreviewItem:
    return PreviewItem(name=pos_item.name, category=pos_item.category, price=pos_item.price, changes=changes)


def preview_import(pos_items: Sequence[PosMenuItemRecord], local_items: Sequence[MenuItemOut]) -> PreviewResult:
    plan = reconcile(pos_items, local_items, update_existing=True, deactivate_missing=False)

    to_create = [_preview_item(a.pos_item) for a in plan.of(ReconcileAction.create)]
    to_update = [_preview_item(a.pos_item, a.changes) for a in plan.of(ReconcileAction.update)]
    existing = [_preview_item(a.pos_item) for a in plan.of(ReconcileAction.no_change)]

    return PreviewResult(
        preview=PreviewBody(
            total=len(pos_items),
            to_create=to_create,
            to_update=to_update,
            existing=existing,
            categories=sorted({item.category for item in pos_items}),
        ),
        stats=PreviewStats(
            total=len(pos_items),
            to_create=len(to_create),
            to_update=len(to_update),
            no_changes=len(existing),
        ),
    )


def short_error(exc: Exception) -> str:
    """First line of the underlying cause; database errors carry the SQL and parameters after it."""
    cause = getattr(exc, "orig", None) or exc
    lines = str(cause).strip().splitlines()
    return lines[0] if lines else type(cause).__name__


def _error_result(name: str, exc: Exception) -> ReconciliationResult:
    failure = exc if isinstance(exc, PartialBatchError) else PartialBatchError(name, exc)
    logger.warning("Import of menu item %r failed: %s", failure.item_name, failure.message)
    return ReconciliationResult(action=ImportAction.error, name=failure.item_name, error=short_error(failure.cause))


def apply_import(
    pos_items: Sequence[PosMenuItemRecord],
    local_items: Sequence[MenuItemOut],
    options: ImportOptions,
    writer: MenuItemWriter,
) -> ImportResult:
    """
    Persist the reconciliation plan item by item.

    A failed write becomes an ``error`` entry and the batch carries on.
    Deactivations are reported in ``results`` but stats only describe the
    POS feed itself.
    """
    plan = reconcile(pos_items, local_items, options.update_existing, options.deactivate_missing)
    stats = ImportStats(total=len(pos_items))
    results: List[ReconciliationResult] = []

    for planned in plan.actions:
        if planned.action == ReconcileAction.no_change:
            continue

        if planned.action == ReconcileAction.skip:
            stats.skipped += 1
            results.append(ReconciliationResult(
                action=ImportAction.skipped,
                id=planned.local_item.id if planned.local_item else None,
                name=planned.pos_item.name,
                reason=planned.reason,
            ))
            continue

        if planned.action == ReconcileAction.deactivate:
            local_item = planned.local_item
            try:
                writer.update_menu_item(local_item.id, {"is_active": False})
            except Exception as exc:
                results.append(_error_result(local_item.name, exc))
                continue
            results.append(ReconciliationResult(
                action=ImportAction.deactivated, id=local_item.id, name=local_item.name,
                reason=planned.reason))
            continue

        pos_item = planned.pos_item
        try:
            if planned.action == ReconcileAction.create:
                created = writer.create_menu_item(menu_item_fields(pos_item))
                stats.created += 1
                results.append(ReconciliationResult(
                    action=ImportAction.created, id=created.id, name=created.name,
                    category=created.category, price=to_float(created.price)))
            else:
                fields = {name: change.new for name, change in planned.changes.items()}
                writer.update_menu_item(planned.local_item.id, fields)
                stats.updated += 1
                results.append(ReconciliationResult(
                    action=ImportAction.updated, id=planned.local_item.id, name=pos_item.name,
                    category=pos_item.category, price=pos_item.price, changes=planned.changes))
        except Exception as exc:
            stats.errors += 1
            results.append(_error_result(pos_item.name, exc))

    logger.info(
        "Menu import finished: %d total, %d created, %d updated, %d skipped, %d errors",
        stats.total, stats.created, stats.updated, stats.skipped, stats.errors)
    return ImportResult(success=True, stats=stats, results=results)
