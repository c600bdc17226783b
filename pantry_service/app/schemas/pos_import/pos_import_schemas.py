from pydantic import BaseModel, Field
from uuid import UUID
from typing import Any, Dict, List, Optional
from datetime import datetime

from ...enum.menu_enum import ImportAction, ReconcileAction
from ...enum.pos_enum import PosSystem
from ..menu.menu_items_schemas import MenuItemOut


class PosMenuItemRecord(BaseModel):
    """Menu item as normalized by a POS adapter; price in major currency units."""
    external_id: str
    name: str
    description: str = ""
    category: str = "Uncategorized"
    price: float = 0
    is_active: bool = True
    pos_data: Dict[str, Any] = {}


class FieldChange(BaseModel):
    old: Any = None
    new: Any = None


class PlannedAction(BaseModel):
    action: ReconcileAction
    pos_item: Optional[PosMenuItemRecord] = None
    local_item: Optional[MenuItemOut] = None
    changes: Dict[str, FieldChange] = {}
    reason: Optional[str] = None


class ReconciliationPlan(BaseModel):
    actions: List[PlannedAction] = []

    def of(self, action: ReconcileAction) -> List[PlannedAction]:
        return [a for a in self.actions if a.action == action]


class ImportOptions(BaseModel):
    update_existing: bool = True
    deactivate_missing: bool = False


class ImportRequest(BaseModel):
    pos_system: PosSystem
    options: ImportOptions = ImportOptions()


class PosCredentialsRequest(BaseModel):
    pos_system: PosSystem
    credentials: Dict[str, Any]


class PosCredentialsOut(BaseModel):
    success: bool = True
    message: str
    pos_system: PosSystem


class ReconciliationResult(BaseModel):
    action: ImportAction
    id: Optional[UUID] = None
    name: str
    category: Optional[str] = None
    price: Optional[float] = None
    changes: Optional[Dict[str, FieldChange]] = None
    reason: Optional[str] = None
    error: Optional[str] = None


class ImportStats(BaseModel):
    total: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0


class ImportResult(BaseModel):
    success: bool = True
    stats: ImportStats
    results: List[ReconciliationResult]
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class PreviewItem(BaseModel):
    name: str
    category: str
    price: float
    changes: Optional[Dict[str, FieldChange]] = None


class PreviewBody(BaseModel):
    total: int
    to_create: List[PreviewItem]
    to_update: List[PreviewItem]
    existing: List[PreviewItem]
    categories: List[str]


class PreviewStats(BaseModel):
    total: int
    to_create: int
    to_update: int
    no_changes: int


class PreviewResult(BaseModel):
    preview: PreviewBody
    stats: PreviewStats


class ConnectionStatus(BaseModel):
    connected: bool
    pos_system: Optional[PosSystem] = None
    error: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class SquareLocation(BaseModel):
    id: str
    name: Optional[str] = None
    address: Optional[Dict[str, Any]] = None
    status: Optional[str] = None
