from typing import Dict, Union

from shared.core.errors import ValidationError
from ...enum.pos_enum import PosSystem
from .base import PosAdapter
from .clover_adapter import CloverAdapter
from .square_adapter import SquareAdapter
from .toast_adapter import ToastAdapter

POS_ADAPTERS: Dict[PosSystem, PosAdapter] = {
    PosSystem.toast: ToastAdapter(),
    PosSystem.square: SquareAdapter(),
    PosSystem.clover: CloverAdapter(),
}


def resolve_pos_system(pos_system: Union[PosSystem, str, None]) -> PosSystem:
    if not pos_system:
        raise ValidationError("POS system type is required")
    try:
        return PosSystem(str(getattr(pos_system, "value", pos_system)).lower())
    except ValueError:
        raise ValidationError(f"Unsupported POS system: {pos_system}")


def get_pos_adapter(pos_system: Union[PosSystem, str], adapters: Dict[PosSystem, PosAdapter] = None) -> PosAdapter:
    adapters = POS_ADAPTERS if adapters is None else adapters
    adapter = adapters.get(resolve_pos_system(pos_system))
    if adapter is None:
        raise ValidationError(f"Unsupported POS system: {pos_system}")
    return adapter
