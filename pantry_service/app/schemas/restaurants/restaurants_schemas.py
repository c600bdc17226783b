from pydantic import BaseModel
from uuid import UUID
from typing import Any, Dict, Optional


class RestaurantOut(BaseModel):
    id: UUID
    business_id: UUID
    name: str
    pos_system: Optional[str] = None
    pos_integration_data: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True
