# app/models/waste_log.py
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Uuid, func
from shared.core.database import Base


class WasteLog(Base):
    __tablename__ = "waste_log"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(Uuid, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    ingredient_id = Column(Uuid, ForeignKey("ingredient_library.id"))
    quantity = Column(Numeric(14, 3), default=0)
    cost_value = Column(Numeric(12, 2), default=0)
    reason = Column(String(128))
    category = Column(String(16), default="waste")
    logged_at = Column(DateTime(timezone=True), server_default=func.now())
