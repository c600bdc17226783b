# app/models/purchase_orders.py
import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, Uuid, func
from shared.core.database import Base


class PurchaseOrder(Base):
    __tablename__ = "purchase_orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(Uuid, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    supplier_name = Column(String(200))
    status = Column(String(16), default="draft")
    total = Column(Numeric(14, 2), default=0)
    order_date = Column(DateTime(timezone=True), server_default=func.now())
    expected_delivery_date = Column(Date)
    actual_delivery_date = Column(Date)
