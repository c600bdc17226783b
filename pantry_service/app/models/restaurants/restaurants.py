# app/models/restaurants.py
import uuid
from sqlalchemy import JSON, Column, DateTime, String, Uuid, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    business_id = Column(Uuid, nullable=False, unique=True, index=True)
    name = Column(String(200), nullable=False)
    pos_system = Column(String(16))
    # vendor credentials, shape depends on pos_system
    pos_integration_data = Column(JSON().with_variant(JSONB, "postgresql"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    menu_items = relationship("MenuItem", back_populates="restaurant")
