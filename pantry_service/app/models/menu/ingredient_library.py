# app/models/ingredient_library.py
import uuid
from sqlalchemy import Column, String, Uuid
from shared.core.database import Base


class IngredientLibrary(Base):
    __tablename__ = "ingredient_library"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    category = Column(String(128))
    unit = Column(String(16))
