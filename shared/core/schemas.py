from pydantic import BaseModel
from typing import Generic, Optional, TypeVar
from uuid import UUID

# Shared properties
T = TypeVar("T")


class UserToken(BaseModel):
    user_id: str
    business_id: Optional[UUID] = None
    name: Optional[str] = None
    role: Optional[str] = None
    exp: Optional[int] = None


class JsonOutResult(BaseModel, Generic[T]):
    data: Optional[T] = None
    status: str
    status_code: str
    message: str
