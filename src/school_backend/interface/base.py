from abc import ABC
from datetime import datetime
from typing import Optional, Any
from pydantic import BaseModel, Field

class ListQuery(BaseModel):
    skip: Optional[int] = 0
    limit: Optional[int] = 100

# Entity actions and the permission verb that governs each of them
ACTIONS = {
    "create":  "create",
    "get":     "read",
    "list":    "read",
    "update":  "update",
    "delete":  "delete",
}

class EntityInterface(ABC):
    create: BaseModel = None
    get: BaseModel = None
    list: BaseModel = None
    update: BaseModel = None
    query: BaseModel = None
    search: Any = None
    endpoint: str = None
    model: Any = None

    # Permission category guarding this entity, e.g. "classes" -> read_classes
    permission_category: str = None

    cache_ttl: int = 15

    pre_create: Any = None
    pre_update: Any = None

class BaseEntityList(BaseModel):
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Update timestamp")

class BaseEntityGet(BaseEntityList):
    pass
