from pydantic import BaseModel, ConfigDict, Field, EmailStr
from typing import Optional
from sqlalchemy.orm import Session
from school_backend.interface.base import BaseEntityGet, BaseEntityList, EntityInterface, ListQuery
from school_backend.model.school import SchoolUnit

class SchoolUnitCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255, description="Unit name")
    address: Optional[str] = Field(None, max_length=1024, description="Street address")
    phone: Optional[str] = Field(None, max_length=64, description="Phone number")
    email: Optional[EmailStr] = Field(None, description="Contact email address")
    manager_id: Optional[str] = Field(None, description="User managing the unit")
    is_active: Optional[bool] = None

    model_config = ConfigDict(extra='forbid')

class SchoolUnitGet(BaseEntityGet):
    id: str = Field(description="Unit unique identifier")
    name: str = Field(description="Unit name")
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    manager_id: Optional[str] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class SchoolUnitList(BaseEntityList):
    id: str
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class SchoolUnitUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    manager_id: Optional[str] = None
    is_active: Optional[bool] = None

    model_config = ConfigDict(extra='forbid')

class SchoolUnitQuery(ListQuery):
    id: Optional[str] = None
    name: Optional[str] = None
    manager_id: Optional[str] = None
    is_active: Optional[bool] = None

def school_unit_search(db: Session, query, params: Optional[SchoolUnitQuery]):

    if params.id != None:
        query = query.filter(SchoolUnit.id == params.id)
    if params.name != None:
        query = query.filter(SchoolUnit.name == params.name)
    if params.manager_id != None:
        query = query.filter(SchoolUnit.manager_id == params.manager_id)
    if params.is_active != None:
        query = query.filter(SchoolUnit.is_active == params.is_active)

    return query.order_by(SchoolUnit.name)

class SchoolUnitInterface(EntityInterface):
    create = SchoolUnitCreate
    get = SchoolUnitGet
    list = SchoolUnitList
    update = SchoolUnitUpdate
    query = SchoolUnitQuery
    search = school_unit_search
    endpoint = "units"
    model = SchoolUnit
    permission_category = "units"
    cache_ttl = 300
