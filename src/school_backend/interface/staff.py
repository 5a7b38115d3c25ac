from datetime import date
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from sqlalchemy.orm import Session
from school_backend.interface.base import BaseEntityGet, BaseEntityList, EntityInterface, ListQuery
from school_backend.model.school import Staff

class StaffCreate(BaseModel):
    user_id: str = Field(description="User account of the staff member")
    unit_id: Optional[str] = Field(None, description="School unit the member works at")
    position: str = Field(min_length=1, max_length=255, description="Job position")
    department: Optional[str] = Field(None, max_length=255)
    salary: Optional[Decimal] = Field(None, ge=0)
    hire_date: Optional[date] = None
    is_active: Optional[bool] = None

    model_config = ConfigDict(extra='forbid')

class StaffGet(BaseEntityGet):
    id: str
    user_id: str
    unit_id: Optional[str] = None
    position: str
    department: Optional[str] = None
    salary: Optional[Decimal] = None
    hire_date: Optional[date] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class StaffList(BaseEntityList):
    id: str
    user_id: str
    unit_id: Optional[str] = None
    position: str
    department: Optional[str] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class StaffUpdate(BaseModel):
    unit_id: Optional[str] = None
    position: Optional[str] = Field(None, min_length=1, max_length=255)
    department: Optional[str] = None
    salary: Optional[Decimal] = Field(None, ge=0)
    hire_date: Optional[date] = None
    is_active: Optional[bool] = None

    model_config = ConfigDict(extra='forbid')

class StaffQuery(ListQuery):
    id: Optional[str] = None
    user_id: Optional[str] = None
    unit_id: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    is_active: Optional[bool] = None

def staff_search(db: Session, query, params: Optional[StaffQuery]):

    if params.id != None:
        query = query.filter(Staff.id == params.id)
    if params.user_id != None:
        query = query.filter(Staff.user_id == params.user_id)
    if params.unit_id != None:
        query = query.filter(Staff.unit_id == params.unit_id)
    if params.position != None:
        query = query.filter(Staff.position == params.position)
    if params.department != None:
        query = query.filter(Staff.department == params.department)
    if params.is_active != None:
        query = query.filter(Staff.is_active == params.is_active)

    return query

class StaffInterface(EntityInterface):
    create = StaffCreate
    get = StaffGet
    list = StaffList
    update = StaffUpdate
    query = StaffQuery
    search = staff_search
    endpoint = "staff"
    model = Staff
    permission_category = "staff"
