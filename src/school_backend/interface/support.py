import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from sqlalchemy.orm import Session
from school_backend.interface.base import BaseEntityGet, BaseEntityList, EntityInterface, ListQuery
from school_backend.model.auth import User
from school_backend.model.support import SupportTicket
from school_backend.services.curriculum import require_entity

class TicketPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"

class TicketStatus(str, Enum):
    open = "open"
    in_progress = "in_progress"
    resolved = "resolved"
    closed = "closed"

class SupportTicketCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    category: str = Field(min_length=1, max_length=64, description="Free form topic, e.g. technical or billing")
    priority: Optional[TicketPriority] = None

    model_config = ConfigDict(use_enum_values=True, extra='forbid')

class SupportTicketResponseCreate(BaseModel):
    message: str = Field(min_length=1)

    model_config = ConfigDict(extra='forbid')

class SupportTicketResponseGet(BaseModel):
    id: str
    ticket_id: str
    user_id: str
    message: str
    is_from_support: bool
    created_at: Optional[datetime.datetime] = None

    model_config = ConfigDict(from_attributes=True)

class SupportTicketList(BaseEntityList):
    id: str
    title: str
    category: str
    priority: TicketPriority
    status: TicketStatus
    user_id: str
    assigned_to: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

class SupportTicketGet(BaseEntityGet):
    id: str
    title: str
    description: str
    category: str
    priority: TicketPriority
    status: TicketStatus
    user_id: str
    assigned_to: Optional[str] = None
    responses: List[SupportTicketResponseGet] = []

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

class SupportTicketUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, min_length=1, max_length=64)
    priority: Optional[TicketPriority] = None
    status: Optional[TicketStatus] = None
    assigned_to: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True, extra='forbid')

class SupportTicketQuery(ListQuery):
    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
    user_id: Optional[str] = None
    assigned_to: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)

def support_ticket_search(db: Session, query, params: Optional[SupportTicketQuery]):

    if params.status != None:
        query = query.filter(SupportTicket.status == params.status)
    if params.priority != None:
        query = query.filter(SupportTicket.priority == params.priority)
    if params.user_id != None:
        query = query.filter(SupportTicket.user_id == params.user_id)
    if params.assigned_to != None:
        query = query.filter(SupportTicket.assigned_to == params.assigned_to)

    return query.order_by(SupportTicket.created_at.desc())

def validate_ticket_update(data: dict, db: Session, current: Optional[SupportTicket] = None) -> dict:
    if data.get("assigned_to") is not None:
        require_entity(db, User, data["assigned_to"], "User")
    return data

class SupportTicketInterface(EntityInterface):
    create = SupportTicketCreate
    get = SupportTicketGet
    list = SupportTicketList
    update = SupportTicketUpdate
    query = SupportTicketQuery
    search = support_ticket_search
    endpoint = "support/tickets"
    model = SupportTicket
    permission_category = "support"
    pre_update = validate_ticket_update
