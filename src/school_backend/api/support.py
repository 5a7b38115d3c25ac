from typing import Annotated
from fastapi import Depends, status
from sqlalchemy.orm import Session
from aiocache import BaseCache

from school_backend.api.api_builder import CrudRouter, clear_entity_cache
from school_backend.api.exceptions import NotFoundException
from school_backend.database import get_db
from school_backend.interface.support import (
    SupportTicketCreate, SupportTicketGet, SupportTicketInterface,
    SupportTicketResponseCreate, SupportTicketResponseGet
)
from school_backend.model.support import SupportTicket
from school_backend.permissions.auth import get_current_permissions
from school_backend.permissions.core import check_permissions, require_permission
from school_backend.permissions.principal import Principal
from school_backend.redis_cache import get_redis_client
from school_backend.services.support import add_response, open_ticket

class SupportTicketRouter(CrudRouter):
    """CrudRouter whose create route files the ticket under the caller."""

    def create(self):
        async def route(permissions: Annotated[Principal, Depends(get_current_permissions)], entity: SupportTicketCreate, cache: Annotated[BaseCache, Depends(get_redis_client)], db: Session = Depends(get_db)) -> SupportTicketGet:
            if not permissions.is_admin:
                require_permission(permissions, "create_support")

            ticket = open_ticket(permissions.user_id, entity.model_dump(exclude_unset=True), db)

            await clear_entity_cache(cache, self.namespace)

            return SupportTicketGet.model_validate(ticket, from_attributes=True)
        return route

support_router = SupportTicketRouter(SupportTicketInterface)

@support_router.router.post("/{ticket_id}/responses", response_model=SupportTicketResponseGet, status_code=status.HTTP_201_CREATED)
async def post_ticket_response(
    permissions: Annotated[Principal, Depends(get_current_permissions)],
    ticket_id: str,
    payload: SupportTicketResponseCreate,
    cache: Annotated[BaseCache, Depends(get_redis_client)],
    db: Session = Depends(get_db)
):
    # Tickets the caller cannot read are reported as missing
    ticket = check_permissions(permissions, SupportTicket, "get", db).filter(SupportTicket.id == ticket_id).first()
    if ticket is None:
        raise NotFoundException(detail=f"SupportTicket with id [{ticket_id}] not found")

    response = add_response(ticket, permissions.user_id, payload.message, db, from_support=permissions.is_admin)

    # Cached ticket details embed their responses
    await clear_entity_cache(cache, support_router.namespace)

    return response
