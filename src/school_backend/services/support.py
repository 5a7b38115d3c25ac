"""
Support tickets.

Tickets belong to the user who opened them. Only administrators see every
ticket; everyone else works with their own, and replies written by an
administrator are flagged as coming from support.
"""

import logging
from sqlalchemy import exc
from sqlalchemy.orm import Session

from school_backend.api.exceptions import integrity_error_to_http_exception
from school_backend.model.support import SupportTicket, SupportTicketResponse

logger = logging.getLogger(__name__)


def _save(db: Session, item):
    try:
        db.add(item)
        db.commit()
        db.refresh(item)
    except exc.IntegrityError as e:
        db.rollback()
        raise integrity_error_to_http_exception(e)
    return item


def open_ticket(user_id: str, data: dict, db: Session) -> SupportTicket:

    ticket = _save(db, SupportTicket(**data, user_id=user_id))

    logger.info(f"Support ticket {ticket.id} opened by {user_id}")

    return ticket


def add_response(ticket: SupportTicket, user_id: str, message: str, db: Session, from_support: bool = False) -> SupportTicketResponse:

    return _save(db, SupportTicketResponse(
        ticket_id=ticket.id,
        user_id=user_id,
        message=message,
        is_from_support=from_support
    ))
