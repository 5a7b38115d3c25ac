from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, String, Text, text
from sqlalchemy.orm import relationship

from .base import Base, id_column, created_at_column, updated_at_column


class SupportTicket(Base):
    __tablename__ = 'support_tickets'
    __table_args__ = (
        CheckConstraint("priority IN ('low', 'medium', 'high', 'urgent')", name='support_tickets_priority_check'),
        CheckConstraint("status IN ('open', 'in_progress', 'resolved', 'closed')", name='support_tickets_status_check'),
    )

    id = id_column()
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(64), nullable=False)
    priority = Column(String(16), nullable=False, default='medium', server_default=text("'medium'"))
    status = Column(String(16), nullable=False, default='open', server_default=text("'open'"))
    user_id = Column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    assigned_to = Column(ForeignKey('users.id', ondelete='SET NULL'))
    created_at = created_at_column()
    updated_at = updated_at_column()

    # Relationships
    user = relationship('User', foreign_keys=[user_id])
    assignee = relationship('User', foreign_keys=[assigned_to])
    responses = relationship(
        'SupportTicketResponse',
        back_populates='ticket',
        cascade='all, delete-orphan',
        order_by='SupportTicketResponse.created_at'
    )


class SupportTicketResponse(Base):
    __tablename__ = 'support_ticket_responses'

    id = id_column()
    ticket_id = Column(ForeignKey('support_tickets.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    message = Column(Text, nullable=False)
    is_from_support = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    created_at = created_at_column()

    ticket = relationship('SupportTicket', back_populates='responses')
    user = relationship('User')
