"""
Test utilities shared across the test suite.
"""

from uuid import uuid4
from unittest.mock import MagicMock
from sqlalchemy.orm import Session

from school_backend.permissions.catalog import ROLE_BASELINES, RoleName
from school_backend.permissions.principal import Principal


def create_mock_db():
    """Create a mock database session with common query patterns."""
    db = MagicMock(spec=Session)

    query_mock = MagicMock()
    query_mock.filter.return_value = query_mock
    query_mock.join.return_value = query_mock
    query_mock.outerjoin.return_value = query_mock
    query_mock.order_by.return_value = query_mock
    query_mock.limit.return_value = query_mock
    query_mock.offset.return_value = query_mock
    query_mock.first.return_value = None
    query_mock.all.return_value = []
    query_mock.count.return_value = 0

    db.query = MagicMock(return_value=query_mock)
    return db


def make_principal(role: str = None, permissions=None, user_id: str = None) -> Principal:
    """Principal with the baseline of a role unless permissions are given."""
    if permissions is None:
        role_name = RoleName(role) if role else None
        permissions = set(ROLE_BASELINES.get(role_name, set()))
    return Principal(user_id=user_id or str(uuid4()), role=role, permissions=set(permissions))
