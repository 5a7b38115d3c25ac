"""
Pytest configuration and fixtures for all tests.
"""

import os
import sys
import pytest
from uuid import uuid4
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Secrets must be present before settings are imported
os.environ.setdefault("TOKEN_SECRET", "MDEyMzQ1Njc4OWFiY2RlZjAxMjM0NTY3ODlhYmNkZWY=")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.pop("REDIS_HOST", None)

# Ensure school_backend is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from aiocache import Cache
from fastapi.testclient import TestClient

from school_backend.database import Database
from school_backend.model import Base
from school_backend.model.auth import User
from school_backend.permissions.core import initialize_permission_handlers
from school_backend.permissions.principal import Principal


@pytest.fixture(scope="session", autouse=True)
def permission_handlers():
    initialize_permission_handlers()


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def database(engine):
    return Database("sqlite://", engine=engine)


@pytest.fixture
def session(engine):
    """Create a new database session for a test."""
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def system_data(session):
    """Permission catalog and system roles."""
    from school_backend.scripts.initialize_system_data import initialize_system_data
    initialize_system_data(session)
    return session


@pytest.fixture
def create_user(session):
    def _create_user(email: str = None, role: str = "student", password: str = None, is_active: bool = True) -> User:
        from school_backend.interface.tokens import encrypt_password
        user = User(
            email=email or f"{uuid4().hex[:8]}@school.com",
            first_name="Test",
            last_name=role.capitalize(),
            role=role,
            password=encrypt_password(password) if password else None,
            is_active=is_active
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
    return _create_user


@pytest.fixture
def app(database):
    from school_backend.redis_cache import get_redis_client
    from school_backend.server import app

    cache = Cache(Cache.MEMORY)

    async def _get_cache():
        return cache

    app.state.database = database
    app.dependency_overrides[get_redis_client] = _get_cache

    yield app

    app.dependency_overrides.clear()
    app.state.database = None


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def as_principal(app):
    """Authenticate every following request as the given principal."""
    from school_backend.permissions.auth import get_current_permissions

    def _as_principal(principal: Principal) -> Principal:
        app.dependency_overrides[get_current_permissions] = lambda: principal
        return principal

    return _as_principal
