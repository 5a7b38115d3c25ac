from datetime import datetime, timezone
from uuid import uuid4
from sqlalchemy import JSON, Column, DateTime, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base

Base = declarative_base()
metadata = Base.metadata

# JSONB on PostgreSQL, plain JSON elsewhere (sqlite test databases)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def generate_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def id_column():
    return Column(String(36), primary_key=True, default=generate_id)


def created_at_column():
    return Column(DateTime(True), nullable=False, default=utcnow, server_default=func.now())


def updated_at_column():
    return Column(DateTime(True), nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow)
