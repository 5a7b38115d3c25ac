import logging
from typing import Any, Optional
from fastapi import HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session
from sqlalchemy import exc
from sqlalchemy.exc import StatementError
from school_backend.api.exceptions import (
    BadRequestException, ForbiddenException, NotFoundException, InternalServerException,
    integrity_error_to_http_exception
)
from school_backend.permissions.core import check_permissions
from school_backend.permissions.handlers import permission_registry
from school_backend.permissions.principal import Principal
from school_backend.interface.base import EntityInterface, ListQuery

logger = logging.getLogger(__name__)

def check_write(permissions: Principal, db_type: Any, action: str, data: dict, current: Any = None):

    if permissions.is_admin:
        return

    handler = permission_registry.get_handler(db_type)
    if handler is not None:
        handler.check_write(permissions, action, data, current)

async def create_db(permissions: Principal, db: Session, entity: BaseModel, interface: EntityInterface):

    db_type = interface.model

    model_dump = entity.model_dump(exclude_unset=True)

    # Authorization for create
    if not permissions.is_admin:
        handler = permission_registry.get_handler(db_type)

        if handler is None:
            # No handler registered: admin-only
            raise ForbiddenException(detail={"entity": db_type.__tablename__})

        if not handler.can_perform_action(permissions, "create"):
            raise ForbiddenException(detail={"entity": db_type.__tablename__, "action": "create"})

        handler.check_write(permissions, "create", model_dump)

    if interface.pre_create != None:
        model_dump = interface.pre_create(model_dump, db) or model_dump

    try:
        db_item = db_type(**model_dump)

        db.add(db_item)
        db.commit()
        db.refresh(db_item)

    except exc.IntegrityError as e:
        db.rollback()
        raise integrity_error_to_http_exception(e)

    except exc.SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error in create_db: {e}")
        raise BadRequestException(detail=str(e.args))

    return interface.get.model_validate(db_item, from_attributes=True)

async def get_id_db(permissions: Principal, db: Session, id: str, interface: EntityInterface, scope: str = "get"):

    db_type = interface.model

    query = check_permissions(permissions,db_type,scope,db)

    try:
        item = query.filter(db_type.id == id).first()

        if item == None:
            raise NotFoundException(detail=f"{db_type.__name__} with id [{id}] not found")

        return interface.get.model_validate(item,from_attributes=True)

    except HTTPException as e:
        raise e

    except StatementError as e:
        raise BadRequestException(detail=str(e.args))

async def list_db(permissions: Principal, db: Session, params: ListQuery, interface: EntityInterface):

    db_type = interface.model
    query_func = interface.search

    query = check_permissions(permissions,db_type,"list",db)

    query = query_func(db, query, params)

    total = query.order_by(None).count()

    if params.limit != None:
        query = query.limit(params.limit)
    if params.skip != None:
        query = query.offset(params.skip)

    query_result = [interface.list.model_validate(entity,from_attributes=True) for entity in query.all()]

    return query_result, total

def update_db(permissions: Principal, db: Session, id: Optional[str], entity: Any, interface: EntityInterface, db_item = None):

    db_type = interface.model

    if id != None:

        query = check_permissions(permissions,db_type,"update",db)

        db_item = query.filter(db_type.id == id).first()

        if db_item == None:
            raise NotFoundException(detail=f"{db_type.__name__} with id [{id}] not found")

    if isinstance(entity,BaseModel):
        entity = entity.model_dump(exclude_unset=True)

    check_write(permissions, db_type, "update", entity, db_item)

    if interface.pre_update != None:
        entity = interface.pre_update(entity, db, db_item) or entity

    try:
        for key, attr in entity.items():
            setattr(db_item, key, attr)

        db.commit()
        db.refresh(db_item)

    except exc.IntegrityError as e:
        db.rollback()
        raise integrity_error_to_http_exception(e)

    except exc.SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error in update_db: {e}")
        raise BadRequestException(detail=str(e.args))

    return interface.get.model_validate(db_item, from_attributes=True)

def delete_db(permissions: Principal, db: Session, id: str, db_type: Any):

    query = check_permissions(permissions,db_type,"delete",db)

    entity = query.filter(db_type.id == id).first()

    if not entity:
        raise NotFoundException(detail=f"{db_type.__name__} not found")

    check_write(permissions, db_type, "delete", {}, entity)

    try:
        db.delete(entity)
        db.commit()
    except exc.IntegrityError as e:
        db.rollback()
        error_msg = str(e.orig) if hasattr(e, 'orig') else str(e)

        if 'ForeignKeyViolation' in error_msg or 'foreign key constraint' in error_msg.lower():
            raise BadRequestException(
                detail=f"Cannot delete this {db_type.__tablename__.replace('_', ' ')} because other records depend on it. Please remove all references to this item first."
            )
        raise BadRequestException(
            detail=f"Cannot delete this item due to data integrity constraints. Error: {error_msg.split('DETAIL:')[0]}"
        )
    except exc.SQLAlchemyError as e:
        db.rollback()
        logger.error(f"SQLAlchemyError in delete_db: {e}")
        raise InternalServerException(detail="An unexpected database error occurred while deleting.")

    return {"ok": True}
