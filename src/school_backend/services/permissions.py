"""
Writes to role baselines and per-user overrides.

Both replace the complete set in one transaction: existing rows are deleted
and the payload is inserted, or nothing changes.
"""

import logging
from typing import Iterable, List, Tuple
from sqlalchemy import exc
from sqlalchemy.orm import Session

from school_backend.api.exceptions import (
    ForbiddenException, ValidationException, integrity_error_to_http_exception
)
from school_backend.model.auth import Permission, Role, RolePermission, User, UserPermission
from school_backend.permissions.catalog import RoleName
from school_backend.services.curriculum import require_entity

logger = logging.getLogger(__name__)


def _invalid_permission_ids(permission_ids: Iterable[str], db: Session) -> List[str]:
    requested = set(permission_ids)
    if not requested:
        return []
    known = {row[0] for row in db.query(Permission.id).filter(Permission.id.in_(requested)).all()}
    return sorted(requested - known)


def replace_role_permissions(role_id: str, permission_ids: List[str], db: Session) -> Role:
    role = require_entity(db, Role, role_id)

    if role.name == RoleName.admin.value:
        raise ForbiddenException(detail="The admin role always holds every permission and cannot be edited")

    invalid_ids = _invalid_permission_ids(permission_ids, db)
    if invalid_ids:
        raise ValidationException(detail={"message": "Unknown permission ids", "invalid_ids": invalid_ids})

    try:
        db.query(RolePermission).filter(RolePermission.role_id == role_id).delete(synchronize_session=False)
        for permission_id in dict.fromkeys(permission_ids):
            db.add(RolePermission(role_id=role_id, permission_id=permission_id))
        db.commit()
    except exc.IntegrityError as e:
        db.rollback()
        raise integrity_error_to_http_exception(e)

    db.refresh(role)
    logger.info(f"Replaced baseline of role {role.name} with {len(set(permission_ids))} permissions")
    return role


def replace_user_overrides(user_id: str, overrides: List[Tuple[str, bool]], db: Session) -> User:
    """Replace all overrides of a user with (permission_id, is_granted) pairs.

    A permission listed both as grant and deny is rejected, so a stored
    user never holds both for the same permission.
    """
    user = require_entity(db, User, user_id)

    decisions = {}
    conflicting = set()
    for permission_id, is_granted in overrides:
        if permission_id in decisions and decisions[permission_id] != is_granted:
            conflicting.add(permission_id)
        decisions[permission_id] = is_granted

    if conflicting:
        raise ValidationException(detail={
            "message": "A permission cannot be granted and denied at the same time",
            "permission_ids": sorted(conflicting)
        })

    invalid_ids = _invalid_permission_ids(decisions.keys(), db)
    if invalid_ids:
        raise ValidationException(detail={"message": "Unknown permission ids", "invalid_ids": invalid_ids})

    try:
        db.query(UserPermission).filter(UserPermission.user_id == user_id).delete(synchronize_session=False)
        for permission_id, is_granted in decisions.items():
            db.add(UserPermission(user_id=user_id, permission_id=permission_id, is_granted=is_granted))
        db.commit()
    except exc.IntegrityError as e:
        db.rollback()
        raise integrity_error_to_http_exception(e)

    db.refresh(user)
    logger.info(f"Replaced permission overrides of user {user_id} ({len(decisions)} rows)")
    return user


def list_user_overrides(user_id: str, db: Session) -> List[Tuple[UserPermission, str]]:
    require_entity(db, User, user_id)

    return (
        db.query(UserPermission, Permission.name)
        .join(Permission, Permission.id == UserPermission.permission_id)
        .filter(UserPermission.user_id == user_id)
        .order_by(Permission.name)
        .all()
    )


def list_role_permissions(role_id: str, db: Session) -> Tuple[Role, List[Permission]]:
    role = require_entity(db, Role, role_id)

    permissions = (
        db.query(Permission)
        .join(RolePermission, RolePermission.permission_id == Permission.id)
        .filter(RolePermission.role_id == role_id)
        .order_by(Permission.category, Permission.name)
        .all()
    )
    return role, permissions
