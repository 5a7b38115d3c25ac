"""
Effective permission resolution.

A user's effective permissions are the baseline of their role with the
user's deny overrides removed and grant overrides added. The admin role
always resolves to the whole catalog and an unknown role resolves to an
empty baseline.
"""

import logging
from typing import Iterable, List, Optional, Set, Tuple
from sqlalchemy.orm import Session

from school_backend.api.exceptions import NotFoundException
from school_backend.model.auth import Permission, Role, RolePermission, User, UserPermission
from school_backend.permissions.catalog import ALL_PERMISSION_NAMES, RoleName, parse_role

logger = logging.getLogger(__name__)


def resolve_permissions(
    role,
    baseline: Iterable[str],
    overrides: Iterable[Tuple[str, bool]],
    catalog: Iterable[str] = ALL_PERMISSION_NAMES
) -> Set[str]:
    """Pure resolution step.

    Args:
        role: Role name of the user (anything outside RoleName fails closed)
        baseline: Permission names attached to the role
        overrides: (permission name, is_granted) pairs of the user
        catalog: Every known permission name, used for admin
    """

    role_name = parse_role(role)

    if role_name == RoleName.admin:
        return set(catalog)

    if role_name is None:
        effective: Set[str] = set()
    else:
        effective = set(baseline)

    denies = {name for name, is_granted in overrides if not is_granted}
    grants = {name for name, is_granted in overrides if is_granted}

    # grant wins if both ever slipped through for the same permission
    return (effective - denies) | grants


def db_get_role_baseline(role: Optional[str], db: Session) -> List[str]:
    if parse_role(role) is None:
        return []

    rows = (
        db.query(Permission.name)
        .join(RolePermission, RolePermission.permission_id == Permission.id)
        .join(Role, Role.id == RolePermission.role_id)
        .filter(Role.name == role, Permission.is_active == True)
        .all()
    )
    return [row[0] for row in rows]


def db_get_user_overrides(user_id: str, db: Session) -> List[Tuple[str, bool]]:
    rows = (
        db.query(Permission.name, UserPermission.is_granted)
        .join(UserPermission, UserPermission.permission_id == Permission.id)
        .filter(UserPermission.user_id == user_id, Permission.is_active == True)
        .all()
    )
    return [(name, bool(is_granted)) for name, is_granted in rows]


def db_get_catalog(db: Session) -> Set[str]:
    names = {row[0] for row in db.query(Permission.name).all()}
    return names | ALL_PERMISSION_NAMES


def resolve_effective_permissions(user_id: str, db: Session, role: Optional[str] = None) -> Set[str]:
    """Resolve the effective permission names of a stored user."""

    if role is None:
        user = db.query(User.role).filter(User.id == user_id).first()
        if user is None:
            raise NotFoundException(detail=f"User with id [{user_id}] not found")
        role = user[0]

    if parse_role(role) == RoleName.admin:
        return db_get_catalog(db)

    if parse_role(role) is None:
        logger.warning(f"User {user_id} has unknown role {role!r}, resolving to no permissions")

    return resolve_permissions(
        role,
        db_get_role_baseline(role, db),
        db_get_user_overrides(user_id, db)
    )
