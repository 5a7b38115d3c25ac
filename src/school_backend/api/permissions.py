from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from aiocache import BaseCache

from school_backend.api.api_builder import clear_entity_cache
from school_backend.database import get_db
from school_backend.interface.permissions import (
    EffectivePermissions,
    PermissionGet,
    RoleGet,
    RolePermissionsGet,
    RolePermissionsUpdate,
    UserPermissionOverrideGet,
    UserPermissionOverridesUpdate,
    UserPermissionsGet,
)
from school_backend.model.auth import User
from school_backend.permissions.auth import PRINCIPAL_CACHE_NAMESPACE, get_current_permissions
from school_backend.permissions.core import require_admin, require_permission
from school_backend.permissions.principal import Principal
from school_backend.permissions.resolver import resolve_effective_permissions
from school_backend.redis_cache import get_redis_client
from school_backend.services.curriculum import require_entity
from school_backend.services.permissions import (
    list_role_permissions, list_user_overrides, replace_role_permissions, replace_user_overrides
)

permissions_router = APIRouter()

def _role_permissions_response(role_id: str, db: Session) -> RolePermissionsGet:
    role, permissions = list_role_permissions(role_id, db)

    return RolePermissionsGet(
        role=RoleGet.model_validate(role, from_attributes=True),
        permissions=[PermissionGet.model_validate(p, from_attributes=True) for p in permissions]
    )

def _user_permissions_response(user: User, db: Session) -> UserPermissionsGet:
    overrides = [
        UserPermissionOverrideGet(
            permission_id=override.permission_id,
            is_granted=override.is_granted,
            permission_name=name
        )
        for override, name in list_user_overrides(user.id, db)
    ]

    return UserPermissionsGet(
        user_id=user.id,
        role=user.role,
        overrides=overrides,
        effective_permissions=sorted(resolve_effective_permissions(user.id, db, role=user.role))
    )

@permissions_router.get("/roles/{role_id}/permissions", response_model=RolePermissionsGet)
def get_role_permissions(permissions: Annotated[Principal, Depends(get_current_permissions)], role_id: str, db: Session = Depends(get_db)):

    require_permission(permissions, "read_permissions")

    return _role_permissions_response(role_id, db)

@permissions_router.put("/roles/{role_id}/permissions", response_model=RolePermissionsGet)
async def put_role_permissions(
    permissions: Annotated[Principal, Depends(get_current_permissions)],
    role_id: str,
    payload: RolePermissionsUpdate,
    cache: Annotated[BaseCache, Depends(get_redis_client)],
    db: Session = Depends(get_db)
):
    require_admin(permissions)

    replace_role_permissions(role_id, payload.permission_ids, db)

    await clear_entity_cache(cache, PRINCIPAL_CACHE_NAMESPACE)

    return _role_permissions_response(role_id, db)

@permissions_router.get("/users/{user_id}", response_model=UserPermissionsGet)
def get_user_permissions(permissions: Annotated[Principal, Depends(get_current_permissions)], user_id: str, db: Session = Depends(get_db)):

    if user_id != permissions.user_id:
        require_permission(permissions, "read_permissions")

    user = require_entity(db, User, user_id)

    return _user_permissions_response(user, db)

@permissions_router.put("/users/{user_id}", response_model=UserPermissionsGet)
async def put_user_permissions(
    permissions: Annotated[Principal, Depends(get_current_permissions)],
    user_id: str,
    payload: UserPermissionOverridesUpdate,
    cache: Annotated[BaseCache, Depends(get_redis_client)],
    db: Session = Depends(get_db)
):
    require_admin(permissions)

    user = replace_user_overrides(
        user_id,
        [(override.permission_id, override.is_granted) for override in payload.overrides],
        db
    )

    await clear_entity_cache(cache, PRINCIPAL_CACHE_NAMESPACE)

    return _user_permissions_response(user, db)

@permissions_router.get("/effective/{user_id}", response_model=EffectivePermissions)
def get_effective_permissions(permissions: Annotated[Principal, Depends(get_current_permissions)], user_id: str, db: Session = Depends(get_db)):

    if user_id != permissions.user_id:
        require_permission(permissions, "read_permissions")

    user = require_entity(db, User, user_id)
    resolved = Principal(user_id=user.id, role=user.role, permissions=resolve_effective_permissions(user.id, db, role=user.role))

    return EffectivePermissions(
        user_id=resolved.user_id,
        role=resolved.role,
        is_admin=resolved.is_admin,
        permissions=sorted(resolved.permissions)
    )
