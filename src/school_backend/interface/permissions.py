from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from sqlalchemy.orm import Session
from school_backend.interface.base import BaseEntityGet, EntityInterface, ListQuery
from school_backend.model.auth import Permission, PermissionCategory, Role

class PermissionCategoryGet(BaseEntityGet):
    id: str
    name: str
    display_name: str
    description: Optional[str] = None
    is_system_category: bool
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class PermissionGet(BaseEntityGet):
    id: str
    name: str
    display_name: str
    description: Optional[str] = None
    category_id: Optional[str] = None
    category: Optional[str] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class PermissionQuery(ListQuery):
    name: Optional[str] = None
    category: Optional[str] = None
    is_active: Optional[bool] = None

    limit: Optional[int] = 500

def permission_search(db: Session, query, params: Optional[PermissionQuery]):

    if params.name != None:
        query = query.filter(Permission.name == params.name)
    if params.category != None:
        query = query.filter(Permission.category == params.category)
    if params.is_active != None:
        query = query.filter(Permission.is_active == params.is_active)

    return query.order_by(Permission.category, Permission.name)

class PermissionInterface(EntityInterface):
    get = PermissionGet
    list = PermissionGet
    query = PermissionQuery
    search = permission_search
    endpoint = "permissions/catalog"
    model = Permission
    permission_category = "permissions"
    cache_ttl = 300

class PermissionCategoryQuery(ListQuery):
    name: Optional[str] = None

def permission_category_search(db: Session, query, params: Optional[PermissionCategoryQuery]):

    if params.name != None:
        query = query.filter(PermissionCategory.name == params.name)

    return query.order_by(PermissionCategory.name)

class PermissionCategoryInterface(EntityInterface):
    get = PermissionCategoryGet
    list = PermissionCategoryGet
    query = PermissionCategoryQuery
    search = permission_category_search
    endpoint = "permissions/categories"
    model = PermissionCategory
    permission_category = "permissions"
    cache_ttl = 300

class RoleGet(BaseEntityGet):
    id: str
    name: str
    display_name: str
    description: Optional[str] = None
    is_system_role: bool

    model_config = ConfigDict(from_attributes=True)

class RoleQuery(ListQuery):
    name: Optional[str] = None

def role_search(db: Session, query, params: Optional[RoleQuery]):

    if params.name != None:
        query = query.filter(Role.name == params.name)

    return query.order_by(Role.name)

class RoleInterface(EntityInterface):
    get = RoleGet
    list = RoleGet
    query = RoleQuery
    search = role_search
    endpoint = "permissions/roles"
    model = Role
    permission_category = "permissions"
    cache_ttl = 300

class RolePermissionsGet(BaseModel):
    role: RoleGet
    permissions: List[PermissionGet]

class RolePermissionsUpdate(BaseModel):
    permission_ids: List[str] = Field(description="Complete baseline of the role")

    model_config = ConfigDict(extra='forbid')

class UserPermissionOverride(BaseModel):
    permission_id: str
    is_granted: bool = Field(description="True grants, False denies the permission")

    model_config = ConfigDict(extra='forbid')

class UserPermissionOverrideGet(UserPermissionOverride):
    permission_name: str

class UserPermissionOverridesUpdate(BaseModel):
    overrides: List[UserPermissionOverride] = Field(description="Complete set of overrides of the user")

    model_config = ConfigDict(extra='forbid')

class UserPermissionsGet(BaseModel):
    user_id: str
    role: Optional[str] = None
    overrides: List[UserPermissionOverrideGet]
    effective_permissions: List[str]

class EffectivePermissions(BaseModel):
    user_id: Optional[str] = None
    role: Optional[str] = None
    is_admin: bool
    permissions: List[str]
