from typing import Annotated
from fastapi import Depends
from sqlalchemy.orm import Session

from school_backend.api.api_builder import CrudRouter
from school_backend.api.exceptions import ForbiddenException
from school_backend.database import get_db
from school_backend.interface.users import UserInterface, UserSettingsGet, UserSettingsUpdate
from school_backend.permissions.auth import get_current_permissions
from school_backend.permissions.principal import Principal
from school_backend.services.user_settings import get_user_settings, update_user_settings

user_router = CrudRouter(UserInterface)

def _require_self_or_admin(permissions: Principal, user_id: str):
    if user_id != permissions.user_id and not permissions.is_admin:
        raise ForbiddenException(detail="Settings can only be managed by their owner")

@user_router.router.get("/{user_id}/settings", response_model=UserSettingsGet)
def get_user_settings_route(permissions: Annotated[Principal, Depends(get_current_permissions)], user_id: str, db: Session = Depends(get_db)):

    _require_self_or_admin(permissions, user_id)

    return get_user_settings(user_id, db)

@user_router.router.put("/{user_id}/settings", response_model=UserSettingsGet)
def put_user_settings_route(permissions: Annotated[Principal, Depends(get_current_permissions)], user_id: str, payload: UserSettingsUpdate, db: Session = Depends(get_db)):

    _require_self_or_admin(permissions, user_id)

    return update_user_settings(user_id, payload.model_dump(exclude_unset=True, exclude_none=True), db)
