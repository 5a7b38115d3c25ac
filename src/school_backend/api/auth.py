from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from aiocache import BaseCache

from school_backend.api.exceptions import NotFoundException
from school_backend.database import get_db
from school_backend.interface.auth import LoginRequest, LoginResponse
from school_backend.interface.permissions import EffectivePermissions
from school_backend.interface.users import UserGet
from school_backend.model.auth import User
from school_backend.permissions.auth import (
    AuthenticationService, get_current_permissions, parse_authorization_header, principal_cache_key
)
from school_backend.permissions.principal import Principal
from school_backend.redis_cache import get_redis_client
from school_backend.settings import settings
import logging

logger = logging.getLogger(__name__)

auth_router = APIRouter()

@auth_router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):

    user = AuthenticationService.authenticate_password(payload.email, payload.password, db)
    token = AuthenticationService.create_access_token(user)

    logger.info(f"User {user.id} logged in")

    return LoginResponse(
        token=token,
        expires_in=settings.JWT_EXPIRE_HOURS * 3600,
        user=UserGet.model_validate(user, from_attributes=True)
    )

@auth_router.get("/user", response_model=UserGet)
def get_current_user(permissions: Annotated[Principal, Depends(get_current_permissions)], db: Session = Depends(get_db)):
    """Get the current authenticated user"""

    user = db.query(User).filter(User.id == permissions.get_user_id_or_throw()).first()

    if user == None:
        raise NotFoundException()

    return user

@auth_router.get("/effective-permissions", response_model=EffectivePermissions)
def get_own_effective_permissions(permissions: Annotated[Principal, Depends(get_current_permissions)]):

    return EffectivePermissions(
        user_id=permissions.user_id,
        role=permissions.role,
        is_admin=permissions.is_admin,
        permissions=sorted(permissions.permissions)
    )

@auth_router.post("/logout")
async def logout(
    permissions: Annotated[Principal, Depends(get_current_permissions)],
    token: Annotated[str, Depends(parse_authorization_header)],
    cache: Annotated[BaseCache, Depends(get_redis_client)]
):
    # Tokens are stateless, only the cached principal goes away
    try:
        await cache.delete(principal_cache_key(token))
    except Exception as e:
        logger.warning(f"Cache delete error on logout: {e}")

    return {"ok": True}
