"""
Bearer token authentication and principal construction.

Tokens are HS256 JWTs carrying the user id in ``sub``. Every request
rebuilds (or fetches from cache) the caller's Principal with its resolved
permission names.
"""

import datetime
import hashlib
import hmac
import json
import logging
from typing import Annotated, Optional
from jose import jwt, JWTError
from sqlalchemy.orm import Session
from fastapi import Depends, Request
from fastapi.security.utils import get_authorization_scheme_param

from school_backend.database import get_db
from school_backend.interface.tokens import decrypt_password
from school_backend.model.auth import User
from school_backend.api.exceptions import UnauthorizedException
from school_backend.redis_cache import get_redis_client
from school_backend.settings import settings
from school_backend.permissions.principal import Principal
from school_backend.permissions.resolver import resolve_effective_permissions
from aiocache import BaseCache

logger = logging.getLogger(__name__)

# Configuration
AUTH_CACHE_TTL = 10  # seconds
PRINCIPAL_CACHE_NAMESPACE = "principal"


class AuthenticationService:
    """Service for password login and token handling"""

    @staticmethod
    def authenticate_password(email: str, password: str, db: Session) -> User:
        """Authenticate using email and password"""

        user = db.query(User).filter(User.email == email).first()

        if user is None or user.password is None:
            logger.warning(f"Login failed for unknown email {email}")
            raise UnauthorizedException("Invalid credentials")

        if not user.is_active:
            logger.warning(f"Login attempt for inactive user {user.id}")
            raise UnauthorizedException("Account is inactive")

        try:
            stored_password = decrypt_password(user.password)
        except Exception as e:
            logger.error(f"Stored password of user {user.id} could not be decrypted: {e}")
            raise UnauthorizedException("Invalid credentials")

        if not hmac.compare_digest(password.encode(), stored_password.encode()):
            logger.warning(f"Login failed for user {user.id}")
            raise UnauthorizedException("Invalid credentials")

        return user

    @staticmethod
    def create_access_token(user: User, now: Optional[datetime.datetime] = None) -> str:
        now = now or datetime.datetime.now(datetime.timezone.utc)
        claims = {
            "sub": user.id,
            "email": user.email,
            "role": user.role,
            "iat": int(now.timestamp()),
            "exp": int((now + datetime.timedelta(hours=settings.JWT_EXPIRE_HOURS)).timestamp()),
        }
        return jwt.encode(claims, settings.jwt_secret, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def decode_access_token(token: str) -> dict:
        try:
            claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.JWT_ALGORITHM])
        except JWTError as e:
            logger.warning(f"Rejected bearer token: {e}")
            raise UnauthorizedException("Invalid or expired token")

        if not claims.get("sub"):
            raise UnauthorizedException("Invalid token payload")

        return claims


class PrincipalBuilder:
    """Builder for creating Principal objects with resolved permissions"""

    @staticmethod
    def build(user_id: str, db: Session) -> Principal:
        """Build a Principal for a stored user"""

        user = db.query(User).filter(User.id == user_id).first()

        if user is None or not user.is_active:
            raise UnauthorizedException("User not found")

        permissions = resolve_effective_permissions(user.id, db, role=user.role)

        return Principal(
            user_id=user.id,
            role=user.role,
            permissions=permissions
        )

    @staticmethod
    async def build_with_cache(user_id: str, cache_key: str, db: Session, cache: BaseCache) -> Principal:
        """Build Principal with caching support"""

        try:
            cached_data = await cache.get(cache_key)
            if cached_data:
                logger.debug(f"Principal cache hit for {cache_key}")
                return Principal.model_validate(json.loads(cached_data))
        except Exception as e:
            logger.warning(f"Cache retrieval error: {e}")

        principal = PrincipalBuilder.build(user_id, db)

        try:
            await cache.set(cache_key, principal.model_dump_json(), ttl=AUTH_CACHE_TTL)
            logger.debug(f"Cached Principal for {cache_key}")
        except Exception as e:
            logger.warning(f"Cache storage error: {e}")

        return principal


def principal_cache_key(token: str) -> str:
    return f"{PRINCIPAL_CACHE_NAMESPACE}:" + hashlib.sha256(token.encode()).hexdigest()


def parse_authorization_header(request: Request) -> str:
    """Extract the bearer token from the Authorization header"""

    authorization = request.headers.get("Authorization")
    if not authorization:
        raise UnauthorizedException("No authorization provided")

    scheme, param = get_authorization_scheme_param(authorization)

    if scheme.lower() != "bearer" or not param:
        raise UnauthorizedException("Invalid authorization format")

    return param


async def get_current_principal(
    token: Annotated[str, Depends(parse_authorization_header)],
    cache: Annotated[BaseCache, Depends(get_redis_client)],
    db: Session = Depends(get_db)
) -> Principal:
    """Main dependency for getting the current authenticated principal."""

    claims = AuthenticationService.decode_access_token(token)

    return await PrincipalBuilder.build_with_cache(claims["sub"], principal_cache_key(token), db, cache)


get_current_permissions = get_current_principal
