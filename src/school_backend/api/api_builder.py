import hashlib
import json
import logging
from typing import Annotated, Optional
from aiocache import BaseCache
from fastapi import APIRouter, Depends, FastAPI, Response, status
from sqlalchemy.orm import Session

from school_backend.api.crud import create_db, get_id_db, list_db, update_db, delete_db
from school_backend.database import get_db
from school_backend.interface.base import EntityInterface
from school_backend.permissions.auth import get_current_permissions
from school_backend.permissions.principal import Principal
from school_backend.redis_cache import get_redis_client

logger = logging.getLogger(__name__)

async def clear_entity_cache(cache: BaseCache, namespace: str):
    """Drop every cached entry stored under a namespace (a table name or "principal")."""
    try:
        await cache.clear(namespace=namespace)
    except Exception as e:
        # A stale cache entry expires on its own
        logger.warning(f"Cache clear error for {namespace}: {e}")

class CrudRouter:
    """Create/get/list/update/delete routes for one EntityInterface.

    GET and list responses are cached per user under the table name and the
    whole namespace is dropped on every write.
    """

    id_type = "id"

    path: str
    dto: EntityInterface

    def __init__(self, dto, endpoint: Optional[str] = None):
        self.dto = dto
        self.path = self.dto.endpoint if endpoint == None else endpoint
        self.router = APIRouter()

    @property
    def namespace(self) -> str:
        return self.dto.model.__tablename__

    def create(self):
        async def route(permissions: Annotated[Principal, Depends(get_current_permissions)], entity: self.dto.create, cache: Annotated[BaseCache, Depends(get_redis_client)], db: Session = Depends(get_db)) -> self.dto.get:
            entity_created = await create_db(permissions, db, entity, self.dto)

            await clear_entity_cache(cache, self.namespace)

            return entity_created
        return route

    def get(self):
        async def route(permissions: Annotated[Principal, Depends(get_current_permissions)], id: str, cache: Annotated[BaseCache, Depends(get_redis_client)], db: Session = Depends(get_db)) -> self.dto.get:
            cache_key = f"{self.namespace}:get:{permissions.user_id}:{id}"

            cached_result = await cache.get(cache_key)
            if cached_result:
                return self.dto.get.model_validate_json(cached_result)

            result = await get_id_db(permissions, db, id, self.dto)

            await cache.set(cache_key, result.model_dump_json(), ttl=self.dto.cache_ttl)

            return result
        return route

    def list(self):
        async def route(permissions: Annotated[Principal, Depends(get_current_permissions)], cache: Annotated[BaseCache, Depends(get_redis_client)], response: Response, params: self.dto.query = Depends(), db: Session = Depends(get_db)) -> list[self.dto.list]:
            params_hash = hashlib.sha256(params.model_dump_json(exclude_none=True).encode()).hexdigest()
            cache_key = f"{self.namespace}:list:{permissions.user_id}:{params_hash}"

            cached_result = await cache.get(cache_key)
            if cached_result:
                cached_data = json.loads(cached_result)
                response.headers["X-Total-Count"] = str(cached_data.get("total", 0))
                return [self.dto.list.model_validate(item) for item in cached_data.get("items", [])]

            list_result, total = await list_db(permissions, db, params, self.dto)
            response.headers["X-Total-Count"] = str(total)

            cache_data = {
                "items": [item.model_dump(mode='json') for item in list_result],
                "total": total
            }
            await cache.set(cache_key, json.dumps(cache_data), ttl=self.dto.cache_ttl)

            return list_result
        return route

    def update(self):
        async def route(permissions: Annotated[Principal, Depends(get_current_permissions)], id: str, entity: self.dto.update, cache: Annotated[BaseCache, Depends(get_redis_client)], db: Session = Depends(get_db)) -> self.dto.get:
            entity_updated = update_db(permissions, db, id, entity, self.dto)

            await clear_entity_cache(cache, self.namespace)

            return entity_updated
        return route

    def delete(self):
        async def route(permissions: Annotated[Principal, Depends(get_current_permissions)], id: str, cache: Annotated[BaseCache, Depends(get_redis_client)], db: Session = Depends(get_db)):
            delete_db(permissions, db, id, self.dto.model)

            await clear_entity_cache(cache, self.namespace)

            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return route

    def register_routes(self, app: FastAPI | APIRouter):

        scope_name = self.path.replace("/"," ").replace("-"," ")
        item_path = f"/{{{CrudRouter.id_type}}}"
        dependencies = [Depends(get_current_permissions)]

        self.router.add_api_route("", self.create(), methods=["POST"], status_code=status.HTTP_201_CREATED,
                    name=f"create {scope_name}", dependencies=dependencies)
        self.router.add_api_route(item_path, self.get(), methods=["GET"], status_code=status.HTTP_200_OK,
                    name=f"get {scope_name}", dependencies=dependencies)
        self.router.add_api_route("", self.list(), methods=["GET"], status_code=status.HTTP_200_OK,
                    name=f"list {scope_name}", dependencies=dependencies)
        self.router.add_api_route(item_path, self.update(), methods=["PATCH"], status_code=status.HTTP_200_OK,
                    name=f"update {scope_name}", dependencies=dependencies)
        self.router.add_api_route(item_path, self.delete(), methods=["DELETE"], status_code=status.HTTP_204_NO_CONTENT,
                    name=f"delete {scope_name}", dependencies=dependencies)

        app.include_router(self.router, prefix=f"/{self.path}", tags=[scope_name])

        return self

class LookUpRouter:
    """Read-only get/list routes for catalog tables."""

    id_type = "id"

    path: str
    dto: EntityInterface

    def __init__(self, dto, endpoint: Optional[str] = None):
        self.dto = dto
        self.path = self.dto.endpoint if endpoint == None else endpoint
        self.router = APIRouter()

    def get(self):
        async def route(permissions: Annotated[Principal, Depends(get_current_permissions)], id: str, db: Session = Depends(get_db)) -> self.dto.get:
            return await get_id_db(permissions, db, id, self.dto)
        return route

    def list(self):
        async def route(permissions: Annotated[Principal, Depends(get_current_permissions)], response: Response, params: self.dto.query = Depends(), db: Session = Depends(get_db)) -> list[self.dto.list]:
            list_result, total = await list_db(permissions, db, params, self.dto)
            response.headers["X-Total-Count"] = str(total)
            return list_result
        return route

    def register_routes(self, app: FastAPI | APIRouter):

        scope_name = self.path.replace("/"," ").replace("-"," ")
        dependencies = [Depends(get_current_permissions)]

        self.router.add_api_route(f"/{{{LookUpRouter.id_type}}}", self.get(), methods=["GET"], status_code=status.HTTP_200_OK,
                    name=f"get {scope_name}", dependencies=dependencies)
        self.router.add_api_route("", self.list(), methods=["GET"], status_code=status.HTTP_200_OK,
                    name=f"list {scope_name}", dependencies=dependencies)

        app.include_router(self.router, prefix=f"/{self.path}", tags=[scope_name])

        return self
