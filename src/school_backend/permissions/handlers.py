from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type
from sqlalchemy.orm import Session, Query
from school_backend.permissions.principal import Principal
from school_backend.api.exceptions import ForbiddenException
from school_backend.interface.base import ACTIONS


class PermissionHandler(ABC):
    """Base class for entity-specific permission handlers"""

    def __init__(self, entity: Type[Any], category: str):
        self.entity = entity
        self.resource_name = entity.__tablename__
        self.category = category

    @abstractmethod
    def can_perform_action(self, principal: Principal, action: str, resource_id: Optional[str] = None, context: Optional[Dict[str, str]] = None) -> bool:
        """Check if principal can perform an action on a resource.

        Args:
            principal: Current principal
            action: Action to perform (e.g., create, update)
            resource_id: Optional identifier of the targeted row
            context: Optional mapping of context identifiers taken from the payload
        """
        pass

    @abstractmethod
    def build_query(self, principal: Principal, action: str, db: Session) -> Query:
        """Build a filtered query based on permissions"""
        pass

    def check_write(self, principal: Principal, action: str, data: Dict[str, Any], current: Optional[Any] = None):
        """Raise ForbiddenException for payload values the principal may not write.

        Called for non-admin principals before create, update and delete;
        current is the stored row on update and delete.
        """
        pass

    def check_admin(self, principal: Principal) -> bool:
        """Check if principal has admin privileges"""
        return principal.is_admin

    def permission_name(self, action: str) -> str:
        verb = ACTIONS.get(action, action)
        return f"{verb}_{self.category}"

    def check_general_permission(self, principal: Principal, action: str) -> bool:
        """Check if principal holds the category permission for action"""
        return principal.permitted(self.permission_name(action))


class PermissionRegistry:
    """Registry for managing entity permission handlers"""

    _instance = None
    _handlers: Dict[Type[Any], PermissionHandler] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def register(self, entity: Type[Any], handler: PermissionHandler):
        """Register a permission handler for an entity"""
        self._handlers[entity] = handler

    def get_handler(self, entity: Type[Any]) -> Optional[PermissionHandler]:
        """Get the permission handler for an entity"""
        return self._handlers.get(entity)

    def check_permissions(self, principal: Principal, entity: Type[Any], action: str, db: Session) -> Query:
        """Check permissions and return filtered query"""
        handler = self.get_handler(entity)
        if not handler:
            # Fallback to admin-only if no handler registered
            if not principal.is_admin:
                raise ForbiddenException(detail={"entity": entity.__tablename__})
            return db.query(entity)

        return handler.build_query(principal, action, db)


# Global registry instance
permission_registry = PermissionRegistry()
