from typing import Optional
from sqlalchemy.orm import Session, Query
from school_backend.permissions.handlers import PermissionHandler
from school_backend.permissions.principal import Principal
from school_backend.api.exceptions import ForbiddenException
from school_backend.model.auth import User
from school_backend.model.schedule import ClassSlot
from school_backend.model.support import SupportTicket
from school_backend.permissions.catalog import RoleName, parse_role


class CategoryPermissionHandler(PermissionHandler):
    """Entity guarded by the CRUD permissions of one category"""

    def can_perform_action(self, principal: Principal, action: str, resource_id: Optional[str] = None, context: Optional[dict] = None) -> bool:
        if self.check_admin(principal):
            return True

        return self.check_general_permission(principal, action)

    def build_query(self, principal: Principal, action: str, db: Session) -> Query:
        if self.can_perform_action(principal, action):
            return db.query(self.entity)

        raise ForbiddenException(detail={"entity": self.resource_name, "action": action})


class UserPermissionHandler(CategoryPermissionHandler):
    """Permission handler for User entity"""

    def check_write(self, principal: Principal, action: str, data: dict, current: Optional[User] = None):
        # Administrator accounts and role changes are managed by administrators only
        if current is not None and parse_role(current.role) == RoleName.admin:
            raise ForbiddenException(detail={"entity": self.resource_name, "action": action})

        role = data.get("role")
        if role is None:
            return

        if current is None and parse_role(role) != RoleName.admin:
            return

        if current is not None and role == current.role:
            return

        raise ForbiddenException(detail={"entity": self.resource_name, "action": action, "field": "role"})

    def can_perform_action(self, principal: Principal, action: str, resource_id: Optional[str] = None, context: Optional[dict] = None) -> bool:
        if super().can_perform_action(principal, action, resource_id, context):
            return True

        # Users can view themselves
        if action in ["list", "get"] and resource_id is not None and resource_id == principal.user_id:
            return True

        return False

    def build_query(self, principal: Principal, action: str, db: Session) -> Query:
        if super().can_perform_action(principal, action):
            return db.query(self.entity)

        if action in ["list", "get"] and principal.user_id is not None:
            return db.query(self.entity).filter(self.entity.id == principal.user_id)

        raise ForbiddenException(detail={"entity": self.resource_name, "action": action})


class ClassPermissionHandler(CategoryPermissionHandler):
    """Classes: teachers without the general read permission see their own"""

    def build_query(self, principal: Principal, action: str, db: Session) -> Query:
        if self.can_perform_action(principal, action):
            return db.query(self.entity)

        if action in ["list", "get"] and principal.user_id is not None and principal.permitted("read_lessons"):
            return db.query(self.entity).filter(ClassSlot.teacher_id == principal.user_id)

        raise ForbiddenException(detail={"entity": self.resource_name, "action": action})


class ReadOnlyPermissionHandler(CategoryPermissionHandler):
    """Catalog entities: readable with the category permission, written by admins only"""

    def can_perform_action(self, principal: Principal, action: str, resource_id: Optional[str] = None, context: Optional[dict] = None) -> bool:
        if self.check_admin(principal):
            return True

        if action in ["list", "get"]:
            return self.check_general_permission(principal, action)

        return False


class SupportTicketPermissionHandler(CategoryPermissionHandler):
    """Support tickets: administrators see all of them, everyone else their own"""

    def can_perform_action(self, principal: Principal, action: str, resource_id: Optional[str] = None, context: Optional[dict] = None) -> bool:
        if self.check_admin(principal):
            return True

        # Status, assignment and removal are handled by administrators
        if action in ["update", "delete"]:
            return False

        return self.check_general_permission(principal, action)

    def build_query(self, principal: Principal, action: str, db: Session) -> Query:
        if self.check_admin(principal):
            return db.query(self.entity)

        if self.can_perform_action(principal, action) and principal.user_id is not None:
            return db.query(self.entity).filter(SupportTicket.user_id == principal.user_id)

        raise ForbiddenException(detail={"entity": self.resource_name, "action": action})
