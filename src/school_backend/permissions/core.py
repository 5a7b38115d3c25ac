"""
Permission checking entry points using the handler registry pattern.
"""

from typing import Any
from sqlalchemy.orm import Session

from school_backend.api.exceptions import ForbiddenException
from school_backend.permissions.handlers import permission_registry
from school_backend.permissions.handlers_impl import (
    CategoryPermissionHandler,
    UserPermissionHandler,
    ClassPermissionHandler,
    ReadOnlyPermissionHandler,
    SupportTicketPermissionHandler
)
from school_backend.permissions.principal import Principal

# Import models for registration
from school_backend.model.auth import User, Role, Permission, PermissionCategory
from school_backend.model.school import SchoolUnit, Staff, Student
from school_backend.model.course import (
    Course, Book, CourseUnit, CourseVideo, CourseActivity, StudentCourseEnrollment
)
from school_backend.model.schedule import ClassSlot, ClassEnrollment, AttendanceRecord, Lesson
from school_backend.model.support import SupportTicket


def initialize_permission_handlers():
    """Initialize and register all permission handlers"""

    # Accounts and people
    permission_registry.register(User, UserPermissionHandler(User, "staff"))
    permission_registry.register(Staff, CategoryPermissionHandler(Staff, "staff"))
    permission_registry.register(Student, CategoryPermissionHandler(Student, "students"))
    permission_registry.register(StudentCourseEnrollment, CategoryPermissionHandler(StudentCourseEnrollment, "students"))
    permission_registry.register(SchoolUnit, CategoryPermissionHandler(SchoolUnit, "units"))

    # Curriculum hierarchy
    permission_registry.register(Course, CategoryPermissionHandler(Course, "courses"))
    permission_registry.register(Book, CategoryPermissionHandler(Book, "courses"))
    permission_registry.register(CourseUnit, CategoryPermissionHandler(CourseUnit, "courses"))
    permission_registry.register(CourseVideo, CategoryPermissionHandler(CourseVideo, "courses"))
    permission_registry.register(CourseActivity, CategoryPermissionHandler(CourseActivity, "courses"))

    # Scheduling
    permission_registry.register(ClassSlot, ClassPermissionHandler(ClassSlot, "classes"))
    permission_registry.register(ClassEnrollment, CategoryPermissionHandler(ClassEnrollment, "classes"))
    permission_registry.register(AttendanceRecord, CategoryPermissionHandler(AttendanceRecord, "classes"))
    permission_registry.register(Lesson, CategoryPermissionHandler(Lesson, "lessons"))

    # Support
    permission_registry.register(SupportTicket, SupportTicketPermissionHandler(SupportTicket, "support"))

    # Permission catalog
    permission_registry.register(Role, ReadOnlyPermissionHandler(Role, "permissions"))
    permission_registry.register(Permission, ReadOnlyPermissionHandler(Permission, "permissions"))
    permission_registry.register(PermissionCategory, ReadOnlyPermissionHandler(PermissionCategory, "permissions"))


def check_permissions(permissions: Principal, entity: Any, action: str, db: Session):
    """
    Main entry point for permission checking.
    Uses the registry pattern to delegate to appropriate handlers.
    """
    return permission_registry.check_permissions(permissions, entity, action, db)


def require_permission(permissions: Principal, permission: str | list[str]):
    """Raise ForbiddenException unless the principal holds the permission."""
    if not permissions.permitted(permission):
        raise ForbiddenException(detail={"permission": permission})


def require_admin(permissions: Principal):
    """Raise ForbiddenException unless the principal is an administrator."""
    if not permissions.is_admin:
        raise ForbiddenException(detail="Administrator access required")
