from .base import Base, metadata
from .auth import User, UserSettings, Role, Permission, PermissionCategory, RolePermission, UserPermission
from .school import SchoolUnit, Staff, Student
from .course import (
    Course,
    Book,
    CourseUnit,
    CourseVideo,
    CourseActivity,
    StudentCourseEnrollment
)
from .schedule import ClassSlot, ClassEnrollment, AttendanceRecord, Lesson
from .support import SupportTicket, SupportTicketResponse

# Import all models to ensure relationships are properly set up
from . import auth, school, course, schedule, support

__all__ = [
    'Base',
    'metadata',
    # Auth models
    'User',
    'UserSettings',
    'Role',
    'Permission',
    'PermissionCategory',
    'RolePermission',
    'UserPermission',
    # School
    'SchoolUnit',
    'Staff',
    'Student',
    # Curriculum
    'Course',
    'Book',
    'CourseUnit',
    'CourseVideo',
    'CourseActivity',
    'StudentCourseEnrollment',
    # Scheduling
    'ClassSlot',
    'ClassEnrollment',
    'AttendanceRecord',
    'Lesson',
    # Support
    'SupportTicket',
    'SupportTicketResponse',
]
