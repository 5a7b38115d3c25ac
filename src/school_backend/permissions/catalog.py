"""
Built-in permission catalog: categories, permission names and the baseline
permission set of every system role.
"""

from enum import Enum
from typing import Dict, List, Optional, Set, Tuple


class RoleName(str, Enum):
    admin = "admin"
    secretary = "secretary"
    teacher = "teacher"
    student = "student"


# (name, display name, description)
PERMISSION_CATEGORIES: List[Tuple[str, str, str]] = [
    ("dashboard", "Dashboard", "Main dashboard"),
    ("units", "Units", "School units and campuses"),
    ("staff", "Staff", "Staff members and user accounts"),
    ("students", "Students", "Student records"),
    ("courses", "Courses", "Courses and curriculum content"),
    ("classes", "Classes", "Classes, enrollments and attendance"),
    ("schedule", "Schedule", "Lessons and teacher schedules"),
    ("financial", "Financial", "Financial records"),
    ("support", "Support", "Support tickets"),
    ("settings", "Settings", "System settings"),
    ("permissions", "Permissions", "Roles and permission assignments"),
]

CRUD_VERBS = ["create", "read", "update", "delete"]

# Schedule permissions are named after lessons instead of the category
_CRUD_SUBJECTS = {
    "schedule": "lessons",
}


def _build_permissions() -> List[Tuple[str, str, str]]:
    permissions = [
        ("access_dashboard", "dashboard", "Access the dashboard"),
        ("view_dashboard_stats", "dashboard", "View dashboard statistics"),
    ]
    for category, display_name, _ in PERMISSION_CATEGORIES:
        if category == "dashboard":
            continue
        subject = _CRUD_SUBJECTS.get(category, category)
        permissions.append((f"access_{category}", category, f"Access the {display_name.lower()} module"))
        for verb in CRUD_VERBS:
            permissions.append((f"{verb}_{subject}", category, f"{verb.capitalize()} {subject}"))
    return permissions


# (permission name, category name, display name)
PERMISSIONS: List[Tuple[str, str, str]] = _build_permissions()

ALL_PERMISSION_NAMES: Set[str] = {name for name, _, _ in PERMISSIONS}

ROLE_DISPLAY_NAMES: Dict[RoleName, Tuple[str, str]] = {
    RoleName.admin: ("Administrator", "Full access to the system"),
    RoleName.secretary: ("Secretary", "Full access except critical configuration"),
    RoleName.teacher: ("Teacher", "Teaching, classes and lessons"),
    RoleName.student: ("Student", "Student area only"),
}

# Role and permission management stays with administrators
_SECRETARY_EXCLUDED = {
    "delete_units",
    "access_permissions", "create_permissions", "read_permissions", "update_permissions", "delete_permissions",
}

_TEACHER_PERMISSIONS = {
    "access_dashboard", "view_dashboard_stats",
    "read_units", "read_students", "read_courses",
    "access_classes", "read_classes", "update_classes",
    "access_schedule", "create_lessons", "read_lessons", "update_lessons", "delete_lessons",
    "access_support", "create_support", "read_support",
}

_STUDENT_PERMISSIONS = {"access_support", "create_support", "read_support"}

ROLE_BASELINES: Dict[RoleName, Set[str]] = {
    RoleName.admin: set(ALL_PERMISSION_NAMES),
    RoleName.secretary: ALL_PERMISSION_NAMES - _SECRETARY_EXCLUDED,
    RoleName.teacher: _TEACHER_PERMISSIONS,
    RoleName.student: _STUDENT_PERMISSIONS,
}


def parse_role(value) -> Optional[RoleName]:
    """Map a stored role value onto the closed role set, None when unknown."""
    if isinstance(value, RoleName):
        return value
    try:
        return RoleName(value)
    except ValueError:
        return None
