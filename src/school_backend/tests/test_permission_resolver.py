"""
Tests for effective permission resolution and the writes that feed it.
"""

import pytest

from school_backend.api.exceptions import ForbiddenException, NotFoundException, ValidationException
from school_backend.model.auth import Permission, PermissionCategory, Role, RolePermission, UserPermission
from school_backend.permissions.catalog import ALL_PERMISSION_NAMES, PERMISSIONS, ROLE_BASELINES, RoleName
from school_backend.permissions.resolver import resolve_effective_permissions, resolve_permissions
from school_backend.services.permissions import replace_role_permissions, replace_user_overrides


def permission_id(session, name: str) -> str:
    return session.query(Permission.id).filter(Permission.name == name).scalar()


def role_id(session, name: str) -> str:
    return session.query(Role.id).filter(Role.name == name).scalar()


@pytest.mark.unit
class TestResolvePermissions:
    """Pure resolution without a database"""

    def test_baseline_minus_denies_plus_grants(self):
        baseline = {"read_classes", "update_classes", "read_students"}
        overrides = [("update_classes", False), ("read_financial", True)]

        result = resolve_permissions("teacher", baseline, overrides)

        assert result == {"read_classes", "read_students", "read_financial"}

    def test_admin_gets_catalog_regardless_of_overrides(self):
        result = resolve_permissions("admin", set(), [("read_classes", False)])

        assert result == ALL_PERMISSION_NAMES

    def test_unknown_role_has_no_baseline(self):
        result = resolve_permissions("janitor", {"read_classes"}, [("read_support", True)])

        assert result == {"read_support"}

    def test_no_overrides_returns_baseline(self):
        baseline = ROLE_BASELINES[RoleName.student]

        assert resolve_permissions("student", baseline, []) == baseline


@pytest.mark.unit
class TestCatalog:
    """Shape of the built-in catalog"""

    def test_permission_count(self):
        assert len(PERMISSIONS) == 52
        assert len(ALL_PERMISSION_NAMES) == 52

    def test_schedule_permissions_are_named_after_lessons(self):
        assert {"create_lessons", "read_lessons", "update_lessons", "delete_lessons"} <= ALL_PERMISSION_NAMES
        assert "read_schedule" not in ALL_PERMISSION_NAMES

    def test_secretary_lacks_critical_permissions(self):
        secretary = ROLE_BASELINES[RoleName.secretary]

        assert "delete_units" not in secretary
        assert "create_permissions" not in secretary
        assert "read_permissions" not in secretary
        assert "update_permissions" not in secretary
        assert "read_staff" in secretary

    def test_baselines_reference_known_permissions(self):
        for baseline in ROLE_BASELINES.values():
            assert baseline <= ALL_PERMISSION_NAMES


@pytest.mark.unit
class TestSystemDataInitialization:
    """Seeding the catalog into the database"""

    def test_creates_catalog(self, system_data):
        session = system_data

        assert session.query(PermissionCategory).count() == 11
        assert session.query(Permission).count() == 52
        assert {r.name for r in session.query(Role).all()} == {"admin", "secretary", "teacher", "student"}

    def test_rerun_creates_nothing(self, system_data):
        from school_backend.scripts.initialize_system_data import initialize_system_data
        session = system_data
        assignments = session.query(RolePermission).count()

        initialize_system_data(session)

        assert session.query(Permission).count() == 52
        assert session.query(RolePermission).count() == assignments

    def test_permissions_linked_to_category(self, system_data):
        permission = system_data.query(Permission).filter(Permission.name == "read_lessons").one()

        assert permission.category == "schedule"
        assert permission.permission_category.name == "schedule"


@pytest.mark.unit
class TestResolveEffectivePermissions:
    """Resolution against stored roles and overrides"""

    def test_role_baseline(self, system_data, create_user):
        teacher = create_user(role="teacher")

        assert resolve_effective_permissions(teacher.id, system_data) == ROLE_BASELINES[RoleName.teacher]

    def test_overrides_applied(self, system_data, create_user):
        session = system_data
        teacher = create_user(role="teacher")
        session.add(UserPermission(user_id=teacher.id, permission_id=permission_id(session, "read_classes"), is_granted=False))
        session.add(UserPermission(user_id=teacher.id, permission_id=permission_id(session, "read_financial"), is_granted=True))
        session.commit()

        result = resolve_effective_permissions(teacher.id, session)

        assert "read_classes" not in result
        assert "read_financial" in result
        assert "update_classes" in result

    def test_inactive_permission_ignored_in_baseline_and_grants(self, system_data, create_user):
        session = system_data
        teacher = create_user(role="teacher")
        session.add(UserPermission(user_id=teacher.id, permission_id=permission_id(session, "read_financial"), is_granted=True))
        for name in ("read_financial", "read_classes"):
            session.query(Permission).filter(Permission.name == name).one().is_active = False
        session.commit()

        result = resolve_effective_permissions(teacher.id, session)

        assert "read_financial" not in result
        assert "read_classes" not in result
        assert "update_classes" in result

    def test_admin_ignores_denies(self, system_data, create_user):
        session = system_data
        admin = create_user(role="admin")
        session.add(UserPermission(user_id=admin.id, permission_id=permission_id(session, "read_classes"), is_granted=False))
        session.commit()

        assert "read_classes" in resolve_effective_permissions(admin.id, session)

    def test_unknown_user(self, system_data):
        with pytest.raises(NotFoundException):
            resolve_effective_permissions("missing", system_data)


@pytest.mark.unit
class TestReplaceUserOverrides:
    """Whole-set replacement of a user's overrides"""

    def test_replaces_existing_set(self, system_data, create_user):
        session = system_data
        user = create_user(role="student")
        read_courses = permission_id(session, "read_courses")
        read_support = permission_id(session, "read_support")

        replace_user_overrides(user.id, [(read_courses, True)], session)
        replace_user_overrides(user.id, [(read_support, False)], session)

        rows = session.query(UserPermission).filter(UserPermission.user_id == user.id).all()
        assert [(r.permission_id, r.is_granted) for r in rows] == [(read_support, False)]
        assert resolve_effective_permissions(user.id, session) == {"access_support", "create_support"}

    def test_grant_and_deny_of_same_permission_rejected(self, system_data, create_user):
        session = system_data
        user = create_user(role="student")
        read_courses = permission_id(session, "read_courses")

        with pytest.raises(ValidationException):
            replace_user_overrides(user.id, [(read_courses, True), (read_courses, False)], session)

        assert session.query(UserPermission).filter(UserPermission.user_id == user.id).count() == 0

    def test_unknown_permission_rejected_with_ids(self, system_data, create_user):
        user = create_user(role="student")

        with pytest.raises(ValidationException) as exc_info:
            replace_user_overrides(user.id, [("nope", True)], system_data)

        assert exc_info.value.detail["invalid_ids"] == ["nope"]

    def test_unknown_user(self, system_data):
        with pytest.raises(NotFoundException):
            replace_user_overrides("missing", [], system_data)


@pytest.mark.unit
class TestReplaceRolePermissions:
    """Editing role baselines"""

    def test_replaces_baseline(self, system_data, create_user):
        session = system_data
        teacher = create_user(role="teacher")

        replace_role_permissions(role_id(session, "teacher"), [permission_id(session, "read_courses")], session)

        assert resolve_effective_permissions(teacher.id, session) == {"read_courses"}

    def test_admin_role_cannot_be_edited(self, system_data):
        session = system_data

        with pytest.raises(ForbiddenException):
            replace_role_permissions(role_id(session, "admin"), [], session)

    def test_invalid_ids_rejected(self, system_data):
        session = system_data
        teacher_role = role_id(session, "teacher")
        before = session.query(RolePermission).filter(RolePermission.role_id == teacher_role).count()

        with pytest.raises(ValidationException) as exc_info:
            replace_role_permissions(teacher_role, [permission_id(session, "read_courses"), "bogus"], session)

        assert exc_info.value.detail["invalid_ids"] == ["bogus"]
        assert session.query(RolePermission).filter(RolePermission.role_id == teacher_role).count() == before
