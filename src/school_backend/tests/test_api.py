"""
HTTP surface: generic CRUD routes, class operations and permission administration.
"""

import pytest

from school_backend.interface.tokens import decrypt_password
from school_backend.model.auth import Permission, Role, User
from school_backend.model.course import Book, Course
from school_backend.model.school import Student
from school_backend.tests.fixtures import make_principal


@pytest.fixture
def admin(create_user, as_principal):
    user = create_user(role="admin")
    return as_principal(make_principal(role="admin", user_id=user.id))


@pytest.fixture
def book(session):
    course = Course(name="English Basics", language="English", level="beginner")
    book = Book(course=course, name="Book One", display_order=1)
    session.add_all([course, book])
    session.commit()
    return book


def class_payload(book, teacher, **kwargs) -> dict:
    payload = {
        "book_id": book.id,
        "teacher_id": teacher.id,
        "name": "Monday afternoon",
        "day_of_week": 1,
        "start_time": "14:00",
        "end_time": "15:30",
    }
    payload.update(kwargs)
    return payload


@pytest.mark.integration
class TestCrudRoutes:

    def test_create_and_list_courses(self, client, admin):
        created = client.post("/api/courses", json={"name": "English Basics", "language": "English", "level": "beginner"})

        assert created.status_code == 201
        assert created.json()["is_active"] is True

        listed = client.get("/api/courses")
        assert listed.status_code == 200
        assert listed.headers["X-Total-Count"] == "1"
        assert [c["id"] for c in listed.json()] == [created.json()["id"]]

    def test_list_sees_new_rows_after_create(self, client, admin):
        client.post("/api/courses", json={"name": "A", "language": "English", "level": "beginner"})
        assert client.get("/api/courses").headers["X-Total-Count"] == "1"

        client.post("/api/courses", json={"name": "B", "language": "Spanish", "level": "beginner"})
        assert client.get("/api/courses").headers["X-Total-Count"] == "2"

    def test_book_display_order_conflict(self, client, admin, book):
        response = client.post("/api/books", json={"course_id": book.course_id, "name": "Again", "display_order": 1})

        assert response.status_code == 409

    def test_book_for_missing_course(self, client, admin):
        response = client.post("/api/books", json={"course_id": "missing", "name": "Lost", "display_order": 1})

        assert response.status_code == 404

    def test_unknown_field_rejected(self, client, admin):
        response = client.post("/api/courses", json={"name": "A", "language": "English", "level": "beginner", "extra": 1})

        assert response.status_code == 422

    def test_update_and_delete(self, client, admin, book):
        updated = client.patch(f"/api/books/{book.id}", json={"name": "Renamed"})
        assert updated.status_code == 200
        assert updated.json()["name"] == "Renamed"

        assert client.delete(f"/api/books/{book.id}").status_code == 204
        assert client.get(f"/api/books/{book.id}").status_code == 404

    def test_student_cannot_read_courses(self, client, as_principal):
        as_principal(make_principal(role="student"))

        assert client.get("/api/courses").status_code == 403

    def test_teacher_reads_but_cannot_create_courses(self, client, as_principal, book):
        as_principal(make_principal(role="teacher"))

        assert client.get("/api/courses").status_code == 200
        assert client.post("/api/courses", json={"name": "A", "language": "English", "level": "beginner"}).status_code == 403

    def test_user_password_is_stored_encrypted(self, client, session, admin):
        response = client.post("/api/users", json={"email": "new@school.com", "password": "secret1", "role": "teacher"})

        assert response.status_code == 201
        assert "password" not in response.json()

        session.expire_all()
        stored = session.query(User).filter(User.email == "new@school.com").one()
        assert stored.password != "secret1"
        assert decrypt_password(stored.password) == "secret1"

    def test_user_reads_own_account_only(self, client, create_user, as_principal):
        me = create_user(role="student")
        other = create_user(role="student")
        as_principal(make_principal(role="student", user_id=me.id))

        assert client.get(f"/api/users/{me.id}").status_code == 200
        assert client.get(f"/api/users/{other.id}").status_code == 404
        assert [u["id"] for u in client.get("/api/users").json()] == [me.id]

    def test_course_tree(self, client, admin, book):
        response = client.get(f"/api/courses/{book.course_id}/tree")

        assert response.status_code == 200
        assert [b["name"] for b in response.json()["books"]] == ["Book One"]
        assert response.json()["books"][0]["units"] == []


@pytest.mark.integration
class TestAccountGuards:

    @pytest.fixture
    def secretary(self, create_user, as_principal):
        user = create_user(role="secretary")
        return as_principal(make_principal(role="secretary", user_id=user.id))

    def test_secretary_cannot_promote_self(self, client, session, secretary):
        response = client.patch(f"/api/users/{secretary.user_id}", json={"role": "admin"})

        assert response.status_code == 403
        session.expire_all()
        assert session.get(User, secretary.user_id).role == "secretary"

    def test_secretary_cannot_create_admin(self, client, secretary):
        response = client.post("/api/users", json={"email": "boss@school.com", "password": "secret1", "role": "admin"})

        assert response.status_code == 403

    def test_secretary_creates_teacher(self, client, secretary):
        response = client.post("/api/users", json={"email": "teacher@school.com", "password": "secret1", "role": "teacher"})

        assert response.status_code == 201

    def test_secretary_cannot_touch_admin_account(self, client, create_user, secretary):
        admin_user = create_user(role="admin")

        assert client.patch(f"/api/users/{admin_user.id}", json={"password": "hijacked"}).status_code == 403
        assert client.delete(f"/api/users/{admin_user.id}").status_code == 403

    def test_secretary_edits_teacher_without_role_change(self, client, create_user, secretary):
        teacher = create_user(role="teacher")

        assert client.patch(f"/api/users/{teacher.id}", json={"first_name": "Ana"}).status_code == 200
        assert client.patch(f"/api/users/{teacher.id}", json={"role": "secretary"}).status_code == 403

    def test_admin_changes_roles(self, client, create_user, admin):
        teacher = create_user(role="teacher")

        response = client.patch(f"/api/users/{teacher.id}", json={"role": "secretary"})

        assert response.status_code == 200
        assert response.json()["role"] == "secretary"


@pytest.mark.integration
class TestClassRoutes:

    def test_overlapping_class_conflicts(self, client, admin, book, create_user):
        teacher = create_user(role="teacher")

        first = client.post("/api/classes", json=class_payload(book, teacher))
        second = client.post("/api/classes", json=class_payload(book, teacher, start_time="14:30", end_time="15:00"))

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["detail"]["conflicting_class_id"] == first.json()["id"]

    def test_back_to_back_classes(self, client, admin, book, create_user):
        teacher = create_user(role="teacher")

        client.post("/api/classes", json=class_payload(book, teacher))
        response = client.post("/api/classes", json=class_payload(book, teacher, start_time="15:30", end_time="16:30"))

        assert response.status_code == 201

    def test_enrollment_and_attendance(self, client, session, admin, book, create_user):
        teacher = create_user(role="teacher")
        student = Student(user_id=create_user(role="student").id, student_code="STD001")
        session.add(student)
        session.commit()

        class_id = client.post("/api/classes", json=class_payload(book, teacher)).json()["id"]

        enrolled = client.post(f"/api/classes/{class_id}/enrollments", json={"student_id": student.id})
        assert enrolled.status_code == 201
        assert client.post(f"/api/classes/{class_id}/enrollments", json={"student_id": student.id}).status_code == 409

        marked = client.put(f"/api/classes/{class_id}/attendance", json={
            "date": "2025-03-10",
            "records": [{"student_id": student.id, "status": "absent", "notes": "sick"}]
        })
        assert marked.status_code == 200
        assert marked.json()[0]["recorded_by"] == admin.user_id

        roster = client.get(f"/api/classes/{class_id}/attendance", params={"date": "2025-03-10"})
        assert roster.json()["students"] == [{
            "student_id": student.id,
            "student_code": "STD001",
            "first_name": "Test",
            "last_name": "Student",
            "status": "absent",
            "notes": "sick",
        }]

        bulk = client.post(f"/api/classes/{class_id}/attendance/bulk", json={"date": "2025-03-10", "status": "present"})
        assert [r["status"] for r in bulk.json()] == ["present"]

        assert client.delete(f"/api/classes/{class_id}/enrollments/{student.id}").status_code == 204
        assert client.get(f"/api/classes/{class_id}/enrollments").json() == []

    def test_teacher_sees_own_schedule(self, client, admin, book, create_user, as_principal):
        teacher = create_user(role="teacher")
        client.post("/api/classes", json=class_payload(book, teacher))

        as_principal(make_principal(role="student", user_id=teacher.id))
        response = client.get(f"/api/schedule/teachers/{teacher.id}")

        assert response.status_code == 200
        assert response.json()["occupied_slots"][0]["book_name"] == "Book One"

    def test_student_cannot_see_other_schedules(self, client, create_user, as_principal):
        teacher = create_user(role="teacher")
        as_principal(make_principal(role="student"))

        assert client.get(f"/api/schedule/teachers/{teacher.id}").status_code == 403
        assert client.get("/api/schedule/admin").status_code == 403

    def test_admin_schedule(self, client, admin, book, create_user):
        teacher = create_user(role="teacher")
        client.post("/api/classes", json=class_payload(book, teacher))

        entries = client.get("/api/schedule/admin").json()

        assert entries[0]["teacher_name"] == "Test Teacher"
        assert entries[0]["book_color"] == "#3b82f6"


@pytest.mark.integration
class TestPermissionRoutes:

    def permission_id(self, session, name):
        return session.query(Permission.id).filter(Permission.name == name).scalar()

    def test_catalog_lookup(self, client, system_data, admin):
        response = client.get("/api/permissions/catalog")

        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "52"

    def test_grant_and_deny_same_permission(self, client, system_data, admin, create_user):
        user = create_user(role="teacher")
        read_classes = self.permission_id(system_data, "read_classes")

        response = client.put(f"/api/permissions/users/{user.id}", json={"overrides": [
            {"permission_id": read_classes, "is_granted": True},
            {"permission_id": read_classes, "is_granted": False},
        ]})

        assert response.status_code == 400

    def test_overrides_change_effective_permissions(self, client, system_data, admin, create_user):
        user = create_user(role="teacher")
        read_financial = self.permission_id(system_data, "read_financial")

        response = client.put(f"/api/permissions/users/{user.id}", json={"overrides": [
            {"permission_id": read_financial, "is_granted": True},
        ]})

        assert response.status_code == 200
        assert response.json()["overrides"][0]["permission_name"] == "read_financial"
        assert "read_financial" in client.get(f"/api/permissions/effective/{user.id}").json()["permissions"]

    def test_admin_role_is_locked(self, client, system_data, admin):
        admin_role = system_data.query(Role.id).filter(Role.name == "admin").scalar()

        response = client.put(f"/api/permissions/roles/{admin_role}/permissions", json={"permission_ids": []})

        assert response.status_code == 403

    def test_unknown_ids_reported(self, client, system_data, admin):
        teacher_role = system_data.query(Role.id).filter(Role.name == "teacher").scalar()

        response = client.put(f"/api/permissions/roles/{teacher_role}/permissions", json={"permission_ids": ["bogus"]})

        assert response.status_code == 400
        assert response.json()["detail"]["invalid_ids"] == ["bogus"]

    def test_user_reads_own_permissions(self, client, system_data, create_user, as_principal):
        user = create_user(role="student")
        other = create_user(role="student")
        as_principal(make_principal(role="student", user_id=user.id))

        assert client.get(f"/api/permissions/users/{user.id}").status_code == 200
        assert client.get(f"/api/permissions/users/{other.id}").status_code == 403

    def test_teacher_cannot_edit_permissions(self, client, system_data, create_user, as_principal):
        user = create_user(role="student")
        as_principal(make_principal(role="teacher"))

        assert client.put(f"/api/permissions/users/{user.id}", json={"overrides": []}).status_code == 403

    def test_secretary_cannot_manage_permissions(self, client, system_data, create_user, as_principal):
        user = create_user(role="secretary")
        as_principal(make_principal(role="secretary", user_id=user.id))
        secretary_role = system_data.query(Role.id).filter(Role.name == "secretary").scalar()
        every_id = [row[0] for row in system_data.query(Permission.id).all()]

        assert client.put(f"/api/permissions/roles/{secretary_role}/permissions", json={"permission_ids": every_id}).status_code == 403
        assert client.put(f"/api/permissions/users/{user.id}", json={"overrides": []}).status_code == 403
        assert client.get(f"/api/permissions/roles/{secretary_role}/permissions").status_code == 403

    def test_permission_writes_are_admin_only(self, client, system_data, create_user, as_principal):
        user = create_user(role="teacher")
        as_principal(make_principal(permissions={"read_permissions", "update_permissions"}))

        assert client.put(f"/api/permissions/users/{user.id}", json={"overrides": []}).status_code == 403


@pytest.mark.integration
class TestDashboardRoutes:

    def test_stats_count_active_records(self, client, session, admin, book, create_user):
        teacher = create_user(role="teacher")
        session.add(Student(user_id=create_user(role="student").id, student_code="STD001"))
        session.add(Student(user_id=create_user(role="student").id, student_code="STD002", status="inactive"))
        session.commit()
        client.post("/api/classes", json=class_payload(book, teacher))

        stats = client.get("/api/dashboard/stats")

        assert stats.status_code == 200
        assert stats.json() == {
            "total_students": 1,
            "total_staff": 0,
            "total_courses": 1,
            "total_classes": 1,
            "lessons_today": 0,
        }

    def test_students_have_no_stats(self, client, as_principal):
        as_principal(make_principal(role="student"))

        assert client.get("/api/dashboard/stats").status_code == 403


@pytest.mark.integration
class TestUserSettingsRoutes:

    def test_defaults_before_first_save(self, client, create_user, as_principal):
        user = create_user(role="teacher")
        as_principal(make_principal(role="teacher", user_id=user.id))

        response = client.get(f"/api/users/{user.id}/settings")

        assert response.status_code == 200
        assert response.json()["theme"] == "light"
        assert response.json()["session_timeout"] == 30

    def test_save_and_change(self, client, create_user, as_principal):
        user = create_user(role="student")
        as_principal(make_principal(role="student", user_id=user.id))

        first = client.put(f"/api/users/{user.id}/settings", json={"theme": "dark"})
        second = client.put(f"/api/users/{user.id}/settings", json={"language": "en-US"})

        assert first.json()["theme"] == "dark"
        assert second.json()["theme"] == "dark"
        assert second.json()["language"] == "en-US"

    def test_other_users_settings_are_private(self, client, create_user, as_principal):
        user = create_user(role="secretary")
        other = create_user(role="teacher")
        as_principal(make_principal(role="secretary", user_id=user.id))

        assert client.get(f"/api/users/{other.id}/settings").status_code == 403
        assert client.put(f"/api/users/{other.id}/settings", json={"theme": "dark"}).status_code == 403

    def test_admin_reads_any_settings(self, client, create_user, admin):
        other = create_user(role="teacher")

        assert client.get(f"/api/users/{other.id}/settings").status_code == 200

    def test_invalid_theme(self, client, create_user, as_principal):
        user = create_user(role="student")
        as_principal(make_principal(role="student", user_id=user.id))

        assert client.put(f"/api/users/{user.id}/settings", json={"theme": "purple"}).status_code == 422
