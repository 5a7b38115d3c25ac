"""
Dated lessons: teacher conflicts per date and the lesson routes.
"""

import datetime
import pytest

from school_backend.api.exceptions import ConflictException, NotFoundException, ValidationException
from school_backend.model.course import Book, Course
from school_backend.model.schedule import ClassSlot, Lesson
from school_backend.services.lessons import find_lesson_conflicts, validate_lesson
from school_backend.tests.fixtures import make_principal

MONDAY = datetime.date(2025, 3, 10)


@pytest.fixture
def teacher(create_user):
    return create_user(role="teacher")


@pytest.fixture
def class_slot(session, teacher):
    course = Course(name="English Basics", language="English", level="beginner")
    book = Book(course=course, name="Book One", display_order=1)
    slot = ClassSlot(
        book=book,
        teacher_id=teacher.id,
        name="Monday afternoon",
        day_of_week=1,
        start_time="14:00",
        end_time="15:30"
    )
    session.add_all([course, book, slot])
    session.commit()
    return slot


@pytest.fixture
def lesson(session, class_slot):
    lesson = Lesson(
        class_id=class_slot.id,
        title="Day 1",
        book_day=1,
        date=MONDAY,
        start_time="14:00",
        end_time="15:30"
    )
    session.add(lesson)
    session.commit()
    return lesson


def lesson_data(class_slot, **kwargs) -> dict:
    data = {
        "class_id": class_slot.id,
        "title": "Day 2",
        "book_day": 2,
        "date": MONDAY,
        "start_time": "16:00",
        "end_time": "17:00",
    }
    data.update(kwargs)
    return data


@pytest.mark.unit
class TestLessonConflicts:

    def test_overlap_on_same_date(self, session, teacher, lesson):
        conflicts = find_lesson_conflicts(session, teacher.id, MONDAY, "15:00", "16:00")

        assert [c.id for c in conflicts] == [lesson.id]

    def test_other_date_is_free(self, session, teacher, lesson):
        assert find_lesson_conflicts(session, teacher.id, MONDAY + datetime.timedelta(days=7), "14:00", "15:30") == []

    def test_touching_lessons_do_not_conflict(self, session, teacher, lesson):
        assert find_lesson_conflicts(session, teacher.id, MONDAY, "15:30", "16:30") == []

    def test_cancelled_lesson_frees_time(self, session, teacher, lesson):
        lesson.status = "cancelled"
        session.commit()

        assert find_lesson_conflicts(session, teacher.id, MONDAY, "14:00", "15:00") == []

    def test_excluded_lesson(self, session, teacher, lesson):
        assert find_lesson_conflicts(session, teacher.id, MONDAY, "14:00", "15:00", exclude_id=lesson.id) == []

    def test_inverted_range(self, session, teacher):
        with pytest.raises(ValidationException):
            find_lesson_conflicts(session, teacher.id, MONDAY, "15:00", "14:00")


@pytest.mark.unit
class TestValidateLesson:

    def test_valid(self, session, class_slot, lesson):
        data = lesson_data(class_slot)

        assert validate_lesson(data, session) is data

    def test_missing_class(self, session, class_slot):
        with pytest.raises(NotFoundException):
            validate_lesson(lesson_data(class_slot, class_id="missing"), session)

    def test_conflict(self, session, class_slot, lesson):
        with pytest.raises(ConflictException) as exc_info:
            validate_lesson(lesson_data(class_slot, start_time="15:00"), session)

        assert exc_info.value.detail["conflicting_lesson_id"] == lesson.id

    def test_update_does_not_conflict_with_itself(self, session, lesson):
        assert validate_lesson({"end_time": "16:00"}, session, lesson) == {"end_time": "16:00"}

    def test_update_checks_merged_times(self, session, lesson):
        with pytest.raises(ValidationException):
            validate_lesson({"start_time": "16:00"}, session, lesson)


@pytest.mark.integration
class TestLessonRoutes:

    @pytest.fixture
    def as_teacher(self, teacher, as_principal):
        return as_principal(make_principal(role="teacher", user_id=teacher.id))

    def test_create_and_conflict(self, client, class_slot, as_teacher):
        payload = {**lesson_data(class_slot), "date": MONDAY.isoformat()}

        created = client.post("/api/lessons", json=payload)
        clash = client.post("/api/lessons", json={**payload, "start_time": "16:30", "end_time": "17:30"})

        assert created.status_code == 201
        assert created.json()["status"] == "scheduled"
        assert clash.status_code == 409

    def test_lessons_by_class_and_teacher(self, client, teacher, class_slot, lesson, as_teacher):
        by_class = client.get(f"/api/lessons/class/{class_slot.id}")
        by_teacher = client.get(f"/api/lessons/teacher/{teacher.id}")

        assert [l["id"] for l in by_class.json()] == [lesson.id]
        assert [l["id"] for l in by_teacher.json()] == [lesson.id]

    def test_today(self, client, session, class_slot, lesson, as_teacher):
        lesson.date = datetime.date.today()
        session.commit()

        assert [l["id"] for l in client.get("/api/lessons/today").json()] == [lesson.id]

    def test_check_conflicts(self, client, teacher, lesson, as_teacher):
        body = {"teacher_id": teacher.id, "date": MONDAY.isoformat(), "start_time": "15:00", "end_time": "16:00"}

        busy = client.post("/api/lessons/check-conflicts", json=body)
        free = client.post("/api/lessons/check-conflicts", json={**body, "exclude_lesson_id": lesson.id})

        assert busy.json()["has_conflict"] is True
        assert busy.json()["conflicts"][0]["id"] == lesson.id
        assert free.json() == {"has_conflict": False, "conflicts": []}

    def test_students_cannot_read_lessons(self, client, as_principal):
        as_principal(make_principal(role="student"))

        assert client.get("/api/lessons").status_code == 403
        assert client.get("/api/lessons/today").status_code == 403
