"""
Journey course and demo account seeding.
"""

import pytest

from school_backend.interface.tokens import decrypt_password
from school_backend.model.auth import User
from school_backend.model.course import Book, Course, CourseActivity, CourseUnit, CourseVideo, StudentCourseEnrollment
from school_backend.model.school import SchoolUnit, Staff, Student
from school_backend.scripts.seed_demo_users import DEMO_PASSWORD, seed_demo_users
from school_backend.scripts.seed_journey import JOURNEY_COURSE_NAME, seed_journey_course


@pytest.mark.unit
class TestJourneySeed:

    def test_course_structure(self, session):
        course_id = seed_journey_course(session)

        assert session.query(Course).filter(Course.name == JOURNEY_COURSE_NAME).one().id == course_id
        assert session.query(Book).count() == 3
        assert session.query(CourseUnit).count() == 39
        assert session.query(CourseUnit).filter(CourseUnit.unit_type == "lesson").count() == 30
        assert session.query(CourseVideo).count() == 180
        assert session.query(CourseActivity).count() == 180

    def test_books_close_with_checkpoints(self, session):
        seed_journey_course(session)

        book = session.query(Book).filter(Book.display_order == 1).one()
        closing = [(u.display_order, u.unit_type) for u in book.units if u.display_order > 10]

        assert closing == [(11, "checkpoint"), (12, "review"), (13, "checkpoint")]
        assert book.total_days == 60

    def test_units_are_numbered_across_books(self, session):
        seed_journey_course(session)

        book = session.query(Book).filter(Book.display_order == 2).one()

        assert book.units[0].name == "Unit 11"
        assert [v.day_number for v in book.units[0].videos] == [1, 2, 3, 4, 5, 6]

    def test_rerun_creates_nothing(self, session):
        first = seed_journey_course(session)

        assert seed_journey_course(session) == first
        assert session.query(Course).count() == 1
        assert session.query(Book).count() == 3


@pytest.mark.unit
class TestDemoUsersSeed:

    def test_demo_accounts(self, session):
        users = seed_demo_users(session)

        assert users["admin@demo.com"].role == "admin"
        assert users["teacher@demo.com"].role == "teacher"
        assert decrypt_password(users["secretary@demo.com"].password) == DEMO_PASSWORD
        assert session.query(SchoolUnit).count() == 1
        assert session.query(Staff).count() == 3
        assert session.query(Student).one().student_code == "STD001"

    def test_rerun_keeps_ids(self, session):
        first = {email: user.id for email, user in seed_demo_users(session).items()}
        created = session.query(User).filter(User.email == "admin@demo.com").one().updated_at

        second = seed_demo_users(session)
        session.expire_all()

        assert {email: user.id for email, user in second.items()} == first
        assert session.query(User).count() == 4
        assert session.query(Staff).count() == 3
        assert session.query(User).filter(User.email == "admin@demo.com").one().updated_at >= created

    def test_student_enrolled_when_journey_exists(self, session):
        seed_journey_course(session)

        seed_demo_users(session)

        enrollment = session.query(StudentCourseEnrollment).one()
        first_book = session.query(Book).filter(Book.display_order == 1).one()
        assert enrollment.current_book_id == first_book.id
        assert enrollment.current_unit_id == first_book.units[0].id

    def test_no_course_enrollment_without_journey(self, session):
        seed_demo_users(session)

        assert session.query(StudentCourseEnrollment).count() == 0
