"""
Curriculum hierarchy rules and the course tree.
"""

import pytest

from school_backend.api.exceptions import ConflictException, NotFoundException, ValidationException
from school_backend.interface.courses import BookCreate, CourseTree, CourseVideoCreate
from school_backend.model.course import Book, Course, CourseActivity, CourseUnit, CourseVideo
from school_backend.services.curriculum import (
    get_course_tree,
    validate_book,
    validate_course_activity,
    validate_course_unit,
    validate_course_video,
)


@pytest.fixture
def course(session):
    course = Course(name="English Basics", language="English", level="beginner")
    session.add(course)
    session.commit()
    return course


@pytest.fixture
def book(session, course):
    book = Book(course_id=course.id, name="Book One", display_order=1)
    session.add(book)
    session.commit()
    return book


@pytest.fixture
def unit(session, book):
    unit = CourseUnit(book_id=book.id, name="Unit 01", display_order=1)
    session.add(unit)
    session.commit()
    return unit


@pytest.fixture
def video(session, unit):
    video = CourseVideo(unit_id=unit.id, day_number=1, title="Day 1", video_url="https://videos.school.com/1")
    session.add(video)
    session.commit()
    return video


@pytest.mark.unit
class TestBookRules:
    """Books are unique per course display order"""

    def test_new_position_accepted(self, session, course, book):
        data = {"course_id": course.id, "name": "Book Two", "display_order": 2}

        assert validate_book(data, session) == data

    def test_duplicate_display_order_conflicts(self, session, course, book):
        with pytest.raises(ConflictException):
            validate_book({"course_id": course.id, "name": "Other", "display_order": 1}, session)

    def test_missing_course(self, session):
        with pytest.raises(NotFoundException):
            validate_book({"course_id": "missing", "name": "Book", "display_order": 1}, session)

    def test_update_keeping_own_position(self, session, book):
        assert validate_book({"name": "Renamed"}, session, current=book) == {"name": "Renamed"}

    def test_update_moving_onto_sibling_conflicts(self, session, course, book):
        sibling = Book(course_id=course.id, name="Book Two", display_order=2)
        session.add(sibling)
        session.commit()

        with pytest.raises(ConflictException):
            validate_book({"display_order": 1}, session, current=sibling)

    def test_invalid_color_rejected_by_schema(self, course):
        with pytest.raises(ValueError):
            BookCreate(course_id=course.id, name="Book", color="blue")


@pytest.mark.unit
class TestCourseUnitRules:
    """Units are unique per book display order"""

    def test_duplicate_display_order_conflicts(self, session, book, unit):
        with pytest.raises(ConflictException):
            validate_course_unit({"book_id": book.id, "name": "Again", "display_order": 1}, session)

    def test_same_order_in_another_book_is_fine(self, session, course, unit):
        other_book = Book(course_id=course.id, name="Book Two", display_order=2)
        session.add(other_book)
        session.commit()

        data = {"book_id": other_book.id, "name": "Unit 01", "display_order": 1}
        assert validate_course_unit(data, session) == data

    def test_unknown_unit_type(self, session, book):
        with pytest.raises(ValidationException):
            validate_course_unit({"book_id": book.id, "name": "X", "display_order": 2, "unit_type": "exam"}, session)

    def test_missing_book(self, session):
        with pytest.raises(NotFoundException):
            validate_course_unit({"book_id": "missing", "name": "X", "display_order": 1}, session)


@pytest.mark.unit
class TestCourseVideoRules:
    """Videos carry a study day between 1 and 6, unique per unit"""

    @pytest.mark.parametrize("day", [0, 7])
    def test_day_out_of_range(self, session, unit, day):
        with pytest.raises(ValidationException):
            validate_course_video({"unit_id": unit.id, "day_number": day}, session)

    def test_schema_rejects_day_out_of_range(self, unit):
        with pytest.raises(ValueError):
            CourseVideoCreate(unit_id=unit.id, day_number=7, title="Day 7", video_url="https://videos.school.com/7")

    def test_duplicate_day_conflicts(self, session, unit, video):
        with pytest.raises(ConflictException):
            validate_course_video({"unit_id": unit.id, "day_number": 1}, session)

    def test_checkpoint_unit_may_have_videos(self, session, book):
        checkpoint = CourseUnit(book_id=book.id, name="Checkpoint", display_order=11, unit_type="checkpoint")
        session.add(checkpoint)
        session.commit()

        data = {"unit_id": checkpoint.id, "day_number": 1}
        assert validate_course_video(data, session) == data


@pytest.mark.unit
class TestCourseActivityRules:
    """One activity per video"""

    def test_second_activity_conflicts(self, session, video):
        session.add(CourseActivity(video_id=video.id, activity_type="speaking", title="Say it", content={}))
        session.commit()

        with pytest.raises(ConflictException):
            validate_course_activity({"video_id": video.id, "activity_type": "listening"}, session)

    def test_unknown_activity_type(self, session, video):
        with pytest.raises(ValidationException):
            validate_course_activity({"video_id": video.id, "activity_type": "dancing"}, session)

    def test_missing_video(self, session):
        with pytest.raises(NotFoundException):
            validate_course_activity({"video_id": "missing", "activity_type": "speaking"}, session)


@pytest.mark.unit
class TestCourseTree:
    """Nested read of a whole course"""

    def test_children_are_ordered(self, session, course):
        second = Book(course_id=course.id, name="Book Two", display_order=2)
        first = Book(course_id=course.id, name="Book One", display_order=1)
        session.add_all([second, first])
        session.flush()
        session.add_all([
            CourseUnit(book_id=first.id, name="Unit 02", display_order=2),
            CourseUnit(book_id=first.id, name="Unit 01", display_order=1),
        ])
        session.commit()
        session.expire_all()

        tree = CourseTree.model_validate(get_course_tree(course.id, session), from_attributes=True)

        assert [b.name for b in tree.books] == ["Book One", "Book Two"]
        assert [u.name for u in tree.books[0].units] == ["Unit 01", "Unit 02"]
        assert tree.books[1].units == []

    def test_videos_and_activity_included(self, session, course, unit, video):
        session.add(CourseActivity(video_id=video.id, activity_type="speaking", title="Say it", content={"q": 1}))
        session.commit()
        session.expire_all()

        tree = CourseTree.model_validate(get_course_tree(course.id, session), from_attributes=True)
        tree_video = tree.books[0].units[0].videos[0]

        assert tree_video.day_number == 1
        assert tree_video.activity.activity_type == "speaking"

    def test_missing_course(self, session):
        with pytest.raises(NotFoundException):
            get_course_tree("missing", session)
