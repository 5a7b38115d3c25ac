"""
Curriculum hierarchy rules: Course -> Book -> CourseUnit -> CourseVideo -> CourseActivity.

Every validator takes the incoming column values and, on update, the row
being changed. A missing parent raises NotFoundException, a sibling already
holding the requested position raises ConflictException.
"""

from typing import Any, Optional
from sqlalchemy.orm import Session, selectinload

from school_backend.api.exceptions import ConflictException, NotFoundException, ValidationException
from school_backend.model.course import Book, Course, CourseActivity, CourseUnit, CourseVideo

UNIT_TYPES = ("lesson", "checkpoint", "review")
ACTIVITY_TYPES = ("multiple_choice", "fill_blank", "speaking", "listening", "writing", "unscramble")
MIN_DAY_NUMBER = 1
MAX_DAY_NUMBER = 6


def _merged(data: dict, current: Any, key: str, default: Any = None) -> Any:
    if key in data:
        return data[key]
    if current is not None:
        return getattr(current, key)
    return default


def require_entity(db: Session, model: Any, id: Optional[str], label: Optional[str] = None):
    entity = db.query(model).filter(model.id == id).first() if id is not None else None
    if entity is None:
        raise NotFoundException(detail=f"{label or model.__name__} with id [{id}] not found")
    return entity


def validate_book(data: dict, db: Session, current: Optional[Book] = None) -> dict:
    course_id = _merged(data, current, "course_id")
    display_order = _merged(data, current, "display_order", 1)

    require_entity(db, Course, course_id)

    query = db.query(Book.id).filter(Book.course_id == course_id, Book.display_order == display_order)
    if current is not None:
        query = query.filter(Book.id != current.id)

    if query.first() is not None:
        raise ConflictException(detail=f"Course [{course_id}] already has a book at display order {display_order}")

    return data


def validate_course_unit(data: dict, db: Session, current: Optional[CourseUnit] = None) -> dict:
    book_id = _merged(data, current, "book_id")
    display_order = _merged(data, current, "display_order")
    unit_type = _merged(data, current, "unit_type", "lesson")

    if unit_type not in UNIT_TYPES:
        raise ValidationException(detail=f"Unit type must be one of {', '.join(UNIT_TYPES)}")

    require_entity(db, Book, book_id)

    query = db.query(CourseUnit.id).filter(CourseUnit.book_id == book_id, CourseUnit.display_order == display_order)
    if current is not None:
        query = query.filter(CourseUnit.id != current.id)

    if query.first() is not None:
        raise ConflictException(detail=f"Book [{book_id}] already has a unit at display order {display_order}")

    return data


def validate_course_video(data: dict, db: Session, current: Optional[CourseVideo] = None) -> dict:
    unit_id = _merged(data, current, "unit_id")
    day_number = _merged(data, current, "day_number")

    if day_number is None or not MIN_DAY_NUMBER <= day_number <= MAX_DAY_NUMBER:
        raise ValidationException(detail=f"Day number must be between {MIN_DAY_NUMBER} and {MAX_DAY_NUMBER}")

    # checkpoint and review units may carry videos as well
    require_entity(db, CourseUnit, unit_id, "Course unit")

    query = db.query(CourseVideo.id).filter(CourseVideo.unit_id == unit_id, CourseVideo.day_number == day_number)
    if current is not None:
        query = query.filter(CourseVideo.id != current.id)

    if query.first() is not None:
        raise ConflictException(detail=f"Course unit [{unit_id}] already has a video for day {day_number}")

    return data


def validate_course_activity(data: dict, db: Session, current: Optional[CourseActivity] = None) -> dict:
    video_id = _merged(data, current, "video_id")
    activity_type = _merged(data, current, "activity_type")

    if activity_type not in ACTIVITY_TYPES:
        raise ValidationException(detail=f"Activity type must be one of {', '.join(ACTIVITY_TYPES)}")

    require_entity(db, CourseVideo, video_id, "Course video")

    query = db.query(CourseActivity.id).filter(CourseActivity.video_id == video_id)
    if current is not None:
        query = query.filter(CourseActivity.id != current.id)

    if query.first() is not None:
        raise ConflictException(detail=f"Course video [{video_id}] already has an activity")

    return data


def get_course_tree(course_id: str, db: Session) -> Course:
    """Load a course with its books, units, videos and activities.

    Ordering comes from the relationship definitions: books and units by
    display_order, videos by day_number.
    """
    course = (
        db.query(Course)
        .options(
            selectinload(Course.books)
            .selectinload(Book.units)
            .selectinload(CourseUnit.videos)
            .selectinload(CourseVideo.activity)
        )
        .filter(Course.id == course_id)
        .first()
    )

    if course is None:
        raise NotFoundException(detail=f"Course with id [{course_id}] not found")

    return course
