"""
Dated lessons.

A lesson is one dated meeting of a weekly class. A teacher cannot give two
lessons at overlapping times on the same date; cancelled lessons free their
time. Overlap uses the same half open ranges as weekly class slots.
"""

import datetime
from typing import List, Optional
from sqlalchemy.orm import Query, Session, joinedload

from school_backend.api.exceptions import ConflictException, ValidationException
from school_backend.model.auth import User
from school_backend.model.schedule import ClassSlot, Lesson
from school_backend.services.curriculum import require_entity
from school_backend.services.scheduling import parse_time, ranges_overlap

_LESSON_FIELDS = ("class_id", "date", "start_time", "end_time", "status")


def find_lesson_conflicts(
    db: Session,
    teacher_id: str,
    date: datetime.date,
    start_time: str,
    end_time: str,
    exclude_id: Optional[str] = None
) -> List[Lesson]:
    """Lessons of a teacher on a date overlapping [start_time, end_time)."""

    start, end = parse_time(start_time), parse_time(end_time)
    if start >= end:
        raise ValidationException(detail="Start time must be before end time")

    query = (
        db.query(Lesson)
        .join(ClassSlot, ClassSlot.id == Lesson.class_id)
        .filter(
            ClassSlot.teacher_id == teacher_id,
            Lesson.date == date,
            Lesson.status != "cancelled"
        )
    )
    if exclude_id is not None:
        query = query.filter(Lesson.id != exclude_id)

    return [
        lesson for lesson in query.order_by(Lesson.start_time).all()
        if ranges_overlap(start, end, parse_time(lesson.start_time), parse_time(lesson.end_time))
    ]


def validate_lesson(data: dict, db: Session, current: Optional[Lesson] = None) -> dict:
    values = {key: getattr(current, key) for key in _LESSON_FIELDS} if current is not None else {"status": "scheduled"}
    values.update({key: value for key, value in data.items() if key in _LESSON_FIELDS})

    class_slot = require_entity(db, ClassSlot, values.get("class_id"), "Class")

    if parse_time(values.get("start_time")) >= parse_time(values.get("end_time")):
        raise ValidationException(detail="Start time must be before end time")

    if values.get("status") == "cancelled":
        return data

    conflicts = find_lesson_conflicts(
        db,
        class_slot.teacher_id,
        values["date"],
        values["start_time"],
        values["end_time"],
        exclude_id=current.id if current is not None else None
    )

    if conflicts:
        conflict = conflicts[0]
        raise ConflictException(detail={
            "message": "Scheduling conflict: teacher already has a lesson at this time",
            "conflicting_lesson_id": conflict.id,
            "date": conflict.date.isoformat(),
            "start_time": conflict.start_time,
            "end_time": conflict.end_time,
        })

    return data


def lessons_by_class(query: Query, class_id: str) -> List[Lesson]:
    return query.filter(Lesson.class_id == class_id).order_by(Lesson.date, Lesson.start_time).all()


def lessons_by_teacher(query: Query, teacher_id: str, db: Session) -> List[Lesson]:
    require_entity(db, User, teacher_id, "Teacher")

    return (
        query.join(ClassSlot, ClassSlot.id == Lesson.class_id)
        .filter(ClassSlot.teacher_id == teacher_id)
        .order_by(Lesson.date, Lesson.start_time)
        .all()
    )


def lessons_on(query: Query, date: datetime.date) -> List[Lesson]:
    return (
        query.options(joinedload(Lesson.class_slot))
        .filter(Lesson.date == date)
        .order_by(Lesson.start_time)
        .all()
    )
