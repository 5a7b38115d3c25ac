"""
Weekly class slots.

Days are numbered 1 (Monday) to 6 (Saturday) and times are "HH:MM" strings.
Two active slots of the same teacher on the same day may not overlap;
ranges are half open so a class ending at 15:00 and one starting at 15:00
can be taught back to back.
"""

import re
from typing import Dict, List, Optional, Tuple
from sqlalchemy.orm import Session, joinedload

from school_backend.api.exceptions import ConflictException, ValidationException
from school_backend.model.auth import User
from school_backend.model.course import Book
from school_backend.model.school import SchoolUnit
from school_backend.model.schedule import ClassSlot
from school_backend.services.curriculum import require_entity

MIN_DAY = 1
MAX_DAY = 6

# Hourly grid offered as free slots in a teacher's schedule
AVAILABLE_FIRST_HOUR = 8
AVAILABLE_LAST_HOUR = 21

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

_SLOT_FIELDS = ("teacher_id", "book_id", "unit_id", "day_of_week", "start_time", "end_time", "start_date", "end_date", "is_active")


def parse_time(value: str) -> int:
    """Minutes since midnight of an "HH:MM" string."""
    match = _TIME_PATTERN.match(value or "")
    if match is None:
        raise ValidationException(detail=f"Invalid time [{value}], expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def ranges_overlap(start: int, end: int, other_start: int, other_end: int) -> bool:
    return start < other_end and other_start < end


def find_conflicting_slot(
    db: Session,
    teacher_id: str,
    day_of_week: int,
    start_time: str,
    end_time: str,
    exclude_id: Optional[str] = None
) -> Optional[ClassSlot]:
    start, end = parse_time(start_time), parse_time(end_time)

    query = db.query(ClassSlot).filter(
        ClassSlot.teacher_id == teacher_id,
        ClassSlot.day_of_week == day_of_week,
        ClassSlot.is_active == True
    )
    if exclude_id is not None:
        query = query.filter(ClassSlot.id != exclude_id)

    for slot in query.all():
        if ranges_overlap(start, end, parse_time(slot.start_time), parse_time(slot.end_time)):
            return slot

    return None


def validate_class_slot(data: dict, db: Session, current: Optional[ClassSlot] = None) -> dict:
    values = {key: getattr(current, key) for key in _SLOT_FIELDS} if current is not None else {"is_active": True}
    values.update({key: value for key, value in data.items() if key in _SLOT_FIELDS})

    day_of_week = values.get("day_of_week")
    if day_of_week is None or not MIN_DAY <= day_of_week <= MAX_DAY:
        raise ValidationException(detail=f"Day of week must be between {MIN_DAY} and {MAX_DAY}")

    if parse_time(values.get("start_time")) >= parse_time(values.get("end_time")):
        raise ValidationException(detail="Start time must be before end time")

    if values.get("start_date") and values.get("end_date") and values["start_date"] > values["end_date"]:
        raise ValidationException(detail="Start date must not be after end date")

    require_entity(db, User, values.get("teacher_id"), "Teacher")
    require_entity(db, Book, values.get("book_id"))
    if values.get("unit_id") is not None:
        require_entity(db, SchoolUnit, values["unit_id"], "Unit")

    if values.get("is_active") is False:
        return data

    conflict = find_conflicting_slot(
        db,
        values["teacher_id"],
        day_of_week,
        values["start_time"],
        values["end_time"],
        exclude_id=current.id if current is not None else None
    )

    if conflict is not None:
        raise ConflictException(detail={
            "message": "Scheduling conflict: teacher already has a class at this time",
            "conflicting_class_id": conflict.id,
            "day_of_week": conflict.day_of_week,
            "start_time": conflict.start_time,
            "end_time": conflict.end_time,
        })

    return data


def get_teacher_schedule(teacher_id: str, db: Session) -> Tuple[List[ClassSlot], List[Dict]]:
    """Occupied slots of a teacher and the free hourly slots around them."""

    require_entity(db, User, teacher_id, "Teacher")

    occupied = (
        db.query(ClassSlot)
        .options(joinedload(ClassSlot.book))
        .filter(ClassSlot.teacher_id == teacher_id, ClassSlot.is_active == True)
        .order_by(ClassSlot.day_of_week, ClassSlot.start_time)
        .all()
    )

    busy: Dict[int, List[Tuple[int, int]]] = {}
    for slot in occupied:
        busy.setdefault(slot.day_of_week, []).append((parse_time(slot.start_time), parse_time(slot.end_time)))

    available = []
    for day in range(MIN_DAY, MAX_DAY + 1):
        for hour in range(AVAILABLE_FIRST_HOUR, AVAILABLE_LAST_HOUR + 1):
            start, end = hour * 60, (hour + 1) * 60
            if any(ranges_overlap(start, end, b_start, b_end) for b_start, b_end in busy.get(day, [])):
                continue
            available.append({
                "day_of_week": day,
                "start_time": format_time(start),
                "end_time": format_time(end),
            })

    return occupied, available


def get_admin_schedule(db: Session) -> List[ClassSlot]:
    return (
        db.query(ClassSlot)
        .options(joinedload(ClassSlot.book), joinedload(ClassSlot.teacher))
        .order_by(ClassSlot.day_of_week, ClassSlot.start_time)
        .all()
    )
