"""
Class enrollments and per-date attendance.

The roster of a class is the set of its active enrollments. Attendance is
stored once per (class, student, date); marking again overwrites the status.
"""

import logging
from datetime import date
from typing import Iterable, List, Optional, Tuple
from sqlalchemy import exc
from sqlalchemy.orm import Session, joinedload

from school_backend.api.exceptions import (
    ConflictException, NotFoundException, ValidationException,
    integrity_error_to_http_exception
)
from school_backend.model.school import Student
from school_backend.model.schedule import AttendanceRecord, ClassEnrollment, ClassSlot
from school_backend.services.curriculum import require_entity

logger = logging.getLogger(__name__)

ATTENDANCE_STATUSES = ("present", "absent", "justified")
ENROLLMENT_ACTIVE = "active"
ENROLLMENT_DROPPED = "dropped"


def _active_enrollments(class_id: str, db: Session):
    return db.query(ClassEnrollment).filter(
        ClassEnrollment.class_id == class_id,
        ClassEnrollment.status == ENROLLMENT_ACTIVE
    )


def _refresh_student_count(class_slot: ClassSlot, db: Session):
    class_slot.current_students = _active_enrollments(class_slot.id, db).count()


def enroll_student(class_id: str, student_id: str, db: Session, enrollment_date: Optional[date] = None) -> ClassEnrollment:
    class_slot = require_entity(db, ClassSlot, class_id, "Class")
    require_entity(db, Student, student_id)

    active = _active_enrollments(class_id, db)

    if active.filter(ClassEnrollment.student_id == student_id).first() is not None:
        raise ConflictException(detail=f"Student [{student_id}] is already enrolled in class [{class_id}]")

    if active.count() >= class_slot.max_students:
        raise ConflictException(detail=f"Class [{class_id}] is full ({class_slot.max_students} students)")

    try:
        enrollment = ClassEnrollment(class_id=class_id, student_id=student_id, status=ENROLLMENT_ACTIVE)
        if enrollment_date is not None:
            enrollment.enrollment_date = enrollment_date
        db.add(enrollment)
        db.flush()
        _refresh_student_count(class_slot, db)
        db.commit()
        db.refresh(enrollment)
    except exc.IntegrityError as e:
        db.rollback()
        raise integrity_error_to_http_exception(e)

    logger.info(f"Enrolled student {student_id} in class {class_id}")
    return enrollment


def drop_student(class_id: str, student_id: str, db: Session) -> ClassEnrollment:
    class_slot = require_entity(db, ClassSlot, class_id, "Class")

    enrollment = _active_enrollments(class_id, db).filter(ClassEnrollment.student_id == student_id).first()

    if enrollment is None:
        raise NotFoundException(detail=f"Student [{student_id}] is not enrolled in class [{class_id}]")

    enrollment.status = ENROLLMENT_DROPPED
    db.flush()
    _refresh_student_count(class_slot, db)
    db.commit()
    db.refresh(enrollment)

    return enrollment


def list_enrollments(class_id: str, db: Session, include_inactive: bool = False) -> List[ClassEnrollment]:
    require_entity(db, ClassSlot, class_id, "Class")

    query = db.query(ClassEnrollment).filter(ClassEnrollment.class_id == class_id)
    if not include_inactive:
        query = query.filter(ClassEnrollment.status == ENROLLMENT_ACTIVE)

    return query.order_by(ClassEnrollment.enrollment_date).all()


def validate_attendance_date(class_slot: ClassSlot, attendance_date: date):
    """Attendance can only be taken while the class runs, where its dates are set."""
    if class_slot.start_date is not None and attendance_date < class_slot.start_date:
        raise ValidationException(detail=f"Date {attendance_date} is before the class starts ({class_slot.start_date})")
    if class_slot.end_date is not None and attendance_date > class_slot.end_date:
        raise ValidationException(detail=f"Date {attendance_date} is after the class ends ({class_slot.end_date})")


def get_roster(class_id: str, attendance_date: date, db: Session) -> List[Tuple[Student, Optional[AttendanceRecord]]]:
    """Every actively enrolled student with their record for the date, if any."""
    require_entity(db, ClassSlot, class_id, "Class")

    students = (
        db.query(Student)
        .options(joinedload(Student.user))
        .join(ClassEnrollment, ClassEnrollment.student_id == Student.id)
        .filter(ClassEnrollment.class_id == class_id, ClassEnrollment.status == ENROLLMENT_ACTIVE)
        .order_by(Student.student_code)
        .all()
    )

    records = {
        record.student_id: record
        for record in db.query(AttendanceRecord).filter(
            AttendanceRecord.class_id == class_id,
            AttendanceRecord.date == attendance_date
        ).all()
    }

    return [(student, records.get(student.id)) for student in students]


def mark_attendance(
    class_id: str,
    attendance_date: date,
    marks: Iterable[Tuple[str, str, Optional[str]]],
    db: Session,
    recorded_by: Optional[str] = None
) -> List[AttendanceRecord]:
    """Upsert (student_id, status, notes) marks for one class and date in one transaction."""

    class_slot = require_entity(db, ClassSlot, class_id, "Class")
    validate_attendance_date(class_slot, attendance_date)

    roster_ids = {row[0] for row in _active_enrollments(class_id, db).with_entities(ClassEnrollment.student_id).all()}

    records = []
    try:
        for student_id, status, notes in marks:
            if status not in ATTENDANCE_STATUSES:
                raise ValidationException(detail=f"Attendance status must be one of {', '.join(ATTENDANCE_STATUSES)}")
            if student_id not in roster_ids:
                raise ValidationException(detail=f"Student [{student_id}] is not enrolled in class [{class_id}]")

            record = db.query(AttendanceRecord).filter(
                AttendanceRecord.class_id == class_id,
                AttendanceRecord.student_id == student_id,
                AttendanceRecord.date == attendance_date
            ).first()

            if record is None:
                record = AttendanceRecord(class_id=class_id, student_id=student_id, date=attendance_date)
                db.add(record)

            record.status = status
            record.recorded_by = recorded_by
            if notes is not None:
                record.notes = notes

            db.flush()
            records.append(record)

        db.commit()
    except exc.IntegrityError as e:
        db.rollback()
        raise integrity_error_to_http_exception(e)
    except Exception:
        db.rollback()
        raise

    for record in records:
        db.refresh(record)

    return records


def mark_all(class_id: str, attendance_date: date, status: str, db: Session, recorded_by: Optional[str] = None) -> List[AttendanceRecord]:
    """Give every roster member the same status for the date."""
    require_entity(db, ClassSlot, class_id, "Class")

    student_ids = [row[0] for row in _active_enrollments(class_id, db).with_entities(ClassEnrollment.student_id).all()]

    return mark_attendance(
        class_id,
        attendance_date,
        [(student_id, status, None) for student_id in student_ids],
        db,
        recorded_by
    )
