import datetime
from typing import Dict, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from school_backend.model.course import Course
from school_backend.model.school import Staff, Student
from school_backend.model.schedule import ClassSlot, Lesson


def _count(db: Session, column, *criteria) -> int:
    return db.query(func.count(column)).filter(*criteria).scalar() or 0


def get_dashboard_stats(db: Session, today: Optional[datetime.date] = None) -> Dict[str, int]:
    """Head counts of the active records shown on the dashboard."""
    today = today or datetime.date.today()

    return {
        "total_students": _count(db, Student.id, Student.status == "active"),
        "total_staff": _count(db, Staff.id, Staff.is_active == True),
        "total_courses": _count(db, Course.id, Course.is_active == True),
        "total_classes": _count(db, ClassSlot.id, ClassSlot.is_active == True),
        "lessons_today": _count(db, Lesson.id, Lesson.date == today, Lesson.status != "cancelled"),
    }
