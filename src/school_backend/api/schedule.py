from typing import Annotated, List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from school_backend.database import get_db
from school_backend.interface.classes import AdminScheduleEntry, OccupiedSlot, ScheduleSlot, TeacherSchedule
from school_backend.permissions.auth import get_current_permissions
from school_backend.permissions.core import require_permission
from school_backend.permissions.principal import Principal
from school_backend.services.scheduling import get_admin_schedule, get_teacher_schedule

schedule_router = APIRouter()

@schedule_router.get("/teachers/{teacher_id}", response_model=TeacherSchedule)
def get_teacher_schedule_route(permissions: Annotated[Principal, Depends(get_current_permissions)], teacher_id: str, db: Session = Depends(get_db)):

    # Teachers may always look at their own week
    if teacher_id != permissions.user_id:
        require_permission(permissions, ["access_schedule", "read_lessons"])

    occupied, available = get_teacher_schedule(teacher_id, db)

    return TeacherSchedule(
        teacher_id=teacher_id,
        occupied_slots=[
            OccupiedSlot(
                class_id=slot.id,
                class_name=slot.name,
                book_name=slot.book.name if slot.book != None else None,
                room=slot.room,
                day_of_week=slot.day_of_week,
                start_time=slot.start_time,
                end_time=slot.end_time
            )
            for slot in occupied
        ],
        available_slots=[ScheduleSlot(**slot) for slot in available]
    )

@schedule_router.get("/admin", response_model=List[AdminScheduleEntry])
def get_admin_schedule_route(permissions: Annotated[Principal, Depends(get_current_permissions)], db: Session = Depends(get_db)):

    require_permission(permissions, "access_schedule")

    entries = []
    for slot in get_admin_schedule(db):
        teacher = slot.teacher
        book = slot.book
        entries.append(AdminScheduleEntry(
            class_id=slot.id,
            class_name=slot.name,
            room=slot.room,
            day_of_week=slot.day_of_week,
            start_time=slot.start_time,
            end_time=slot.end_time,
            teacher_id=slot.teacher_id,
            teacher_name=" ".join(filter(None, [teacher.first_name, teacher.last_name])) if teacher != None else None,
            book_id=slot.book_id,
            book_name=book.name if book != None else None,
            book_color=book.color if book != None else None,
            current_students=slot.current_students,
            max_students=slot.max_students,
            is_active=slot.is_active
        ))

    return entries
