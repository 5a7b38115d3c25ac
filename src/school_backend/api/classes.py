import datetime
from typing import Annotated, List
from fastapi import Depends, status
from fastapi import Response
from sqlalchemy.orm import Session
from aiocache import BaseCache

from school_backend.api.api_builder import CrudRouter, clear_entity_cache
from school_backend.database import get_db
from school_backend.interface.classes import (
    AttendanceBulkRequest,
    AttendanceMarkRequest,
    AttendanceRecordGet,
    AttendanceRoster,
    ClassEnrollmentCreate,
    ClassEnrollmentGet,
    ClassSlotInterface,
    RosterEntry,
)
from school_backend.model.schedule import AttendanceRecord, ClassEnrollment, ClassSlot
from school_backend.permissions.auth import get_current_permissions
from school_backend.permissions.core import check_permissions
from school_backend.permissions.principal import Principal
from school_backend.redis_cache import get_redis_client
from school_backend.services.attendance import (
    drop_student, enroll_student, get_roster, list_enrollments, mark_all, mark_attendance
)

class_router = CrudRouter(ClassSlotInterface)

async def clear_class_caches(cache: BaseCache):
    for table in (ClassSlot.__tablename__, ClassEnrollment.__tablename__, AttendanceRecord.__tablename__):
        await clear_entity_cache(cache, table)

# Enrollments

@class_router.router.get("/{class_id}/enrollments", response_model=List[ClassEnrollmentGet])
def get_class_enrollments(permissions: Annotated[Principal, Depends(get_current_permissions)], class_id: str, include_inactive: bool = False, db: Session = Depends(get_db)):

    check_permissions(permissions, ClassEnrollment, "list", db)

    return list_enrollments(class_id, db, include_inactive=include_inactive)

@class_router.router.post("/{class_id}/enrollments", response_model=ClassEnrollmentGet, status_code=status.HTTP_201_CREATED)
async def post_class_enrollment(
    permissions: Annotated[Principal, Depends(get_current_permissions)],
    class_id: str,
    payload: ClassEnrollmentCreate,
    cache: Annotated[BaseCache, Depends(get_redis_client)],
    db: Session = Depends(get_db)
):
    check_permissions(permissions, ClassEnrollment, "create", db)

    enrollment = enroll_student(class_id, payload.student_id, db, enrollment_date=payload.enrollment_date)

    await clear_class_caches(cache)

    return enrollment

@class_router.router.delete("/{class_id}/enrollments/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_class_enrollment(
    permissions: Annotated[Principal, Depends(get_current_permissions)],
    class_id: str,
    student_id: str,
    cache: Annotated[BaseCache, Depends(get_redis_client)],
    db: Session = Depends(get_db)
):
    check_permissions(permissions, ClassEnrollment, "update", db)

    drop_student(class_id, student_id, db)

    await clear_class_caches(cache)

    return Response(status_code=status.HTTP_204_NO_CONTENT)

# Attendance

@class_router.router.get("/{class_id}/attendance", response_model=AttendanceRoster)
def get_class_attendance(permissions: Annotated[Principal, Depends(get_current_permissions)], class_id: str, date: datetime.date, db: Session = Depends(get_db)):

    check_permissions(permissions, AttendanceRecord, "list", db)

    entries = []
    for student, record in get_roster(class_id, date, db):
        user = student.user
        entries.append(RosterEntry(
            student_id=student.id,
            student_code=student.student_code,
            first_name=user.first_name if user != None else None,
            last_name=user.last_name if user != None else None,
            status=record.status if record != None else None,
            notes=record.notes if record != None else None
        ))

    return AttendanceRoster(class_id=class_id, date=date, students=entries)

@class_router.router.put("/{class_id}/attendance", response_model=List[AttendanceRecordGet])
async def put_class_attendance(
    permissions: Annotated[Principal, Depends(get_current_permissions)],
    class_id: str,
    payload: AttendanceMarkRequest,
    cache: Annotated[BaseCache, Depends(get_redis_client)],
    db: Session = Depends(get_db)
):
    check_permissions(permissions, AttendanceRecord, "update", db)

    records = mark_attendance(
        class_id,
        payload.date,
        [(mark.student_id, mark.status, mark.notes) for mark in payload.records],
        db,
        recorded_by=permissions.user_id
    )

    await clear_class_caches(cache)

    return records

@class_router.router.post("/{class_id}/attendance/bulk", response_model=List[AttendanceRecordGet])
async def post_class_attendance_bulk(
    permissions: Annotated[Principal, Depends(get_current_permissions)],
    class_id: str,
    payload: AttendanceBulkRequest,
    cache: Annotated[BaseCache, Depends(get_redis_client)],
    db: Session = Depends(get_db)
):
    check_permissions(permissions, AttendanceRecord, "update", db)

    records = mark_all(class_id, payload.date, payload.status, db, recorded_by=permissions.user_id)

    await clear_class_caches(cache)

    return records
