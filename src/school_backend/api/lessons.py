import datetime
from typing import Annotated, List
from fastapi import Depends
from sqlalchemy.orm import Session

from school_backend.api.api_builder import CrudRouter
from school_backend.database import get_db
from school_backend.interface.lessons import (
    LessonConflictCheck, LessonConflictResult, LessonInterface, LessonList
)
from school_backend.model.schedule import Lesson
from school_backend.permissions.auth import get_current_permissions
from school_backend.permissions.core import check_permissions
from school_backend.permissions.principal import Principal
from school_backend.services.lessons import find_lesson_conflicts, lessons_by_class, lessons_by_teacher, lessons_on

lesson_router = CrudRouter(LessonInterface)

@lesson_router.router.get("/today", response_model=List[LessonList])
def get_todays_lessons(permissions: Annotated[Principal, Depends(get_current_permissions)], db: Session = Depends(get_db)):

    query = check_permissions(permissions, Lesson, "list", db)

    return lessons_on(query, datetime.date.today())

@lesson_router.router.get("/class/{class_id}", response_model=List[LessonList])
def get_class_lessons(permissions: Annotated[Principal, Depends(get_current_permissions)], class_id: str, db: Session = Depends(get_db)):

    query = check_permissions(permissions, Lesson, "list", db)

    return lessons_by_class(query, class_id)

@lesson_router.router.get("/teacher/{teacher_id}", response_model=List[LessonList])
def get_teacher_lessons(permissions: Annotated[Principal, Depends(get_current_permissions)], teacher_id: str, db: Session = Depends(get_db)):

    query = check_permissions(permissions, Lesson, "list", db)

    return lessons_by_teacher(query, teacher_id, db)

@lesson_router.router.post("/check-conflicts", response_model=LessonConflictResult)
def post_check_conflicts(permissions: Annotated[Principal, Depends(get_current_permissions)], payload: LessonConflictCheck, db: Session = Depends(get_db)):

    check_permissions(permissions, Lesson, "list", db)

    conflicts = find_lesson_conflicts(
        db,
        payload.teacher_id,
        payload.date,
        payload.start_time,
        payload.end_time,
        exclude_id=payload.exclude_lesson_id
    )

    return LessonConflictResult(
        has_conflict=len(conflicts) > 0,
        conflicts=[LessonList.model_validate(lesson, from_attributes=True) for lesson in conflicts]
    )
