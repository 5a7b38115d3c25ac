import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional
from sqlalchemy.orm import Session
from school_backend.interface.base import BaseEntityGet, BaseEntityList, EntityInterface, ListQuery
from school_backend.interface.classes import TIME_PATTERN
from school_backend.model.schedule import Lesson
from school_backend.services.lessons import validate_lesson

class LessonStatus(str, Enum):
    scheduled = "scheduled"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"

class LessonCreate(BaseModel):
    class_id: str = Field(description="Class the lesson belongs to")
    title: str = Field(min_length=1, max_length=255)
    book_day: int = Field(ge=1, description="Day of the book taught in this lesson")
    date: datetime.date
    start_time: str = Field(pattern=TIME_PATTERN, description="Start time HH:MM")
    end_time: str = Field(pattern=TIME_PATTERN, description="End time HH:MM")
    room: Optional[str] = Field(None, max_length=255)
    status: Optional[LessonStatus] = None
    notes: Optional[str] = Field(None, max_length=4096)

    @model_validator(mode='after')
    def validate_time_range(self):
        if self.start_time >= self.end_time:
            raise ValueError('start_time must be before end_time')
        return self

    model_config = ConfigDict(use_enum_values=True, extra='forbid')

class LessonGet(BaseEntityGet):
    id: str
    class_id: str
    title: str
    book_day: int
    date: datetime.date
    start_time: str
    end_time: str
    room: Optional[str] = None
    status: LessonStatus
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

class LessonList(BaseEntityList):
    id: str
    class_id: str
    title: str
    book_day: int
    date: datetime.date
    start_time: str
    end_time: str
    room: Optional[str] = None
    status: LessonStatus

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

class LessonUpdate(BaseModel):
    class_id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    book_day: Optional[int] = Field(None, ge=1)
    date: Optional[datetime.date] = None
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    room: Optional[str] = None
    status: Optional[LessonStatus] = None
    notes: Optional[str] = Field(None, max_length=4096)

    model_config = ConfigDict(use_enum_values=True, extra='forbid')

class LessonQuery(ListQuery):
    id: Optional[str] = None
    class_id: Optional[str] = None
    date: Optional[datetime.date] = None
    date_from: Optional[datetime.date] = None
    date_to: Optional[datetime.date] = None
    status: Optional[LessonStatus] = None

    model_config = ConfigDict(use_enum_values=True)

def lesson_search(db: Session, query, params: Optional[LessonQuery]):

    if params.id != None:
        query = query.filter(Lesson.id == params.id)
    if params.class_id != None:
        query = query.filter(Lesson.class_id == params.class_id)
    if params.date != None:
        query = query.filter(Lesson.date == params.date)
    if params.date_from != None:
        query = query.filter(Lesson.date >= params.date_from)
    if params.date_to != None:
        query = query.filter(Lesson.date <= params.date_to)
    if params.status != None:
        query = query.filter(Lesson.status == params.status)

    # Most recent first
    return query.order_by(Lesson.date.desc(), Lesson.start_time)

class LessonInterface(EntityInterface):
    create = LessonCreate
    get = LessonGet
    list = LessonList
    update = LessonUpdate
    query = LessonQuery
    search = lesson_search
    endpoint = "lessons"
    model = Lesson
    permission_category = "lessons"
    pre_create = validate_lesson
    pre_update = validate_lesson

# Conflict check

class LessonConflictCheck(BaseModel):
    teacher_id: str
    date: datetime.date
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)
    exclude_lesson_id: Optional[str] = None

    model_config = ConfigDict(extra='forbid')

class LessonConflictResult(BaseModel):
    has_conflict: bool
    conflicts: List[LessonList]
