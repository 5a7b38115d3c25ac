import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional
from sqlalchemy.orm import Session
from school_backend.interface.base import BaseEntityGet, BaseEntityList, EntityInterface, ListQuery
from school_backend.model.schedule import ClassSlot
from school_backend.services.scheduling import validate_class_slot

TIME_PATTERN = r'^([01]\d|2[0-3]):[0-5]\d$'

class AttendanceStatus(str, Enum):
    present = "present"
    absent = "absent"
    justified = "justified"

class EnrollmentStatus(str, Enum):
    active = "active"
    dropped = "dropped"
    completed = "completed"

class ClassSlotCreate(BaseModel):
    book_id: str = Field(description="Book taught in the class")
    teacher_id: str = Field(description="Teaching user")
    unit_id: Optional[str] = Field(None, description="School unit hosting the class")
    name: str = Field(min_length=1, max_length=255)
    day_of_week: int = Field(ge=1, le=6, description="1=Monday .. 6=Saturday")
    start_time: str = Field(pattern=TIME_PATTERN, description="Start time HH:MM")
    end_time: str = Field(pattern=TIME_PATTERN, description="End time HH:MM")
    room: Optional[str] = Field(None, max_length=255)
    max_students: Optional[int] = Field(None, ge=1)
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    is_active: Optional[bool] = None

    @model_validator(mode='after')
    def validate_time_range(self):
        if self.start_time >= self.end_time:
            raise ValueError('start_time must be before end_time')
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError('start_date must not be after end_date')
        return self

    model_config = ConfigDict(extra='forbid')

class ClassSlotGet(BaseEntityGet):
    id: str
    book_id: str
    teacher_id: str
    unit_id: Optional[str] = None
    name: str
    day_of_week: int
    start_time: str
    end_time: str
    room: Optional[str] = None
    max_students: int
    current_students: int
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    current_day: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class ClassSlotList(BaseEntityList):
    id: str
    book_id: str
    teacher_id: str
    unit_id: Optional[str] = None
    name: str
    day_of_week: int
    start_time: str
    end_time: str
    room: Optional[str] = None
    current_students: int
    max_students: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class ClassSlotUpdate(BaseModel):
    book_id: Optional[str] = None
    teacher_id: Optional[str] = None
    unit_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    day_of_week: Optional[int] = Field(None, ge=1, le=6)
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    room: Optional[str] = None
    max_students: Optional[int] = Field(None, ge=1)
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    current_day: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None

    model_config = ConfigDict(extra='forbid')

class ClassSlotQuery(ListQuery):
    id: Optional[str] = None
    book_id: Optional[str] = None
    teacher_id: Optional[str] = None
    unit_id: Optional[str] = None
    day_of_week: Optional[int] = None
    is_active: Optional[bool] = None

def class_slot_search(db: Session, query, params: Optional[ClassSlotQuery]):

    if params.id != None:
        query = query.filter(ClassSlot.id == params.id)
    if params.book_id != None:
        query = query.filter(ClassSlot.book_id == params.book_id)
    if params.teacher_id != None:
        query = query.filter(ClassSlot.teacher_id == params.teacher_id)
    if params.unit_id != None:
        query = query.filter(ClassSlot.unit_id == params.unit_id)
    if params.day_of_week != None:
        query = query.filter(ClassSlot.day_of_week == params.day_of_week)
    if params.is_active != None:
        query = query.filter(ClassSlot.is_active == params.is_active)

    return query.order_by(ClassSlot.day_of_week, ClassSlot.start_time)

class ClassSlotInterface(EntityInterface):
    create = ClassSlotCreate
    get = ClassSlotGet
    list = ClassSlotList
    update = ClassSlotUpdate
    query = ClassSlotQuery
    search = class_slot_search
    endpoint = "classes"
    model = ClassSlot
    permission_category = "classes"
    pre_create = validate_class_slot
    pre_update = validate_class_slot

# Enrollments

class ClassEnrollmentCreate(BaseModel):
    student_id: str
    enrollment_date: Optional[datetime.date] = None

    model_config = ConfigDict(extra='forbid')

class ClassEnrollmentGet(BaseEntityGet):
    id: str
    class_id: str
    student_id: str
    enrollment_date: Optional[datetime.date] = None
    status: EnrollmentStatus

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

# Attendance

class AttendanceMark(BaseModel):
    student_id: str
    status: AttendanceStatus
    notes: Optional[str] = Field(None, max_length=4096)

    model_config = ConfigDict(use_enum_values=True, extra='forbid')

class AttendanceMarkRequest(BaseModel):
    date: datetime.date
    records: List[AttendanceMark] = Field(min_length=1)

    model_config = ConfigDict(extra='forbid')

class AttendanceBulkRequest(BaseModel):
    date: datetime.date
    status: AttendanceStatus

    model_config = ConfigDict(use_enum_values=True, extra='forbid')

class AttendanceRecordGet(BaseEntityGet):
    id: str
    class_id: str
    student_id: str
    date: datetime.date
    status: AttendanceStatus
    notes: Optional[str] = None
    recorded_by: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

class RosterEntry(BaseModel):
    student_id: str
    student_code: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None

    model_config = ConfigDict(use_enum_values=True)

class AttendanceRoster(BaseModel):
    class_id: str
    date: datetime.date
    students: List[RosterEntry]

# Schedules

class ScheduleSlot(BaseModel):
    day_of_week: int
    start_time: str
    end_time: str

class OccupiedSlot(ScheduleSlot):
    class_id: str
    class_name: str
    book_name: Optional[str] = None
    room: Optional[str] = None

class TeacherSchedule(BaseModel):
    teacher_id: str
    occupied_slots: List[OccupiedSlot]
    available_slots: List[ScheduleSlot]

class AdminScheduleEntry(ScheduleSlot):
    class_id: str
    class_name: str
    room: Optional[str] = None
    teacher_id: str
    teacher_name: Optional[str] = None
    book_id: str
    book_name: Optional[str] = None
    book_color: Optional[str] = None
    current_students: int
    max_students: int
    is_active: bool
