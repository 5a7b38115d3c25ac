from datetime import date
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from sqlalchemy.orm import Session
from school_backend.interface.base import BaseEntityGet, BaseEntityList, EntityInterface, ListQuery
from school_backend.model.course import StudentCourseEnrollment
from school_backend.model.school import Student

class StudentStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    suspended = "suspended"
    graduated = "graduated"

class StudentCreate(BaseModel):
    user_id: str = Field(description="User account of the student")
    student_code: str = Field(min_length=1, max_length=64, description="Unique registration code, e.g. STD001")
    unit_id: Optional[str] = Field(None, description="School unit the student attends")
    enrollment_date: Optional[date] = None
    status: Optional[StudentStatus] = None

    model_config = ConfigDict(use_enum_values=True, extra='forbid')

class StudentGet(BaseEntityGet):
    id: str
    user_id: str
    student_code: str
    unit_id: Optional[str] = None
    enrollment_date: Optional[date] = None
    status: str

    model_config = ConfigDict(from_attributes=True)

class StudentList(BaseEntityList):
    id: str
    user_id: str
    student_code: str
    unit_id: Optional[str] = None
    status: str

    model_config = ConfigDict(from_attributes=True)

class StudentUpdate(BaseModel):
    student_code: Optional[str] = Field(None, min_length=1, max_length=64)
    unit_id: Optional[str] = None
    enrollment_date: Optional[date] = None
    status: Optional[StudentStatus] = None

    model_config = ConfigDict(use_enum_values=True, extra='forbid')

class StudentQuery(ListQuery):
    id: Optional[str] = None
    user_id: Optional[str] = None
    student_code: Optional[str] = None
    unit_id: Optional[str] = None
    status: Optional[StudentStatus] = None

    model_config = ConfigDict(use_enum_values=True)

def student_search(db: Session, query, params: Optional[StudentQuery]):

    if params.id != None:
        query = query.filter(Student.id == params.id)
    if params.user_id != None:
        query = query.filter(Student.user_id == params.user_id)
    if params.student_code != None:
        query = query.filter(Student.student_code == params.student_code)
    if params.unit_id != None:
        query = query.filter(Student.unit_id == params.unit_id)
    if params.status != None:
        query = query.filter(Student.status == params.status)

    return query.order_by(Student.student_code)

class StudentInterface(EntityInterface):
    create = StudentCreate
    get = StudentGet
    list = StudentList
    update = StudentUpdate
    query = StudentQuery
    search = student_search
    endpoint = "students"
    model = Student
    permission_category = "students"


class StudentCourseEnrollmentCreate(BaseModel):
    student_id: str
    course_id: str
    current_book_id: Optional[str] = None
    current_unit_id: Optional[str] = None
    status: Optional[str] = Field(None, max_length=32)
    overall_progress: Optional[int] = Field(None, ge=0, le=100, description="Progress in percent")

    model_config = ConfigDict(extra='forbid')

class StudentCourseEnrollmentGet(BaseEntityGet):
    id: str
    student_id: str
    course_id: str
    current_book_id: Optional[str] = None
    current_unit_id: Optional[str] = None
    status: str
    overall_progress: int

    model_config = ConfigDict(from_attributes=True)

class StudentCourseEnrollmentUpdate(BaseModel):
    current_book_id: Optional[str] = None
    current_unit_id: Optional[str] = None
    status: Optional[str] = Field(None, max_length=32)
    overall_progress: Optional[int] = Field(None, ge=0, le=100)

    model_config = ConfigDict(extra='forbid')

class StudentCourseEnrollmentQuery(ListQuery):
    student_id: Optional[str] = None
    course_id: Optional[str] = None
    status: Optional[str] = None

def student_course_enrollment_search(db: Session, query, params: Optional[StudentCourseEnrollmentQuery]):

    if params.student_id != None:
        query = query.filter(StudentCourseEnrollment.student_id == params.student_id)
    if params.course_id != None:
        query = query.filter(StudentCourseEnrollment.course_id == params.course_id)
    if params.status != None:
        query = query.filter(StudentCourseEnrollment.status == params.status)

    return query

class StudentCourseEnrollmentInterface(EntityInterface):
    create = StudentCourseEnrollmentCreate
    get = StudentCourseEnrollmentGet
    list = StudentCourseEnrollmentGet
    update = StudentCourseEnrollmentUpdate
    query = StudentCourseEnrollmentQuery
    search = student_course_enrollment_search
    endpoint = "student-course-enrollments"
    model = StudentCourseEnrollment
    permission_category = "students"
