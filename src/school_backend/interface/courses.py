from decimal import Decimal
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Optional
from sqlalchemy.orm import Session
from school_backend.interface.base import BaseEntityGet, BaseEntityList, EntityInterface, ListQuery
from school_backend.model.course import Book, Course, CourseActivity, CourseUnit, CourseVideo
from school_backend.services.curriculum import (
    validate_book, validate_course_unit, validate_course_video, validate_course_activity
)
import re

class UnitType(str, Enum):
    lesson = "lesson"
    checkpoint = "checkpoint"
    review = "review"

class ActivityType(str, Enum):
    multiple_choice = "multiple_choice"
    fill_blank = "fill_blank"
    speaking = "speaking"
    listening = "listening"
    writing = "writing"
    unscramble = "unscramble"

def _validate_hex_color(v):
    if v is not None and not re.match(r'^#[0-9a-fA-F]{6}$', v):
        raise ValueError('Color must be a hex value like #3b82f6')
    return v

# Course

class CourseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255, description="Course name")
    description: Optional[str] = Field(None, max_length=4096)
    language: str = Field(min_length=1, max_length=64, description="Taught language")
    level: str = Field(min_length=1, max_length=64, description="Proficiency level")
    duration: Optional[int] = Field(None, ge=0, description="Duration in hours")
    price: Optional[Decimal] = Field(None, ge=0)
    is_active: Optional[bool] = None

    model_config = ConfigDict(extra='forbid')

class CourseGet(BaseEntityGet):
    id: str
    name: str
    description: Optional[str] = None
    language: str
    level: str
    duration: Optional[int] = None
    price: Optional[Decimal] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class CourseList(BaseEntityList):
    id: str
    name: str
    language: str
    level: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class CourseUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    language: Optional[str] = Field(None, min_length=1, max_length=64)
    level: Optional[str] = Field(None, min_length=1, max_length=64)
    duration: Optional[int] = Field(None, ge=0)
    price: Optional[Decimal] = Field(None, ge=0)
    is_active: Optional[bool] = None

    model_config = ConfigDict(extra='forbid')

class CourseQuery(ListQuery):
    id: Optional[str] = None
    name: Optional[str] = None
    language: Optional[str] = None
    level: Optional[str] = None
    is_active: Optional[bool] = None

def course_search(db: Session, query, params: Optional[CourseQuery]):

    if params.id != None:
        query = query.filter(Course.id == params.id)
    if params.name != None:
        query = query.filter(Course.name == params.name)
    if params.language != None:
        query = query.filter(Course.language == params.language)
    if params.level != None:
        query = query.filter(Course.level == params.level)
    if params.is_active != None:
        query = query.filter(Course.is_active == params.is_active)

    return query.order_by(Course.name)

class CourseInterface(EntityInterface):
    create = CourseCreate
    get = CourseGet
    list = CourseList
    update = CourseUpdate
    query = CourseQuery
    search = course_search
    endpoint = "courses"
    model = Course
    permission_category = "courses"
    cache_ttl = 300

# Book

class BookCreate(BaseModel):
    course_id: str = Field(description="Parent course")
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    pdf_url: Optional[str] = Field(None, max_length=2048)
    color: Optional[str] = Field(None, description="Hex display color")
    display_order: Optional[int] = Field(None, ge=1, description="Position within the course")
    total_days: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None

    @field_validator('color')
    @classmethod
    def validate_color(cls, v):
        return _validate_hex_color(v)

    model_config = ConfigDict(extra='forbid')

class BookGet(BaseEntityGet):
    id: str
    course_id: str
    name: str
    description: Optional[str] = None
    pdf_url: Optional[str] = None
    color: str
    display_order: int
    total_days: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

class BookUpdate(BaseModel):
    course_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    pdf_url: Optional[str] = Field(None, max_length=2048)
    color: Optional[str] = None
    display_order: Optional[int] = Field(None, ge=1)
    total_days: Optional[int] = Field(None, ge=1)
    is_active: Optional[bool] = None

    @field_validator('color')
    @classmethod
    def validate_color(cls, v):
        return _validate_hex_color(v)

    model_config = ConfigDict(extra='forbid')

class BookQuery(ListQuery):
    id: Optional[str] = None
    course_id: Optional[str] = None
    name: Optional[str] = None
    is_active: Optional[bool] = None

def book_search(db: Session, query, params: Optional[BookQuery]):

    if params.id != None:
        query = query.filter(Book.id == params.id)
    if params.course_id != None:
        query = query.filter(Book.course_id == params.course_id)
    if params.name != None:
        query = query.filter(Book.name == params.name)
    if params.is_active != None:
        query = query.filter(Book.is_active == params.is_active)

    return query.order_by(Book.course_id, Book.display_order)

class BookInterface(EntityInterface):
    create = BookCreate
    get = BookGet
    list = BookGet
    update = BookUpdate
    query = BookQuery
    search = book_search
    endpoint = "books"
    model = Book
    permission_category = "courses"
    pre_create = validate_book
    pre_update = validate_book

# Course unit

class CourseUnitCreate(BaseModel):
    book_id: str = Field(description="Parent book")
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    display_order: int = Field(ge=1, description="Position within the book")
    unit_type: UnitType = UnitType.lesson

    model_config = ConfigDict(use_enum_values=True, extra='forbid')

class CourseUnitGet(BaseEntityGet):
    id: str
    book_id: str
    name: str
    description: Optional[str] = None
    display_order: int
    unit_type: UnitType

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

class CourseUnitUpdate(BaseModel):
    book_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    display_order: Optional[int] = Field(None, ge=1)
    unit_type: Optional[UnitType] = None

    model_config = ConfigDict(use_enum_values=True, extra='forbid')

class CourseUnitQuery(ListQuery):
    id: Optional[str] = None
    book_id: Optional[str] = None
    unit_type: Optional[UnitType] = None

    model_config = ConfigDict(use_enum_values=True)

def course_unit_search(db: Session, query, params: Optional[CourseUnitQuery]):

    if params.id != None:
        query = query.filter(CourseUnit.id == params.id)
    if params.book_id != None:
        query = query.filter(CourseUnit.book_id == params.book_id)
    if params.unit_type != None:
        query = query.filter(CourseUnit.unit_type == params.unit_type)

    return query.order_by(CourseUnit.book_id, CourseUnit.display_order)

class CourseUnitInterface(EntityInterface):
    create = CourseUnitCreate
    get = CourseUnitGet
    list = CourseUnitGet
    update = CourseUnitUpdate
    query = CourseUnitQuery
    search = course_unit_search
    endpoint = "course-units"
    model = CourseUnit
    permission_category = "courses"
    pre_create = validate_course_unit
    pre_update = validate_course_unit

# Course video

class CourseVideoCreate(BaseModel):
    unit_id: str = Field(description="Parent course unit")
    day_number: int = Field(ge=1, le=6, description="Study day within the unit")
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    video_url: str = Field(min_length=1, max_length=2048)
    thumbnail_url: Optional[str] = Field(None, max_length=2048)
    duration: Optional[int] = Field(None, ge=0, description="Length in seconds")
    has_subtitles: Optional[bool] = None
    display_order: Optional[int] = Field(None, ge=1)

    model_config = ConfigDict(extra='forbid')

class CourseVideoGet(BaseEntityGet):
    id: str
    unit_id: str
    day_number: int
    title: str
    description: Optional[str] = None
    video_url: str
    thumbnail_url: Optional[str] = None
    duration: Optional[int] = None
    has_subtitles: bool
    display_order: int

    model_config = ConfigDict(from_attributes=True)

class CourseVideoUpdate(BaseModel):
    unit_id: Optional[str] = None
    day_number: Optional[int] = Field(None, ge=1, le=6)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    video_url: Optional[str] = Field(None, min_length=1, max_length=2048)
    thumbnail_url: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0)
    has_subtitles: Optional[bool] = None
    display_order: Optional[int] = Field(None, ge=1)

    model_config = ConfigDict(extra='forbid')

class CourseVideoQuery(ListQuery):
    id: Optional[str] = None
    unit_id: Optional[str] = None
    day_number: Optional[int] = None

def course_video_search(db: Session, query, params: Optional[CourseVideoQuery]):

    if params.id != None:
        query = query.filter(CourseVideo.id == params.id)
    if params.unit_id != None:
        query = query.filter(CourseVideo.unit_id == params.unit_id)
    if params.day_number != None:
        query = query.filter(CourseVideo.day_number == params.day_number)

    return query.order_by(CourseVideo.unit_id, CourseVideo.day_number)

class CourseVideoInterface(EntityInterface):
    create = CourseVideoCreate
    get = CourseVideoGet
    list = CourseVideoGet
    update = CourseVideoUpdate
    query = CourseVideoQuery
    search = course_video_search
    endpoint = "course-videos"
    model = CourseVideo
    permission_category = "courses"
    pre_create = validate_course_video
    pre_update = validate_course_video

# Course activity

class CourseActivityCreate(BaseModel):
    video_id: str = Field(description="Video the activity belongs to")
    activity_type: ActivityType
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    instruction: Optional[str] = None
    content: dict = Field(description="Activity content, e.g. question and options")
    correct_answer: Optional[Any] = Field(None, description="Answer key")
    points: Optional[int] = Field(None, ge=0)
    display_order: Optional[int] = Field(None, ge=1)

    model_config = ConfigDict(use_enum_values=True, extra='forbid')

class CourseActivityGet(BaseEntityGet):
    id: str
    video_id: str
    activity_type: ActivityType
    title: str
    description: Optional[str] = None
    instruction: Optional[str] = None
    content: dict
    correct_answer: Optional[Any] = None
    points: int
    display_order: int

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

class CourseActivityUpdate(BaseModel):
    activity_type: Optional[ActivityType] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    instruction: Optional[str] = None
    content: Optional[dict] = None
    correct_answer: Optional[Any] = None
    points: Optional[int] = Field(None, ge=0)
    display_order: Optional[int] = Field(None, ge=1)

    model_config = ConfigDict(use_enum_values=True, extra='forbid')

class CourseActivityQuery(ListQuery):
    id: Optional[str] = None
    video_id: Optional[str] = None
    activity_type: Optional[ActivityType] = None

    model_config = ConfigDict(use_enum_values=True)

def course_activity_search(db: Session, query, params: Optional[CourseActivityQuery]):

    if params.id != None:
        query = query.filter(CourseActivity.id == params.id)
    if params.video_id != None:
        query = query.filter(CourseActivity.video_id == params.video_id)
    if params.activity_type != None:
        query = query.filter(CourseActivity.activity_type == params.activity_type)

    return query

class CourseActivityInterface(EntityInterface):
    create = CourseActivityCreate
    get = CourseActivityGet
    list = CourseActivityGet
    update = CourseActivityUpdate
    query = CourseActivityQuery
    search = course_activity_search
    endpoint = "course-activities"
    model = CourseActivity
    permission_category = "courses"
    pre_create = validate_course_activity
    pre_update = validate_course_activity

# Course tree (read only)

class CourseTreeVideo(CourseVideoGet):
    activity: Optional[CourseActivityGet] = None

class CourseTreeUnit(CourseUnitGet):
    videos: List[CourseTreeVideo] = Field(default_factory=list)

class CourseTreeBook(BookGet):
    units: List[CourseTreeUnit] = Field(default_factory=list)

class CourseTree(CourseGet):
    books: List[CourseTreeBook] = Field(default_factory=list)
