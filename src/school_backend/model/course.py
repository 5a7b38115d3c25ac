from sqlalchemy import (
    Boolean, CheckConstraint, Column, ForeignKey,
    Integer, Numeric, String, Text, UniqueConstraint, text
)
from sqlalchemy.orm import relationship

from .base import Base, JSONType, id_column, created_at_column, updated_at_column


class Course(Base):
    __tablename__ = 'courses'

    id = id_column()
    name = Column(String(255), nullable=False)
    description = Column(Text)
    language = Column(String(64), nullable=False)
    level = Column(String(64), nullable=False)
    duration = Column(Integer)  # hours
    price = Column(Numeric(10, 2))
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    created_at = created_at_column()
    updated_at = updated_at_column()

    # Relationships
    books = relationship('Book', back_populates='course', order_by='Book.display_order', cascade='all, delete-orphan')


class Book(Base):
    __tablename__ = 'books'
    __table_args__ = (
        UniqueConstraint('course_id', 'display_order', name='books_course_display_order_key'),
    )

    id = id_column()
    course_id = Column(ForeignKey('courses.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    pdf_url = Column(String(2048))
    color = Column(String(7), nullable=False, default='#3b82f6', server_default=text("'#3b82f6'"))
    display_order = Column(Integer, nullable=False, default=1, server_default=text("1"))
    total_days = Column(Integer, nullable=False, default=30, server_default=text("30"))
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    created_at = created_at_column()
    updated_at = updated_at_column()

    # Relationships
    course = relationship('Course', back_populates='books')
    units = relationship('CourseUnit', back_populates='book', order_by='CourseUnit.display_order', cascade='all, delete-orphan')


class CourseUnit(Base):
    __tablename__ = 'course_units'
    __table_args__ = (
        UniqueConstraint('book_id', 'display_order', name='course_units_book_display_order_key'),
        CheckConstraint("unit_type IN ('lesson', 'checkpoint', 'review')", name='course_units_unit_type_check'),
    )

    id = id_column()
    book_id = Column(ForeignKey('books.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    display_order = Column(Integer, nullable=False)
    unit_type = Column(String(32), nullable=False, default='lesson', server_default=text("'lesson'"))
    created_at = created_at_column()
    updated_at = updated_at_column()

    # Relationships
    book = relationship('Book', back_populates='units')
    videos = relationship('CourseVideo', back_populates='unit', order_by='CourseVideo.day_number', cascade='all, delete-orphan')


class CourseVideo(Base):
    __tablename__ = 'course_videos'
    __table_args__ = (
        UniqueConstraint('unit_id', 'day_number', name='course_videos_unit_day_number_key'),
        CheckConstraint('day_number >= 1 AND day_number <= 6', name='course_videos_day_number_check'),
    )

    id = id_column()
    unit_id = Column(ForeignKey('course_units.id', ondelete='CASCADE'), nullable=False, index=True)
    day_number = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    video_url = Column(String(2048), nullable=False)
    thumbnail_url = Column(String(2048))
    duration = Column(Integer)  # seconds
    has_subtitles = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    display_order = Column(Integer, nullable=False, default=1, server_default=text("1"))
    created_at = created_at_column()
    updated_at = updated_at_column()

    # Relationships
    unit = relationship('CourseUnit', back_populates='videos')
    activity = relationship('CourseActivity', back_populates='video', uselist=False, cascade='all, delete-orphan')


class CourseActivity(Base):
    __tablename__ = 'course_activities'

    id = id_column()
    video_id = Column(ForeignKey('course_videos.id', ondelete='CASCADE'), nullable=False, unique=True)
    activity_type = Column(String(32), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    instruction = Column(Text)
    content = Column(JSONType, nullable=False)
    correct_answer = Column(JSONType)
    points = Column(Integer, nullable=False, default=10, server_default=text("10"))
    display_order = Column(Integer, nullable=False, default=1, server_default=text("1"))
    created_at = created_at_column()
    updated_at = updated_at_column()

    video = relationship('CourseVideo', back_populates='activity')


class StudentCourseEnrollment(Base):
    __tablename__ = 'student_course_enrollments'

    id = id_column()
    student_id = Column(ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    course_id = Column(ForeignKey('courses.id', ondelete='CASCADE'), nullable=False)
    current_book_id = Column(ForeignKey('books.id', ondelete='SET NULL'))
    current_unit_id = Column(ForeignKey('course_units.id', ondelete='SET NULL'))
    status = Column(String(32), nullable=False, default='active', server_default=text("'active'"))
    overall_progress = Column(Integer, nullable=False, default=0, server_default=text("0"))
    created_at = created_at_column()
    updated_at = updated_at_column()

    student = relationship('Student', back_populates='course_enrollments')
    course = relationship('Course')
