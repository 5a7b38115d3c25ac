from sqlalchemy import (
    Boolean, CheckConstraint, Column, Date, ForeignKey,
    Integer, String, Text, UniqueConstraint, text
)
from sqlalchemy.orm import relationship

from .base import Base, id_column, created_at_column, updated_at_column, utcnow


class ClassSlot(Base):
    """A recurring weekly class of one teacher teaching one book."""
    __tablename__ = 'classes'
    __table_args__ = (
        CheckConstraint('day_of_week >= 1 AND day_of_week <= 6', name='classes_day_of_week_check'),
    )

    id = id_column()
    book_id = Column(ForeignKey('books.id', ondelete='RESTRICT'), nullable=False, index=True)
    teacher_id = Column(ForeignKey('users.id', ondelete='RESTRICT'), nullable=False, index=True)
    unit_id = Column(ForeignKey('units.id', ondelete='SET NULL'))
    name = Column(String(255), nullable=False)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)
    room = Column(String(255))
    max_students = Column(Integer, nullable=False, default=15, server_default=text("15"))
    current_students = Column(Integer, nullable=False, default=0, server_default=text("0"))
    start_date = Column(Date)
    end_date = Column(Date)
    current_day = Column(Integer, nullable=False, default=1, server_default=text("1"))
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    created_at = created_at_column()
    updated_at = updated_at_column()

    # Relationships
    book = relationship('Book')
    teacher = relationship('User', foreign_keys=[teacher_id])
    unit = relationship('SchoolUnit')
    enrollments = relationship('ClassEnrollment', back_populates='class_slot', cascade='all, delete-orphan')
    attendance = relationship('AttendanceRecord', back_populates='class_slot', cascade='all, delete-orphan')
    lessons = relationship('Lesson', back_populates='class_slot', cascade='all, delete-orphan')


class ClassEnrollment(Base):
    __tablename__ = 'class_enrollments'

    id = id_column()
    class_id = Column(ForeignKey('classes.id', ondelete='CASCADE'), nullable=False, index=True)
    student_id = Column(ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    enrollment_date = Column(Date, default=lambda: utcnow().date())
    status = Column(String(32), nullable=False, default='active', server_default=text("'active'"))
    created_at = created_at_column()
    updated_at = updated_at_column()

    class_slot = relationship('ClassSlot', back_populates='enrollments')
    student = relationship('Student', back_populates='class_enrollments')


class AttendanceRecord(Base):
    __tablename__ = 'attendance'
    __table_args__ = (
        UniqueConstraint('class_id', 'student_id', 'date', name='attendance_class_student_date_key'),
        CheckConstraint("status IN ('present', 'absent', 'justified')", name='attendance_status_check'),
    )

    id = id_column()
    class_id = Column(ForeignKey('classes.id', ondelete='CASCADE'), nullable=False, index=True)
    student_id = Column(ForeignKey('students.id', ondelete='CASCADE'), nullable=False)
    date = Column(Date, nullable=False)
    status = Column(String(16), nullable=False)
    notes = Column(Text)
    recorded_by = Column(ForeignKey('users.id', ondelete='SET NULL'))
    created_at = created_at_column()
    updated_at = updated_at_column()

    class_slot = relationship('ClassSlot', back_populates='attendance')
    student = relationship('Student')


class Lesson(Base):
    """A dated occurrence of a class, teaching one day of its book."""
    __tablename__ = 'lessons'
    __table_args__ = (
        CheckConstraint(
            "status IN ('scheduled', 'in_progress', 'completed', 'cancelled')",
            name='lessons_status_check'
        ),
    )

    id = id_column()
    class_id = Column(ForeignKey('classes.id', ondelete='CASCADE'), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    book_day = Column(Integer, nullable=False)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)
    room = Column(String(255))
    status = Column(String(16), nullable=False, default='scheduled', server_default=text("'scheduled'"))
    notes = Column(Text)
    created_at = created_at_column()
    updated_at = updated_at_column()

    class_slot = relationship('ClassSlot', back_populates='lessons')
