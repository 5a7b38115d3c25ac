from sqlalchemy import Boolean, Column, Date, ForeignKey, Numeric, String, Text, text
from sqlalchemy.orm import relationship

from .base import Base, id_column, created_at_column, updated_at_column


class SchoolUnit(Base):
    """A physical campus of the institution."""
    __tablename__ = 'units'

    id = id_column()
    name = Column(String(255), nullable=False)
    address = Column(Text)
    phone = Column(String(64))
    email = Column(String(255))
    manager_id = Column(ForeignKey('users.id', ondelete='SET NULL'))
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    created_at = created_at_column()
    updated_at = updated_at_column()

    # Relationships
    manager = relationship('User', foreign_keys=[manager_id])
    staff = relationship('Staff', back_populates='unit')
    students = relationship('Student', back_populates='unit')


class Staff(Base):
    __tablename__ = 'staff'

    id = id_column()
    user_id = Column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    unit_id = Column(ForeignKey('units.id', ondelete='SET NULL'))
    position = Column(String(255), nullable=False)
    department = Column(String(255))
    salary = Column(Numeric(10, 2))
    hire_date = Column(Date)
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    created_at = created_at_column()
    updated_at = updated_at_column()

    user = relationship('User', back_populates='staff')
    unit = relationship('SchoolUnit', back_populates='staff')


class Student(Base):
    __tablename__ = 'students'

    id = id_column()
    user_id = Column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    student_code = Column(String(64), nullable=False, unique=True)
    unit_id = Column(ForeignKey('units.id', ondelete='SET NULL'))
    enrollment_date = Column(Date)
    status = Column(String(32), nullable=False, default='active', server_default=text("'active'"))
    created_at = created_at_column()
    updated_at = updated_at_column()

    # Relationships
    user = relationship('User', back_populates='student')
    unit = relationship('SchoolUnit', back_populates='students')
    class_enrollments = relationship('ClassEnrollment', back_populates='student')
    course_enrollments = relationship('StudentCourseEnrollment', back_populates='student')
