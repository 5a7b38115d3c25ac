#!/usr/bin/env python3
"""
Seed demo accounts, the demo school unit and the staff and student profiles
behind them. Users are matched by email: a rerun refreshes names, role and
password but keeps the user id.
"""

from datetime import date
from decimal import Decimal
from typing import Dict
from dotenv import load_dotenv
from sqlalchemy.orm import Session

# Load environment variables
load_dotenv()

from school_backend.database import Database
from school_backend.interface.tokens import encrypt_password
from school_backend.model.auth import User
from school_backend.model.base import utcnow
from school_backend.model.course import Book, Course, StudentCourseEnrollment
from school_backend.model.school import SchoolUnit, Staff, Student
from school_backend.scripts.seed_journey import JOURNEY_COURSE_NAME
from school_backend.settings import settings

DEMO_PASSWORD = "demo123"

DEMO_USERS = [
    {"email": "admin@demo.com", "first_name": "Admin", "last_name": "System", "role": "admin"},
    {"email": "teacher@demo.com", "first_name": "Teacher", "last_name": "Demo", "role": "teacher"},
    {"email": "secretary@demo.com", "first_name": "Secretary", "last_name": "Demo", "role": "secretary"},
    {"email": "student@demo.com", "first_name": "João", "last_name": "Silva", "role": "student"},
]

DEMO_UNIT = {
    "name": "Unidade Centro",
    "address": "Rua das Flores, 123 - Centro",
    "phone": "(11) 3456-7890",
    "email": "centro@demo.com",
}

# email -> (position, department, salary)
DEMO_STAFF = {
    "admin@demo.com": ("diretor", "Administration", Decimal("10000")),
    "teacher@demo.com": ("instrutor", "Teaching", Decimal("5000")),
    "secretary@demo.com": ("recepcionista", "Office", Decimal("3000")),
}

DEMO_STUDENT_EMAIL = "student@demo.com"
DEMO_STUDENT_CODE = "STD001"


def upsert_user(db: Session, data: dict) -> User:
    user = db.query(User).filter(User.email == data["email"]).first()

    if user is None:
        user = User(email=data["email"])
        db.add(user)

    user.first_name = data["first_name"]
    user.last_name = data["last_name"]
    user.role = data["role"]
    user.password = encrypt_password(DEMO_PASSWORD)
    user.is_active = True
    user.updated_at = utcnow()

    db.flush()
    return user


def upsert_unit(db: Session) -> SchoolUnit:
    unit = db.query(SchoolUnit).filter(SchoolUnit.name == DEMO_UNIT["name"]).first()

    if unit is None:
        unit = SchoolUnit(**DEMO_UNIT)
        db.add(unit)
        db.flush()

    return unit


def upsert_staff(db: Session, user: User, unit: SchoolUnit, position: str, department: str, salary: Decimal) -> Staff:
    staff = db.query(Staff).filter(Staff.user_id == user.id).first()

    if staff is None:
        staff = Staff(user_id=user.id, hire_date=date.today(), is_active=True)
        db.add(staff)

    staff.unit_id = unit.id
    staff.position = position
    staff.department = department
    staff.salary = salary
    staff.updated_at = utcnow()

    db.flush()
    return staff


def upsert_student(db: Session, user: User, unit: SchoolUnit) -> Student:
    student = db.query(Student).filter(Student.user_id == user.id).first()

    if student is None:
        student = Student(user_id=user.id, enrollment_date=date.today(), status="active")
        db.add(student)

    student.student_code = DEMO_STUDENT_CODE
    student.unit_id = unit.id
    student.updated_at = utcnow()

    db.flush()
    return student


def enroll_in_journey(db: Session, student: Student) -> bool:
    """Enroll the demo student in the Journey course when it has been seeded."""
    course = db.query(Course).filter(Course.name == JOURNEY_COURSE_NAME).first()
    if course is None:
        return False

    existing = db.query(StudentCourseEnrollment).filter(
        StudentCourseEnrollment.student_id == student.id,
        StudentCourseEnrollment.course_id == course.id
    ).first()
    if existing is not None:
        return True

    first_book = db.query(Book).filter(Book.course_id == course.id).order_by(Book.display_order).first()
    first_unit = first_book.units[0] if first_book is not None and len(first_book.units) > 0 else None

    db.add(StudentCourseEnrollment(
        student_id=student.id,
        course_id=course.id,
        current_book_id=first_book.id if first_book is not None else None,
        current_unit_id=first_unit.id if first_unit is not None else None,
        status="active",
        overall_progress=0
    ))
    db.flush()
    return True


def seed_demo_users(db: Session) -> Dict[str, User]:
    """Upsert all demo data in one transaction; returns the users by email."""
    print("👤 Seeding demo users...")

    try:
        users = {}
        for data in DEMO_USERS:
            users[data["email"]] = upsert_user(db, data)
            print(f"   ✅ user: {data['email']}")

        unit = upsert_unit(db)
        print(f"   ✅ unit: {unit.name}")

        for email, (position, department, salary) in DEMO_STAFF.items():
            upsert_staff(db, users[email], unit, position, department, salary)
        print("   ✅ staff profiles updated")

        student = upsert_student(db, users[DEMO_STUDENT_EMAIL], unit)
        print(f"   ✅ student: {student.student_code}")

        if enroll_in_journey(db, student):
            print("   ✅ student enrolled in the Journey course")
        else:
            print("   ⚠️  Journey course not found, skipping course enrollment")

        db.commit()
    except Exception:
        db.rollback()
        raise

    return users


def main():
    print("🚀 Seeding demo users")
    print("=" * 50)

    database = Database(settings.database_url)

    try:
        with database.session() as db:
            seed_demo_users(db)

        print("=" * 50)
        print("🎉 Demo seed completed successfully!")
        print("\n📋 Demo logins:")
        for data in DEMO_USERS:
            print(f"   • {data['email']} / {DEMO_PASSWORD} ({data['role']})")

    except Exception as e:
        print(f"❌ Error while seeding: {e}")
        raise

    finally:
        database.dispose()


if __name__ == "__main__":
    main()
