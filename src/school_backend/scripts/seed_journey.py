#!/usr/bin/env python3
"""
Seed the "Journey - English for Life" course.

Three books of ten lesson units each, followed by a checkpoint, a review and
a closing checkpoint. Every lesson unit has six daily videos with one
activity each. Seeding an existing course is a no-op.
"""

from dotenv import load_dotenv
from sqlalchemy.orm import Session

# Load environment variables
load_dotenv()

from school_backend.database import Database
from school_backend.model.course import Book, Course, CourseActivity, CourseUnit, CourseVideo
from school_backend.settings import settings

JOURNEY_COURSE_NAME = "Journey - English for Life"

PLACEHOLDER_VIDEO_URL = "https://www.youtube.com/embed/dQw4w9WgXcQ"
PLACEHOLDER_THUMBNAIL_URL = "https://img.youtube.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"

LESSON_UNITS_PER_BOOK = 10

# (name, description, color, weekly focus of the lesson units)
JOURNEY_BOOKS = [
    ("Book One", "1 hour per week - Units 01 to 10", "#3b82f6", "video + activity"),
    ("Book Two", "2 hours per week - Units 11 to 20", "#8b5cf6", "video + activity + conversation"),
    ("Book Three", "3 hours per week - Units 21 to 30", "#10b981", "video + activity + conversation + listening"),
]

DAY_TITLES = [
    "Welcome & Introduction",
    "Listening Practice",
    "Speaking Exercise",
    "Fill in the Blanks",
    "Complete the Dialogue",
    "Subtitles & Review",
]

DAY_INSTRUCTIONS = [
    "Welcome! Watch the video and choose the sentence one of the speakers used.",
    "Choose the sentence one of the speakers used in the video.",
    "Look at the sentence from the video. Press the microphone icon and read it out loud.",
    "Listen to the dialogues and type the missing words.",
    "Click the boxes below and pick the right sentences to complete the dialogue.",
    "Watch the video with subtitles. Remember to press CC to turn them on.",
]

DAY_ACTIVITY_TYPES = [
    "multiple_choice",
    "multiple_choice",
    "speaking",
    "fill_blank",
    "unscramble",
    "listening",
]


def create_videos_for_unit(db: Session, unit: CourseUnit, unit_number: int):
    for day, (title, instruction, activity_type) in enumerate(zip(DAY_TITLES, DAY_INSTRUCTIONS, DAY_ACTIVITY_TYPES), start=1):
        video = CourseVideo(
            unit=unit,
            day_number=day,
            title=f"Day {day}: {title}",
            description=f"Unit {unit_number} - {instruction}",
            video_url=PLACEHOLDER_VIDEO_URL,
            thumbnail_url=PLACEHOLDER_THUMBNAIL_URL,
            duration=300,
            has_subtitles=day == 6,
            display_order=day
        )
        video.activity = CourseActivity(
            activity_type=activity_type,
            title=title,
            description=f"Activity for day {day}",
            instruction=instruction,
            content={
                "question": f"Complete the activity for Day {day}",
                "options": ["Option A", "Option B", "Option C", "Option D"]
            },
            correct_answer={"correctAnswer": "Option A"},
            points=10,
            display_order=1
        )
        db.add(video)


def create_book(db: Session, course: Course, display_order: int, name: str, description: str, color: str, focus: str) -> Book:
    book = Book(
        course=course,
        name=name,
        description=description,
        color=color,
        display_order=display_order,
        total_days=LESSON_UNITS_PER_BOOK * len(DAY_TITLES)
    )
    db.add(book)

    first_unit_number = (display_order - 1) * LESSON_UNITS_PER_BOOK + 1

    for position in range(1, LESSON_UNITS_PER_BOOK + 1):
        unit_number = first_unit_number + position - 1
        unit = CourseUnit(
            book=book,
            name=f"Unit {unit_number:02d}",
            description=f"Unit {unit_number} - six days of {focus}",
            display_order=position,
            unit_type="lesson"
        )
        db.add(unit)
        create_videos_for_unit(db, unit, unit_number)

    closing_units = [
        ("Checkpoint", "Platform activity graded by the teachers", "checkpoint"),
        ("Review", "Review class with the teacher", "review"),
        (f"Check Point {name}", "Platform activity graded by the teachers", "checkpoint"),
    ]
    for offset, (unit_name, unit_description, unit_type) in enumerate(closing_units, start=1):
        db.add(CourseUnit(
            book=book,
            name=unit_name,
            description=unit_description,
            display_order=LESSON_UNITS_PER_BOOK + offset,
            unit_type=unit_type
        ))

    return book


def seed_journey_course(db: Session) -> str:
    """Create the Journey course in one transaction and return its id."""
    print("🎓 Creating course Journey - English for Life...")

    existing = db.query(Course).filter(Course.name == JOURNEY_COURSE_NAME).first()
    if existing is not None:
        print(f"   ⚠️  Course already exists, nothing to do (ID: {existing.id})")
        return existing.id

    try:
        course = Course(
            name=JOURNEY_COURSE_NAME,
            description="Complete English course built on interactive videos and practical activities",
            language="English",
            level="intermediate",
            duration=180,
            price=0
        )
        db.add(course)

        for display_order, (name, description, color, focus) in enumerate(JOURNEY_BOOKS, start=1):
            book = create_book(db, course, display_order, name, description, color, focus)
            print(f"   📘 {book.name}: {len(book.units)} units")

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(course)
    print(f"   ✅ Course created: {course.name} (ID: {course.id})")

    return course.id


def main():
    print("🚀 Seeding the Journey course")
    print("=" * 50)

    database = Database(settings.database_url)

    try:
        with database.session() as db:
            seed_journey_course(db)

        print("=" * 50)
        print("🎉 Journey course seed completed successfully!")

    except Exception as e:
        print(f"❌ Error while seeding: {e}")
        raise

    finally:
        database.dispose()


if __name__ == "__main__":
    main()
