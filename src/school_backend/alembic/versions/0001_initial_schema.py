"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-09-14 10:12:31.204518

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id():
    return sa.Column('id', sa.String(36), primary_key=True)


def _created_at():
    return sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()'))


def _updated_at():
    return sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()'))


def _is_active():
    return sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true'))


def upgrade() -> None:
    # Permission catalog
    op.create_table(
        'permission_categories',
        _id(),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('is_system_category', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        _is_active(),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        'permissions',
        _id(),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('category_id', sa.String(36), sa.ForeignKey('permission_categories.id', ondelete='SET NULL')),
        sa.Column('category', sa.String(255)),
        _is_active(),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        'roles',
        _id(),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('is_system_role', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        'role_permissions',
        _id(),
        sa.Column('role_id', sa.String(36), sa.ForeignKey('roles.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('permission_id', sa.String(36), sa.ForeignKey('permissions.id', ondelete='CASCADE'), nullable=False),
        _created_at(),
        sa.UniqueConstraint('role_id', 'permission_id', name='role_permissions_role_permission_key'),
    )

    # Accounts
    op.create_table(
        'users',
        _id(),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('first_name', sa.String(255)),
        sa.Column('last_name', sa.String(255)),
        sa.Column('role', sa.String(64), nullable=False, server_default=sa.text("'student'")),
        sa.Column('password', sa.String(512)),
        sa.Column('profile_image_url', sa.String(2048)),
        _is_active(),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        'user_permissions',
        _id(),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('permission_id', sa.String(36), sa.ForeignKey('permissions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('is_granted', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        _created_at(),
        sa.UniqueConstraint('user_id', 'permission_id', name='user_permissions_user_permission_key'),
    )

    # School
    op.create_table(
        'units',
        _id(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('address', sa.Text()),
        sa.Column('phone', sa.String(64)),
        sa.Column('email', sa.String(255)),
        sa.Column('manager_id', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL')),
        _is_active(),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        'staff',
        _id(),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('unit_id', sa.String(36), sa.ForeignKey('units.id', ondelete='SET NULL')),
        sa.Column('position', sa.String(255), nullable=False),
        sa.Column('department', sa.String(255)),
        sa.Column('salary', sa.Numeric(10, 2)),
        sa.Column('hire_date', sa.Date()),
        _is_active(),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        'students',
        _id(),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('student_code', sa.String(64), nullable=False, unique=True),
        sa.Column('unit_id', sa.String(36), sa.ForeignKey('units.id', ondelete='SET NULL')),
        sa.Column('enrollment_date', sa.Date()),
        sa.Column('status', sa.String(32), nullable=False, server_default=sa.text("'active'")),
        _created_at(),
        _updated_at(),
    )

    # Curriculum
    op.create_table(
        'courses',
        _id(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('language', sa.String(64), nullable=False),
        sa.Column('level', sa.String(64), nullable=False),
        sa.Column('duration', sa.Integer()),
        sa.Column('price', sa.Numeric(10, 2)),
        _is_active(),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        'books',
        _id(),
        sa.Column('course_id', sa.String(36), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('pdf_url', sa.String(2048)),
        sa.Column('color', sa.String(7), nullable=False, server_default=sa.text("'#3b82f6'")),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default=sa.text('1')),
        sa.Column('total_days', sa.Integer(), nullable=False, server_default=sa.text('30')),
        _is_active(),
        _created_at(),
        _updated_at(),
        sa.UniqueConstraint('course_id', 'display_order', name='books_course_display_order_key'),
    )
    op.create_table(
        'course_units',
        _id(),
        sa.Column('book_id', sa.String(36), sa.ForeignKey('books.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('display_order', sa.Integer(), nullable=False),
        sa.Column('unit_type', sa.String(32), nullable=False, server_default=sa.text("'lesson'")),
        _created_at(),
        _updated_at(),
        sa.UniqueConstraint('book_id', 'display_order', name='course_units_book_display_order_key'),
        sa.CheckConstraint("unit_type IN ('lesson', 'checkpoint', 'review')", name='course_units_unit_type_check'),
    )
    op.create_table(
        'course_videos',
        _id(),
        sa.Column('unit_id', sa.String(36), sa.ForeignKey('course_units.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('day_number', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('video_url', sa.String(2048), nullable=False),
        sa.Column('thumbnail_url', sa.String(2048)),
        sa.Column('duration', sa.Integer()),
        sa.Column('has_subtitles', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default=sa.text('1')),
        _created_at(),
        _updated_at(),
        sa.UniqueConstraint('unit_id', 'day_number', name='course_videos_unit_day_number_key'),
        sa.CheckConstraint('day_number >= 1 AND day_number <= 6', name='course_videos_day_number_check'),
    )
    op.create_table(
        'course_activities',
        _id(),
        sa.Column('video_id', sa.String(36), sa.ForeignKey('course_videos.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('activity_type', sa.String(32), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('instruction', sa.Text()),
        sa.Column('content', postgresql.JSONB(), nullable=False),
        sa.Column('correct_answer', postgresql.JSONB()),
        sa.Column('points', sa.Integer(), nullable=False, server_default=sa.text('10')),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default=sa.text('1')),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        'student_course_enrollments',
        _id(),
        sa.Column('student_id', sa.String(36), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('course_id', sa.String(36), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('current_book_id', sa.String(36), sa.ForeignKey('books.id', ondelete='SET NULL')),
        sa.Column('current_unit_id', sa.String(36), sa.ForeignKey('course_units.id', ondelete='SET NULL')),
        sa.Column('status', sa.String(32), nullable=False, server_default=sa.text("'active'")),
        sa.Column('overall_progress', sa.Integer(), nullable=False, server_default=sa.text('0')),
        _created_at(),
        _updated_at(),
    )

    # Scheduling
    op.create_table(
        'classes',
        _id(),
        sa.Column('book_id', sa.String(36), sa.ForeignKey('books.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('teacher_id', sa.String(36), sa.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False, index=True),
        sa.Column('unit_id', sa.String(36), sa.ForeignKey('units.id', ondelete='SET NULL')),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        sa.Column('room', sa.String(255)),
        sa.Column('max_students', sa.Integer(), nullable=False, server_default=sa.text('15')),
        sa.Column('current_students', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('start_date', sa.Date()),
        sa.Column('end_date', sa.Date()),
        sa.Column('current_day', sa.Integer(), nullable=False, server_default=sa.text('1')),
        _is_active(),
        _created_at(),
        _updated_at(),
        sa.CheckConstraint('day_of_week >= 1 AND day_of_week <= 6', name='classes_day_of_week_check'),
    )
    op.create_table(
        'class_enrollments',
        _id(),
        sa.Column('class_id', sa.String(36), sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('student_id', sa.String(36), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('enrollment_date', sa.Date()),
        sa.Column('status', sa.String(32), nullable=False, server_default=sa.text("'active'")),
        _created_at(),
        _updated_at(),
    )
    op.create_table(
        'attendance',
        _id(),
        sa.Column('class_id', sa.String(36), sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('student_id', sa.String(36), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', sa.String(16), nullable=False),
        sa.Column('notes', sa.Text()),
        sa.Column('recorded_by', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL')),
        _created_at(),
        _updated_at(),
        sa.UniqueConstraint('class_id', 'student_id', 'date', name='attendance_class_student_date_key'),
        sa.CheckConstraint("status IN ('present', 'absent', 'justified')", name='attendance_status_check'),
    )


def downgrade() -> None:
    for table in [
        'attendance',
        'class_enrollments',
        'classes',
        'student_course_enrollments',
        'course_activities',
        'course_videos',
        'course_units',
        'books',
        'courses',
        'students',
        'staff',
        'units',
        'user_permissions',
        'users',
        'role_permissions',
        'roles',
        'permissions',
        'permission_categories',
    ]:
        op.drop_table(table)
