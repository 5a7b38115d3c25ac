from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, UniqueConstraint, text
from sqlalchemy.orm import relationship

from .base import Base, id_column, created_at_column, updated_at_column


class PermissionCategory(Base):
    __tablename__ = 'permission_categories'

    id = id_column()
    name = Column(String(255), nullable=False, unique=True)
    display_name = Column(String(255), nullable=False)
    description = Column(Text)
    is_system_category = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    created_at = created_at_column()
    updated_at = updated_at_column()

    # Relationships
    permissions = relationship('Permission', back_populates='permission_category')


class Permission(Base):
    __tablename__ = 'permissions'

    id = id_column()
    name = Column(String(255), nullable=False, unique=True)
    display_name = Column(String(255), nullable=False)
    description = Column(Text)
    category_id = Column(ForeignKey('permission_categories.id', ondelete='SET NULL'))
    category = Column(String(255))
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    created_at = created_at_column()
    updated_at = updated_at_column()

    # Relationships
    permission_category = relationship('PermissionCategory', back_populates='permissions')


class Role(Base):
    __tablename__ = 'roles'

    id = id_column()
    name = Column(String(255), nullable=False, unique=True)
    display_name = Column(String(255), nullable=False)
    description = Column(Text)
    is_system_role = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    created_at = created_at_column()
    updated_at = updated_at_column()

    # Relationships
    role_permissions = relationship('RolePermission', back_populates='role', cascade='all, delete-orphan')


class RolePermission(Base):
    __tablename__ = 'role_permissions'
    __table_args__ = (
        UniqueConstraint('role_id', 'permission_id', name='role_permissions_role_permission_key'),
    )

    id = id_column()
    role_id = Column(ForeignKey('roles.id', ondelete='CASCADE'), nullable=False, index=True)
    permission_id = Column(ForeignKey('permissions.id', ondelete='CASCADE'), nullable=False)
    created_at = created_at_column()

    role = relationship('Role', back_populates='role_permissions')
    permission = relationship('Permission')


class UserPermission(Base):
    """Per-user grant (is_granted) or deny (not is_granted) of one permission."""
    __tablename__ = 'user_permissions'
    __table_args__ = (
        UniqueConstraint('user_id', 'permission_id', name='user_permissions_user_permission_key'),
    )

    id = id_column()
    user_id = Column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    permission_id = Column(ForeignKey('permissions.id', ondelete='CASCADE'), nullable=False)
    is_granted = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    created_at = created_at_column()

    user = relationship('User', back_populates='permission_overrides')
    permission = relationship('Permission')


class User(Base):
    __tablename__ = 'users'

    id = id_column()
    email = Column(String(255), nullable=False, unique=True)
    first_name = Column(String(255))
    last_name = Column(String(255))
    role = Column(String(64), nullable=False, default='student', server_default=text("'student'"))
    password = Column(String(512))
    profile_image_url = Column(String(2048))
    is_active = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    created_at = created_at_column()
    updated_at = updated_at_column()

    # Relationships
    permission_overrides = relationship('UserPermission', back_populates='user', cascade='all, delete-orphan')
    staff = relationship('Staff', back_populates='user', uselist=False)
    student = relationship('Student', back_populates='user', uselist=False)
    settings = relationship('UserSettings', back_populates='user', uselist=False, cascade='all, delete-orphan')


class UserSettings(Base):
    """Interface preferences of one user."""
    __tablename__ = 'user_settings'

    id = id_column()
    user_id = Column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    theme = Column(String(16), nullable=False, default='light', server_default=text("'light'"))
    language = Column(String(16), nullable=False, default='pt-BR', server_default=text("'pt-BR'"))
    timezone = Column(String(64), nullable=False, default='America/Sao_Paulo', server_default=text("'America/Sao_Paulo'"))
    date_format = Column(String(16), nullable=False, default='DD/MM/YYYY', server_default=text("'DD/MM/YYYY'"))
    currency = Column(String(8), nullable=False, default='BRL', server_default=text("'BRL'"))
    email_notifications = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    push_notifications = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    lesson_reminders = Column(Boolean, nullable=False, default=True, server_default=text("true"))
    weekly_reports = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    session_timeout = Column(Integer, nullable=False, default=30, server_default=text("30"))  # minutes
    created_at = created_at_column()
    updated_at = updated_at_column()

    user = relationship('User', back_populates='settings')
