from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator, EmailStr
from typing import Optional
from sqlalchemy.orm import Session
from school_backend.interface.base import BaseEntityGet, BaseEntityList, EntityInterface, ListQuery
from school_backend.interface.tokens import encrypt_password
from school_backend.model.auth import User
from school_backend.permissions.catalog import RoleName

class UserCreate(BaseModel):
    email: EmailStr = Field(description="User's email address")
    first_name: Optional[str] = Field(None, min_length=1, max_length=255, description="User's first name")
    last_name: Optional[str] = Field(None, min_length=1, max_length=255, description="User's last name")
    role: RoleName = Field(RoleName.student, description="System role")
    password: Optional[str] = Field(None, min_length=6, max_length=255, description="Login password")
    profile_image_url: Optional[str] = Field(None, max_length=2048, description="Avatar URL")
    is_active: Optional[bool] = Field(None, description="Whether the account can log in")

    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_names(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Name cannot be empty or only whitespace')
        return v.strip() if v else v

    model_config = ConfigDict(use_enum_values=True, extra='forbid')

class UserGet(BaseEntityGet):
    id: str = Field(description="User unique identifier")
    email: str = Field(description="User's email address")
    first_name: Optional[str] = Field(None, description="User's first name")
    last_name: Optional[str] = Field(None, description="User's last name")
    role: str = Field(description="System role")
    profile_image_url: Optional[str] = Field(None, description="Avatar URL")
    is_active: bool = Field(description="Whether the account can log in")

    model_config = ConfigDict(from_attributes=True)

class UserList(BaseEntityList):
    id: str = Field(description="User unique identifier")
    email: str = Field(description="User's email address")
    first_name: Optional[str] = Field(None, description="User's first name")
    last_name: Optional[str] = Field(None, description="User's last name")
    role: str = Field(description="System role")
    is_active: bool = Field(description="Whether the account can log in")

    model_config = ConfigDict(from_attributes=True)

class UserUpdate(BaseModel):
    email: Optional[EmailStr] = Field(None, description="User's email address")
    first_name: Optional[str] = Field(None, min_length=1, max_length=255, description="User's first name")
    last_name: Optional[str] = Field(None, min_length=1, max_length=255, description="User's last name")
    role: Optional[RoleName] = Field(None, description="System role")
    password: Optional[str] = Field(None, min_length=6, max_length=255, description="New login password")
    profile_image_url: Optional[str] = Field(None, max_length=2048, description="Avatar URL")
    is_active: Optional[bool] = None

    model_config = ConfigDict(use_enum_values=True, extra='forbid')

class UserQuery(ListQuery):
    id: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[RoleName] = None
    is_active: Optional[bool] = None

    model_config = ConfigDict(use_enum_values=True)

def user_search(db: Session, query, params: Optional[UserQuery]):

    if params.id != None:
        query = query.filter(User.id == params.id)
    if params.email != None:
        query = query.filter(User.email == params.email)
    if params.first_name != None:
        query = query.filter(User.first_name == params.first_name)
    if params.last_name != None:
        query = query.filter(User.last_name == params.last_name)
    if params.role != None:
        query = query.filter(User.role == params.role)
    if params.is_active != None:
        query = query.filter(User.is_active == params.is_active)

    return query.order_by(User.email)

def encrypt_password_field(data: dict, db: Session, current: Optional[User] = None) -> dict:
    if data.get("password") is not None:
        data["password"] = encrypt_password(data["password"])
    return data

class UserInterface(EntityInterface):
    create = UserCreate
    get = UserGet
    list = UserList
    update = UserUpdate
    query = UserQuery
    search = user_search
    endpoint = "users"
    model = User
    permission_category = "staff"
    cache_ttl = 60
    pre_create = encrypt_password_field
    pre_update = encrypt_password_field

# Settings

class Theme(str, Enum):
    light = "light"
    dark = "dark"

class UserSettingsGet(BaseModel):
    user_id: str
    theme: Theme
    language: str
    timezone: str
    date_format: str
    currency: str
    email_notifications: bool
    push_notifications: bool
    lesson_reminders: bool
    weekly_reports: bool
    session_timeout: int = Field(description="Idle minutes before the session ends")

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

class UserSettingsUpdate(BaseModel):
    theme: Optional[Theme] = None
    language: Optional[str] = Field(None, min_length=2, max_length=16)
    timezone: Optional[str] = Field(None, min_length=1, max_length=64)
    date_format: Optional[str] = Field(None, min_length=1, max_length=16)
    currency: Optional[str] = Field(None, min_length=3, max_length=8)
    email_notifications: Optional[bool] = None
    push_notifications: Optional[bool] = None
    lesson_reminders: Optional[bool] = None
    weekly_reports: Optional[bool] = None
    session_timeout: Optional[int] = Field(None, ge=5, le=1440)

    model_config = ConfigDict(use_enum_values=True, extra='forbid')
