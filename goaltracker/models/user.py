"""User model definitions."""
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    """Fields shared by every user representation."""

    email: EmailStr
    display_name: str


class UserCreate(UserBase):
    """Signup payload."""

    password: str = Field(min_length=6)


class User(UserBase):
    """User as returned by the API (never carries the password hash)."""

    id: str = Field(alias="_id", serialization_alias="id")
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}
