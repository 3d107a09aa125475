"""
Pydantic schemas for User entity.
"""
from pydantic import EmailStr, field_validator
from typing import Optional
import datetime as dt
from app.schemas.common import APIModel


class UserCreate(APIModel):
    """Schema for user registration."""
    full_name: str
    email: EmailStr
    password: str
    profile_image_url: Optional[str] = None

    @field_validator("full_name", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please fill all required fields")
        return v


class UserLogin(APIModel):
    """Schema for user login."""
    email: EmailStr
    password: str


class UserSummary(APIModel):
    """Display identity attached to chat messages."""
    id: int
    full_name: str
    email: str


class UserResponse(UserSummary):
    """Schema for user response."""
    profile_image_url: Optional[str] = None
    created_at: dt.datetime


class Token(APIModel):
    """Schema for JWT token response."""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
