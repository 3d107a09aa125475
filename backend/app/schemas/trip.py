"""
Pydantic schemas for Trip and TripMessage entities.
"""
from pydantic import EmailStr, field_validator
from typing import List
import datetime as dt
from app.models.trip import TripVisibility
from app.schemas.common import APIModel
from app.schemas.user import UserSummary


class TripCreate(APIModel):
    """Schema for trip creation."""
    name: str
    visibility: TripVisibility = TripVisibility.SHARED
    participant_ids: List[int] = []

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please fill all required fields")
        return v.strip()


class TripResponse(APIModel):
    """Schema for trip response."""
    id: int
    user_id: int
    name: str
    visibility: TripVisibility
    participant_ids: List[int]
    created_at: dt.datetime


class ParticipantInvite(APIModel):
    """Schema for participant invitation."""
    email: EmailStr


class TripMessageResponse(APIModel):
    """Stored chat message enriched with the author's display identity."""
    id: int
    trip_id: int
    user_id: int
    message: str
    created_at: dt.datetime
    user: UserSummary
