"""
Trip model for shared expense threads.
"""
from sqlalchemy import Column, String, Enum as SQLEnum, ForeignKey, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class TripVisibility(str, enum.Enum):
    """Trip visibility enumeration."""
    PRIVATE = "private"
    SHARED = "shared"


class Trip(BaseModel):
    """Trip model; the creator owns it and may invite participants."""
    __tablename__ = "trips"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    visibility = Column(SQLEnum(TripVisibility), default=TripVisibility.SHARED, nullable=False)

    # Relationships
    creator = relationship("User", back_populates="trips_created")
    participants = relationship("TripParticipant", back_populates="trip", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="trip")
    messages = relationship("TripMessage", back_populates="trip", cascade="all, delete-orphan")

    @property
    def participant_ids(self) -> list:
        return sorted(p.user_id for p in self.participants)

    def is_accessible_by(self, user_id: int) -> bool:
        """
        The creator always has access. Participants have access unless
        the trip is private.
        """
        if self.user_id == user_id:
            return True
        return user_id in self.participant_ids and self.visibility != TripVisibility.PRIVATE


class TripParticipant(BaseModel):
    """Junction table for Trip and User many-to-many relationship."""
    __tablename__ = "trip_participants"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    trip = relationship("Trip", back_populates="participants")
    user = relationship("User", back_populates="trip_memberships")
