"""
User model for authentication and user management.
"""
from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class User(BaseModel):
    """User model identified by a unique email."""
    __tablename__ = "users"

    full_name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    profile_image_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    incomes = relationship("Income", back_populates="user", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="user", cascade="all, delete-orphan")
    trips_created = relationship("Trip", back_populates="creator", cascade="all, delete-orphan")
    trip_memberships = relationship("TripParticipant", back_populates="user", cascade="all, delete-orphan")
    trip_messages = relationship("TripMessage", back_populates="user", cascade="all, delete-orphan")
