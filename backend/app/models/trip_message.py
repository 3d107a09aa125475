"""
Trip chat message model.
"""
from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class TripMessage(BaseModel):
    """Append-only chat message posted to a trip."""
    __tablename__ = "trip_messages"

    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    message = Column(Text, nullable=False)

    # Relationships
    trip = relationship("Trip", back_populates="messages")
    user = relationship("User", back_populates="trip_messages")
