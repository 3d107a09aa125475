"""
Expense model for tracking spending.
"""
from datetime import datetime
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Expense(BaseModel):
    """Expense model representing a single spending event."""
    __tablename__ = "expenses"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=True, index=True)  # Optional, expense booked against a trip
    category = Column(String(100), nullable=False)
    icon = Column(String(500), nullable=True)
    amount = Column(Numeric(15, 2, asdecimal=False), nullable=False)
    date = Column(DateTime, nullable=False, default=datetime.now, index=True)
    description = Column(Text, nullable=True)

    # Relationships
    user = relationship("User", back_populates="expenses")
    trip = relationship("Trip", back_populates="expenses")
