"""
Income model for tracking earnings.
"""
from datetime import datetime
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class Income(BaseModel):
    """Income model representing a single earning event."""
    __tablename__ = "incomes"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    source = Column(String(100), nullable=False)
    icon = Column(String(500), nullable=True)
    amount = Column(Numeric(15, 2, asdecimal=False), nullable=False)
    date = Column(DateTime, nullable=False, default=datetime.now, index=True)
    description = Column(Text, nullable=True)

    # Relationships
    user = relationship("User", back_populates="incomes")
