"""Models package - Import all models for SQLAlchemy registration."""
from app.models.user import User
from app.models.income import Income
from app.models.expense import Expense
from app.models.trip import Trip, TripParticipant, TripVisibility
from app.models.trip_message import TripMessage

__all__ = [
    "User",
    "Income",
    "Expense",
    "Trip",
    "TripParticipant",
    "TripVisibility",
    "TripMessage",
]
