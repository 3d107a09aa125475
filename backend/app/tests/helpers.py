"""
Row builders shared by the test modules.
"""
from datetime import datetime
from app.core.security import create_access_token, get_password_hash
from app.models import User, Income, Expense, Trip, TripParticipant, TripVisibility


def make_user(db, full_name: str, email: str, password: str = "secret123") -> User:
    user = User(full_name=full_name, email=email, hashed_password=get_password_hash(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def add_income(db, user: User, amount: float, date: datetime = None, source: str = "salary") -> Income:
    income = Income(user_id=user.id, source=source, icon="💰", amount=amount,
                    date=date or datetime.now(), description="")
    db.add(income)
    db.commit()
    db.refresh(income)
    return income


def add_expense(db, user: User, amount: float, date: datetime = None, category: str = "food",
                trip_id: int = None) -> Expense:
    expense = Expense(user_id=user.id, category=category, icon="🍔", amount=amount,
                      date=date or datetime.now(), description="lunch", trip_id=trip_id)
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


def make_trip(db, owner: User, participants=(), visibility=TripVisibility.SHARED, name="Lisbon") -> Trip:
    trip = Trip(user_id=owner.id, name=name, visibility=visibility)
    db.add(trip)
    db.flush()
    for participant in participants:
        db.add(TripParticipant(trip_id=trip.id, user_id=participant.id))
    db.commit()
    db.refresh(trip)
    return trip
