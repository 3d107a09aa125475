"""
Trip management routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.models.user import User
from app.models.trip import Trip, TripParticipant
from app.models.trip_message import TripMessage
from app.schemas.trip import TripCreate, TripResponse, ParticipantInvite, TripMessageResponse
from app.api.dependencies import get_current_user

router = APIRouter(prefix="/trips", tags=["trips"])


def check_trip_access(trip_id: int, user_id: int, db: Session) -> Trip:
    """Check if user has access to trip."""
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Trip not found"
        )

    if not trip.is_accessible_by(user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied"
        )

    return trip


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new trip owned by the current user."""
    participant_ids = set(trip_data.participant_ids) - {current_user.id}
    if participant_ids:
        found = db.query(User.id).filter(User.id.in_(participant_ids)).count()
        if found != len(participant_ids):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

    new_trip = Trip(
        user_id=current_user.id,
        name=trip_data.name,
        visibility=trip_data.visibility
    )
    db.add(new_trip)
    db.flush()

    for user_id in sorted(participant_ids):
        db.add(TripParticipant(trip_id=new_trip.id, user_id=user_id))
    db.commit()
    db.refresh(new_trip)

    return new_trip


@router.get("", response_model=List[TripResponse])
async def list_trips(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List trips the current user created or participates in."""
    trips = db.query(Trip).outerjoin(TripParticipant).filter(
        or_(Trip.user_id == current_user.id, TripParticipant.user_id == current_user.id)
    ).distinct().order_by(Trip.created_at.desc(), Trip.id.desc()).all()
    return trips


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get trip details."""
    return check_trip_access(trip_id, current_user.id, db)


@router.post("/{trip_id}/participants", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def add_participant(
    trip_id: int,
    invite: ParticipantInvite,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add a participant to the trip (creator only)."""
    trip = check_trip_access(trip_id, current_user.id, db)
    if trip.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the trip creator can add participants"
        )

    user = db.query(User).filter(User.email == invite.email).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    if user.id == trip.user_id or user.id in trip.participant_ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User is already a participant"
        )

    db.add(TripParticipant(trip_id=trip.id, user_id=user.id))
    db.commit()
    db.refresh(trip)

    return trip


@router.get("/{trip_id}/messages", response_model=List[TripMessageResponse])
async def get_trip_messages(
    trip_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Chat history for a trip, oldest first."""
    check_trip_access(trip_id, current_user.id, db)

    return db.query(TripMessage).filter(
        TripMessage.trip_id == trip_id
    ).order_by(TripMessage.created_at.asc(), TripMessage.id.asc()).all()
