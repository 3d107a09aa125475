"""
WebSocket endpoint for real-time trip chat.

Frames are JSON objects of the form {"event": <name>, "data": <payload>}.
Client events: "join-trip" (data = trip id) and "trip-message"
(data = {"tripId", "message"}). Server events: "joined", "trip-message"
and "error".
"""
import json
import logging
from typing import Any, Optional
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.security import decode_access_token, parse_user_id
from app.db.session import get_db
from app.models.trip import Trip
from app.models.user import User
from app.services.trip_channel import TripChannel, post_message, serialize_message

logger = logging.getLogger(__name__)

router = APIRouter(tags=["trip-chat"])


def _token_from(websocket: WebSocket) -> Optional[str]:
    """Bearer token from the query string or the Authorization header."""
    token = websocket.query_params.get("token")
    if token:
        return token
    authorization = websocket.headers.get("authorization", "")
    if authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


def _as_trip_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        trip_id = int(value)
    except (TypeError, ValueError):
        return None
    return trip_id if trip_id > 0 else None


async def _emit(websocket: WebSocket, event: str, data: Any) -> None:
    await websocket.send_json({"event": event, "data": data})


async def _join_trip(websocket: WebSocket, channel: TripChannel, user_id: int, data: Any, db: Session) -> None:
    trip_id = _as_trip_id(data)
    try:
        trip = db.query(Trip).filter(Trip.id == trip_id).first() if trip_id else None
        if not trip:
            await _emit(websocket, "error", "Trip not found")
            return
        allowed = trip.is_accessible_by(user_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Join trip error: {e}", exc_info=True)
        await _emit(websocket, "error", "Server error")
        return

    if not allowed:
        logger.warning(f"User {user_id} denied access to trip {trip_id}")
        await _emit(websocket, "error", "Access denied")
        return

    channel.join(trip_id, websocket)
    logger.info(f"User {user_id} joined trip {trip_id}")
    await _emit(websocket, "joined", trip_id)


async def _publish(websocket: WebSocket, channel: TripChannel, user_id: int, data: Any, db: Session) -> None:
    payload = data if isinstance(data, dict) else {}
    trip_id = _as_trip_id(payload.get("tripId"))
    text = payload.get("message")
    text = text.strip() if isinstance(text, str) else ""

    if trip_id is None or not text:
        if settings.TRIP_CHANNEL_STRICT_EVENTS:
            await _emit(websocket, "error", "Trip ID and message are required")
        else:
            logger.debug(f"Dropping malformed trip-message from user {user_id}")
        return

    if not channel.is_member(trip_id, websocket):
        await _emit(websocket, "error", "Access denied")
        return

    try:
        message = post_message(trip_id, user_id, text, db)
        record = serialize_message(message)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Trip message error: {e}", exc_info=True)
        await _emit(websocket, "error", "Message not sent")
        return

    await channel.broadcast(trip_id, "trip-message", record)


@router.websocket("/ws/trips")
async def trip_socket(websocket: WebSocket, db: Session = Depends(get_db)):
    """Authenticate once, then serve join and message events until disconnect."""
    token = _token_from(websocket)
    payload = decode_access_token(token) if token else None
    user_id = parse_user_id(payload) if payload else None
    user = db.query(User).filter(User.id == user_id).first() if user_id else None

    if not user or not user.is_active:
        logger.warning("Trip socket auth failed")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="unauthorized")
        return

    user_id = user.id
    channel: TripChannel = websocket.app.state.trip_channel
    await websocket.accept()
    logger.info(f"User connected: {user_id}")

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE), message.get("reason"))
            raw = message.get("text")
            if raw is None:
                logger.debug(f"Ignoring binary frame from user {user_id}")
                continue
            try:
                frame = json.loads(raw)
            except ValueError:
                logger.debug(f"Ignoring non-JSON frame from user {user_id}")
                continue
            if not isinstance(frame, dict):
                continue

            # Each event sees fresh rows (participants may change mid-connection)
            db.expire_all()

            event = frame.get("event")
            if event == "join-trip":
                await _join_trip(websocket, channel, user_id, frame.get("data"), db)
            elif event == "trip-message":
                await _publish(websocket, channel, user_id, frame.get("data"), db)
            else:
                logger.debug(f"Ignoring unknown event {event!r} from user {user_id}")
    except WebSocketDisconnect as e:
        logger.info(f"User disconnected: {user_id} (code {e.code})")
    finally:
        channel.disconnect(websocket)
