"""
Trip chat channel: per-trip broadcast groups of live WebSocket connections,
plus message persistence.
"""
import logging
from collections import defaultdict
from typing import Any, Dict, Set
from fastapi import WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session
from app.models.trip_message import TripMessage
from app.schemas.trip import TripMessageResponse

logger = logging.getLogger(__name__)


class TripChannel:
    """
    Registry of connections joined to each trip.

    One instance lives for the lifetime of the application (see the lifespan
    in app.main). Only the trip socket endpoint talks to it.
    """

    def __init__(self):
        self._rooms: Dict[int, Set[WebSocket]] = defaultdict(set)

    def join(self, trip_id: int, websocket: WebSocket) -> None:
        self._rooms[trip_id].add(websocket)

    def is_member(self, trip_id: int, websocket: WebSocket) -> bool:
        return websocket in self._rooms.get(trip_id, ())

    def member_count(self, trip_id: int) -> int:
        return len(self._rooms.get(trip_id, ()))

    def disconnect(self, websocket: WebSocket) -> None:
        """Drop a connection from every group it joined."""
        for trip_id in list(self._rooms):
            room = self._rooms[trip_id]
            room.discard(websocket)
            if not room:
                del self._rooms[trip_id]

    async def broadcast(self, trip_id: int, event: str, data: Any) -> None:
        """Send an event to every connection in the trip's group, sender included."""
        for websocket in list(self._rooms.get(trip_id, ())):
            try:
                await websocket.send_json({"event": event, "data": data})
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.warning(f"Dropping dead connection from trip {trip_id}: {e}")
                self.disconnect(websocket)

    async def close(self) -> None:
        """Close every live connection and forget all groups."""
        connections = {ws for room in self._rooms.values() for ws in room}
        self._rooms.clear()
        for websocket in connections:
            try:
                await websocket.close(code=status.WS_1001_GOING_AWAY)
            except RuntimeError as e:
                logger.debug(f"Connection already closed during shutdown: {e}")


def post_message(trip_id: int, user_id: int, text: str, db: Session) -> TripMessage:
    """Persist a chat message; author and timestamp are assigned here."""
    message = TripMessage(trip_id=trip_id, user_id=user_id, message=text)
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


def serialize_message(message: TripMessage) -> dict:
    """JSON-ready message record with the author's display identity."""
    return TripMessageResponse.model_validate(message).model_dump(mode="json", by_alias=True)
