"""Event API routes: event listing and participant rosters."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from attendance_tracker.database import get_db
from attendance_tracker.schemas.event import EventOut, EventsOut, ParticipantsOut
from attendance_tracker.services import roster_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/events", response_model=EventsOut)
def list_events(db: Session = Depends(get_db)):
    """List all events."""
    events = roster_service.list_events(db)
    return EventsOut(events=[EventOut.from_event(e) for e in events])


@router.get("/event/{event_id}/participants", response_model=ParticipantsOut)
def list_participants(event_id: str, db: Session = Depends(get_db)):
    """Participants of an event: a flat list (SOLO) or teams (GROUP)."""
    return ParticipantsOut(participants=roster_service.get_roster(db, event_id))
