"""Participant roster provider: SOLO participant lists and GROUP teams."""
import logging
from typing import Union
from fastapi import HTTPException
from sqlalchemy.orm import Session

from attendance_tracker.models.event import Event, EventType
from attendance_tracker.models.registration import Registration, Team
from attendance_tracker.schemas.group import GroupOut
from attendance_tracker.schemas.user import ParticipantOut

logger = logging.getLogger(__name__)


def get_event(db: Session, event_id: str) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


def list_events(db: Session) -> list[Event]:
    return db.query(Event).order_by(Event.name).all()


def get_roster(db: Session, event_id: str) -> Union[list[GroupOut], list[ParticipantOut]]:
    """Return the event's roster.

    SOLO events yield participants; GROUP events yield teams with their
    leader and members. Duplicates are passed through untouched; the
    organizer view deduplicates them.
    """
    event = get_event(db, event_id)

    if event.event_type == EventType.group:
        teams = (
            db.query(Team)
            .filter(Team.event_id == event_id)
            .order_by(Team.position, Team.created_at)
            .all()
        )
        logger.debug("Roster for GROUP event %s: %d teams", event_id, len(teams))
        return [GroupOut.from_team(t) for t in teams]

    registrations = (
        db.query(Registration)
        .filter(Registration.event_id == event_id)
        .order_by(Registration.position, Registration.created_at)
        .all()
    )
    logger.debug("Roster for SOLO event %s: %d participants", event_id, len(registrations))
    return [ParticipantOut.from_user(r.user) for r in registrations]
