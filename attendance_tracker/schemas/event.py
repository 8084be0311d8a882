"""Pydantic schemas for Events."""
from __future__ import annotations
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from attendance_tracker.schemas.group import GroupOut
from attendance_tracker.schemas.user import ParticipantOut


class EventOut(BaseModel):
    id: str
    name: str
    event_type: str
    min_member: Optional[int] = None
    max_member: Optional[int] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_event(cls, event) -> "EventOut":
        return cls(
            id=event.event_id,
            name=event.name,
            event_type=event.event_type.value,
            min_member=event.min_member,
            max_member=event.max_member,
        )


class EventsOut(BaseModel):
    events: list[EventOut] = []


class ParticipantsOut(BaseModel):
    """Roster envelope: teams for GROUP events, people for SOLO events."""

    participants: Union[list[GroupOut], list[ParticipantOut]] = []
