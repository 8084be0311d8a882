"""Value objects for the organizer view, parsed from the API's JSON."""
from __future__ import annotations
import enum
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from attendance_tracker.core.timeutils import ensure_utc


class EventType(str, enum.Enum):
    SOLO = "SOLO"
    GROUP = "GROUP"


class AttendanceStatus(str, enum.Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    PARTIAL = "PARTIAL"


_wire = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore")


class EventInfo(BaseModel):
    id: str
    name: str
    event_type: EventType
    min_member: Optional[int] = None
    max_member: Optional[int] = None

    model_config = _wire


class Participant(BaseModel):
    id: str
    name: str
    email: str
    enrollment_no: Optional[str] = None
    phone_number: Optional[str] = None
    is_temporary: bool = False

    model_config = _wire

    @property
    def email_key(self) -> str:
        return self.email.strip().lower()

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring match; ``needle`` must already be lowercase."""
        fields = (self.name, self.email, self.enrollment_no, self.phone_number)
        return any(needle in f.lower() for f in fields if f)


class Group(BaseModel):
    group_id: str
    leader: Participant
    members: tuple[Participant, ...] = ()

    model_config = _wire

    @property
    def is_temporary(self) -> bool:
        return self.leader.is_temporary

    def people(self) -> tuple[Participant, ...]:
        return (self.leader,) + self.members


class RecordUser(BaseModel):
    id: str
    name: str = ""
    email: str = ""

    model_config = _wire


class AttendanceRecord(BaseModel):
    id: str
    user: RecordUser = Field(alias="userId")
    event_id: str
    entry_time: Optional[datetime] = None
    exit_time: Optional[datetime] = None
    status: AttendanceStatus = AttendanceStatus.ABSENT
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_temporary: bool = False

    model_config = _wire

    @field_validator("entry_time", "exit_time", "created_at", "updated_at")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    @property
    def email_key(self) -> str:
        return self.user.email.strip().lower()


def parse_roster(items: list[dict], event_type: Optional[EventType] = None) -> list:
    """Parse a participants payload into Participants or Groups.

    Without an explicit event type the shape is decided by the presence of
    ``groupId`` on the first element.
    """
    if event_type is None:
        event_type = EventType.GROUP if items and "groupId" in items[0] else EventType.SOLO
    if event_type == EventType.GROUP:
        return [Group.model_validate(item) for item in items]
    return [Participant.model_validate(item) for item in items]
