"""Session-only state of the organizer view.

Temporary participants, their synthetic attendance records and the set of
hidden rows live here and nowhere else. None of it is ever sent to the
server; a page reload starts from an empty state.
"""
from __future__ import annotations
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import NamedTuple, Optional

from attendance_tracker.core.timeutils import utcnow
from attendance_tracker.view.dedup import roster_emails
from attendance_tracker.view.errors import Conflict, ValidationError
from attendance_tracker.view.models import (
    AttendanceRecord,
    AttendanceStatus,
    EventInfo,
    EventType,
    Group,
    Participant,
    RecordUser,
)
from attendance_tracker.view.rows import RowKey, RowKind

logger = logging.getLogger(__name__)

TEMP_PREFIX = "temp-"


class NewPerson(NamedTuple):
    """Form input for a temporary participant."""

    name: str
    email: str
    enrollment_no: Optional[str] = None
    phone_number: Optional[str] = None


def _clean(person: NewPerson) -> NewPerson:
    return NewPerson(
        name=(person.name or "").strip(),
        email=(person.email or "").strip(),
        enrollment_no=(person.enrollment_no or "").strip() or None,
        phone_number=(person.phone_number or "").strip() or None,
    )


def _temp_id(kind: str) -> str:
    return f"{TEMP_PREFIX}{kind}-{uuid.uuid4()}"


@dataclass
class EphemeralState:
    solo: list[Participant] = field(default_factory=list)
    groups: list[Group] = field(default_factory=list)
    records: list[AttendanceRecord] = field(default_factory=list)
    hidden: set[RowKey] = field(default_factory=set)

    def temporary_emails(self) -> set[str]:
        return roster_emails(self.solo) | roster_emails(self.groups)

    def _make_participant(self, person: NewPerson) -> Participant:
        return Participant(
            id=_temp_id("user"),
            name=person.name,
            email=person.email,
            enrollment_no=person.enrollment_no,
            phone_number=person.phone_number,
            is_temporary=True,
        )

    def _make_record(self, participant: Participant, event_id: str, now: datetime) -> AttendanceRecord:
        return AttendanceRecord(
            id=_temp_id("record"),
            user=RecordUser(id=participant.id, name=participant.name, email=participant.email),
            event_id=event_id,
            entry_time=now,
            status=AttendanceStatus.PRESENT,
            created_at=now,
            updated_at=now,
            is_temporary=True,
        )

    def add_participant(
        self,
        person: NewPerson,
        event_id: str,
        roster: list,
        now: Optional[datetime] = None,
    ) -> Participant:
        """Add a temporary SOLO participant, already marked PRESENT.

        Raises ValidationError on a missing name/email and Conflict when the
        email is already on the roster or among the temporaries. Nothing
        changes when an error is raised.
        """
        person = _clean(person)
        if not person.name or not person.email:
            raise ValidationError("Name and email are required")

        email = person.email.lower()
        if email in roster_emails(roster) or email in self.temporary_emails():
            raise Conflict(f"A participant with email {person.email} already exists")

        participant = self._make_participant(person)
        self.solo.append(participant)
        self.records.append(self._make_record(participant, event_id, now or utcnow()))
        logger.info("Added temporary participant %s to event %s", email, event_id)
        return participant

    def add_group(
        self,
        leader: NewPerson,
        members: list[NewPerson],
        event: EventInfo,
        roster: list,
        now: Optional[datetime] = None,
    ) -> Group:
        """Add a temporary team; every person gets a synthetic PRESENT record.

        Member count (leader excluded) must lie within
        ``[min_member - 1, max_member - 1]``. Emails must be unique inside the
        submission and must not collide with the roster or earlier temporaries.
        """
        if event.event_type != EventType.GROUP:
            raise ValidationError(f"{event.name} is a {event.event_type.value} event; add a participant instead")
        leader = _clean(leader)
        members = [_clean(m) for m in members]

        if not leader.name or not leader.email:
            raise ValidationError("Leader name and email are required")
        if any(not m.name or not m.email for m in members):
            raise ValidationError("Every member needs a name and email")

        min_members = max((event.min_member or 1) - 1, 0)
        if len(members) < min_members:
            raise ValidationError(f"At least {min_members} member(s) required besides the leader")
        if event.max_member is not None and len(members) > event.max_member - 1:
            raise ValidationError(f"At most {event.max_member - 1} member(s) allowed besides the leader")

        emails = [p.email.lower() for p in [leader] + members]
        if len(set(emails)) != len(emails):
            raise ValidationError("Each person in the group needs a distinct email")

        taken = roster_emails(roster) | self.temporary_emails()
        clashes = sorted(e for e in emails if e in taken)
        if clashes:
            raise Conflict(f"Email already registered: {', '.join(clashes)}")

        now = now or utcnow()
        group = Group(
            group_id=_temp_id("group"),
            leader=self._make_participant(leader),
            members=tuple(self._make_participant(m) for m in members),
        )
        self.groups.append(group)
        self.records.extend(self._make_record(p, event.id, now) for p in group.people())
        logger.info("Added temporary group %s (%d people) to event %s", group.group_id, len(emails), event.id)
        return group

    def _drop_records(self, emails: set[str]) -> None:
        self.records = [r for r in self.records if r.email_key not in emails]

    def delete_row(self, key: RowKey) -> None:
        """Remove a temporary row outright, or hide a persisted one.

        Deleting a temporary leader drops the whole temporary group.
        """
        if key.kind == RowKind.SOLO:
            if any(p.email_key == key.email for p in self.solo):
                self.solo = [p for p in self.solo if p.email_key != key.email]
                self._drop_records({key.email})
                logger.info("Removed temporary participant %s", key.email)
                return
        else:
            group = next((g for g in self.groups if g.group_id == key.group_id), None)
            if group is not None:
                self._remove_from_group(group, key)
                return

        self.hidden.add(key)
        logger.info("Hid row %s", key)

    def _remove_from_group(self, group: Group, key: RowKey) -> None:
        if key.kind == RowKind.LEADER:
            if group.leader.email_key != key.email:
                return
            self.groups = [g for g in self.groups if g.group_id != group.group_id]
            self._drop_records({p.email_key for p in group.people()})
            logger.info("Removed temporary group %s", group.group_id)
            return

        remaining = tuple(m for m in group.members if m.email_key != key.email)
        if len(remaining) == len(group.members):
            return
        updated = group.model_copy(update={"members": remaining})
        self.groups = [updated if g.group_id == group.group_id else g for g in self.groups]
        self._drop_records({key.email})
        logger.info("Removed temporary member %s from group %s", key.email, group.group_id)
