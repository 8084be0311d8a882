"""Builds the organizer's view of an event.

The view is a pure function of the persisted roster, the persisted
attendance, the session's temporary additions and hidden rows, and the
search query. Counters ignore the search query; they always describe every
row that is not hidden.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Optional

from attendance_tracker.view.dedup import dedup_attendance, dedup_roster
from attendance_tracker.view.models import (
    AttendanceRecord,
    AttendanceStatus,
    EventInfo,
    EventType,
    Group,
    Participant,
)
from attendance_tracker.view.rows import RowKey
from attendance_tracker.view.session import EphemeralState


@dataclass(frozen=True)
class RowView:
    key: RowKey
    participant: Participant
    record: Optional[AttendanceRecord] = None

    @property
    def status(self) -> AttendanceStatus:
        return self.record.status if self.record else AttendanceStatus.ABSENT

    @property
    def is_temporary(self) -> bool:
        return self.participant.is_temporary

    @property
    def can_enter(self) -> bool:
        return not self.is_temporary and (self.record is None or self.record.entry_time is None)

    @property
    def can_exit(self) -> bool:
        return (
            not self.is_temporary
            and self.record is not None
            and self.record.entry_time is not None
            and self.record.exit_time is None
        )

    @property
    def can_override(self) -> bool:
        return not self.is_temporary


@dataclass(frozen=True)
class GroupView:
    group_id: str
    leader: Optional[RowView]  # None when the leader row is hidden
    members: tuple[RowView, ...]

    def rows(self) -> tuple[RowView, ...]:
        return ((self.leader,) if self.leader else ()) + self.members


@dataclass(frozen=True)
class Counters:
    total: int
    present: int
    absent: int
    rate: int

    @classmethod
    def from_rows(cls, rows: list[RowView]) -> Counters:
        """Total counts rows; present counts records, so one person shown twice is present once."""
        total = len(rows)
        present = len({r.record.email_key for r in rows if r.status == AttendanceStatus.PRESENT})
        # Half-up, so 12.5% shows as 13%
        rate = (present * 200 + total) // (2 * total) if total else 0
        return cls(total=total, present=present, absent=total - present, rate=rate)


@dataclass(frozen=True)
class ReconciledView:
    event_type: EventType
    counters: Counters
    query: str
    # Every row that is not hidden, in roster order
    visible_rows: tuple[RowView, ...] = ()
    visible_groups: tuple[GroupView, ...] = ()
    # The subset matching the search query
    rows: tuple[RowView, ...] = ()
    groups: tuple[GroupView, ...] = ()

    def iter_visible(self) -> Iterator[RowView]:
        if self.event_type == EventType.GROUP:
            for g in self.visible_groups:
                yield from g.rows()
        else:
            yield from self.visible_rows

    def find(self, key: RowKey) -> Optional[RowView]:
        return next((r for r in self.iter_visible() if r.key == key), None)


def record_index(
    attendance: list[AttendanceRecord],
    temporary: list[AttendanceRecord],
) -> dict[str, AttendanceRecord]:
    """Lowercased email -> record; persisted records take precedence."""
    index: dict[str, AttendanceRecord] = {}
    for record in list(dedup_attendance(attendance)) + list(temporary):
        index.setdefault(record.email_key, record)
    return index


def _solo_rows(participants: list[Participant], records: dict, hidden: set) -> list[RowView]:
    rows = []
    for p in participants:
        key = RowKey.solo(p.email)
        if key not in hidden:
            rows.append(RowView(key, p, records.get(p.email_key)))
    return rows


def _group_views(groups: list[Group], records: dict, hidden: set) -> list[GroupView]:
    views = []
    for g in groups:
        leader_key = RowKey.leader(g.leader.email, g.group_id)
        leader = None
        if leader_key not in hidden:
            leader = RowView(leader_key, g.leader, records.get(g.leader.email_key))
        members = []
        for m in g.members:
            key = RowKey.member(m.email, g.group_id)
            if key not in hidden:
                members.append(RowView(key, m, records.get(m.email_key)))
        if leader is None and not members:
            continue
        views.append(GroupView(g.group_id, leader, tuple(members)))
    return views


def filter_rows(rows: list[RowView], query: str) -> list[RowView]:
    needle = query.lower()
    if not needle:
        return list(rows)
    return [r for r in rows if r.participant.matches(needle)]


def filter_groups(groups: list[GroupView], query: str) -> list[GroupView]:
    """A matching leader keeps the whole group; otherwise only matching members stay."""
    needle = query.lower()
    if not needle:
        return list(groups)
    kept = []
    for g in groups:
        if g.leader is not None and g.leader.participant.matches(needle):
            kept.append(g)
            continue
        matching = tuple(m for m in g.members if m.participant.matches(needle))
        if matching:
            kept.append(GroupView(g.group_id, g.leader, matching))
    return kept


def resolve_event_type(event: Optional[EventInfo], roster: list) -> EventType:
    if event is not None:
        return event.event_type
    if roster and isinstance(roster[0], Group):
        return EventType.GROUP
    return EventType.SOLO


def reconcile(
    event: Optional[EventInfo],
    roster: list,
    attendance: list[AttendanceRecord],
    state: EphemeralState,
    query: str = "",
) -> ReconciledView:
    """Merge persisted and session state into the displayed view."""
    event_type = resolve_event_type(event, roster)
    records = record_index(attendance, state.records)
    roster = dedup_roster(roster)

    if event_type == EventType.GROUP:
        groups = _group_views(list(roster) + state.groups, records, state.hidden)
        visible = [r for g in groups for r in g.rows()]
        return ReconciledView(
            event_type=event_type,
            counters=Counters.from_rows(visible),
            query=query,
            visible_groups=tuple(groups),
            groups=tuple(filter_groups(groups, query)),
        )

    rows = _solo_rows(list(roster) + state.solo, records, state.hidden)
    return ReconciledView(
        event_type=event_type,
        counters=Counters.from_rows(rows),
        query=query,
        visible_rows=tuple(rows),
        rows=tuple(filter_rows(rows, query)),
    )
