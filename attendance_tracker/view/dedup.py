"""First-seen-wins deduplication of fetched rosters and attendance.

The roster provider has been known to return the same person more than
once, so everything is keyed on the lowercased email. All functions are
idempotent.
"""
from __future__ import annotations
from datetime import datetime
from typing import Iterable

import pytz

from attendance_tracker.view.models import AttendanceRecord, Group, Participant

_EPOCH = datetime(1970, 1, 1, tzinfo=pytz.utc)


def dedup_participants(participants: Iterable[Participant]) -> list[Participant]:
    seen: set[str] = set()
    kept = []
    for p in participants:
        if p.email_key in seen:
            continue
        seen.add(p.email_key)
        kept.append(p)
    return kept


def dedup_groups(groups: Iterable[Group]) -> list[Group]:
    """Keep the first group per (groupId, leader email); dedup members inside each."""
    seen: set[tuple[str, str]] = set()
    kept = []
    for g in groups:
        key = (g.group_id, g.leader.email_key)
        if key in seen:
            continue
        seen.add(key)
        members = tuple(dedup_participants(g.members))
        kept.append(g if members == g.members else g.model_copy(update={"members": members}))
    return kept


def dedup_roster(roster: list) -> list:
    if roster and isinstance(roster[0], Group):
        return dedup_groups(roster)
    return dedup_participants(roster)


def dedup_attendance(records: Iterable[AttendanceRecord]) -> list[AttendanceRecord]:
    """Newest record per email wins; the result is ordered newest first."""
    ordered = sorted(records, key=lambda r: r.created_at or _EPOCH, reverse=True)
    seen: set[str] = set()
    kept = []
    for r in ordered:
        if r.email_key in seen:
            continue
        seen.add(r.email_key)
        kept.append(r)
    return kept


def roster_emails(roster: list) -> set[str]:
    """Every lowercased email on a roster, leaders and members included."""
    emails: set[str] = set()
    for item in roster:
        if isinstance(item, Group):
            emails.update(p.email_key for p in item.people())
        else:
            emails.add(item.email_key)
    return emails
