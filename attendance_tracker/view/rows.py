"""Row identity for the organizer view.

A displayed row is not identified by the participant's server id but by
its role and email: the same person may appear as leader of one group and
member of another, and each appearance can be hidden on its own.
"""
from __future__ import annotations
import enum
from typing import NamedTuple

LEADER_MARKER = "_leader_"
MEMBER_MARKER = "_member_"


class RowKind(str, enum.Enum):
    SOLO = "solo"
    LEADER = "leader"
    MEMBER = "member"


class RowKey(NamedTuple):
    kind: RowKind
    email: str
    group_id: str = ""

    @classmethod
    def solo(cls, email: str) -> RowKey:
        return cls(RowKind.SOLO, email.strip().lower())

    @classmethod
    def leader(cls, email: str, group_id: str) -> RowKey:
        return cls(RowKind.LEADER, email.strip().lower(), group_id)

    @classmethod
    def member(cls, email: str, group_id: str) -> RowKey:
        return cls(RowKind.MEMBER, email.strip().lower(), group_id)

    def __str__(self) -> str:
        if self.kind == RowKind.LEADER:
            return f"{self.email}{LEADER_MARKER}{self.group_id}"
        if self.kind == RowKind.MEMBER:
            return f"{self.email}{MEMBER_MARKER}{self.group_id}"
        return self.email

    @classmethod
    def parse(cls, text: str) -> RowKey:
        """Inverse of ``str()``: ``email``, ``email_leader_<gid>`` or ``email_member_<gid>``."""
        # Markers are searched after the domain so local parts stay untouched
        at = text.find("@")
        for marker, kind in ((LEADER_MARKER, RowKind.LEADER), (MEMBER_MARKER, RowKind.MEMBER)):
            idx = text.find(marker, at + 1)
            if idx != -1:
                return cls(kind, text[:idx].strip().lower(), text[idx + len(marker):])
        return cls.solo(text)
