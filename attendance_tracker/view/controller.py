"""Organizer session for one event.

Persisted rows follow "mutate the server, then refetch attendance"; nothing
is patched locally. Temporary rows never reach the network. Network
failures are logged and reported through the notifier, and the last
fetched snapshot stays on screen. Nothing loads or changes until the
event password has been accepted.
"""
from __future__ import annotations
import logging
from typing import Optional, Protocol

from attendance_tracker.view.client import AttendanceApiClient
from attendance_tracker.view.dedup import dedup_attendance, dedup_roster
from attendance_tracker.view.errors import (
    AttendanceViewError,
    PreconditionFailed,
    ServerError,
    TransientNetworkError,
    Unauthorized,
    ValidationError,
)
from attendance_tracker.view.export import CsvExport, export_csv
from attendance_tracker.view.models import (
    AttendanceRecord,
    AttendanceStatus,
    EventInfo,
    EventType,
    Group,
    Participant,
)
from attendance_tracker.view.reconcile import ReconciledView, RowView, reconcile
from attendance_tracker.view.rows import RowKey
from attendance_tracker.view.session import EphemeralState, NewPerson

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class RecordingNotifier:
    """Collects toasts in memory."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    @property
    def errors(self) -> list[str]:
        return [m for level, m in self.messages if level == "error"]

    @property
    def last(self) -> Optional[tuple[str, str]]:
        return self.messages[-1] if self.messages else None


class EventAttendanceController:

    def __init__(
        self,
        event_id: str,
        api: Optional[AttendanceApiClient] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.api = api or AttendanceApiClient.from_settings()
        self.event_id = event_id
        self.notifier = notifier or RecordingNotifier()
        self.event: Optional[EventInfo] = None
        self.roster: list = []
        self.attendance: list[AttendanceRecord] = []
        self.state = EphemeralState()
        self.query = ""
        self.authenticated = False

    # -- loading ---------------------------------------------------------

    def _report(self, message: str, exc: AttendanceViewError) -> None:
        logger.error("%s: %s", message, exc)
        if isinstance(exc, (ServerError, TransientNetworkError)):
            self.notifier.error(message)
        else:
            self.notifier.error(str(exc) or message)

    def _require_auth(self, message: str) -> bool:
        if self.authenticated:
            return True
        self._report(message, Unauthorized("Enter the event password first"))
        return False

    def authenticate(self, password: str) -> bool:
        """Check the shared event password; the view stays locked until it passes."""
        try:
            if self.event is None:
                self.event = self.api.fetch_event(self.event_id)
            self.authenticated = self.api.verify_password(self.event.name, password)
        except AttendanceViewError as exc:
            self._report("Failed to verify password", exc)
            return False
        if not self.authenticated:
            self.notifier.error("Invalid password")
        return self.authenticated

    def fetch_event(self) -> bool:
        try:
            self.event = self.api.fetch_event(self.event_id)
        except AttendanceViewError as exc:
            self._report("Failed to fetch event data", exc)
            return False
        return True

    def fetch_participants(self) -> bool:
        if not self._require_auth("Failed to fetch participants"):
            return False
        event_type = self.event.event_type if self.event else None
        try:
            roster = self.api.fetch_participants(self.event_id, event_type)
        except AttendanceViewError as exc:
            self._report("Failed to fetch participants", exc)
            return False
        self.roster = dedup_roster(roster)
        return True

    def fetch_attendance(self) -> bool:
        if not self._require_auth("Failed to fetch attendance"):
            return False
        try:
            records = self.api.fetch_attendance(self.event_id)
        except AttendanceViewError as exc:
            self._report("Failed to fetch attendance", exc)
            return False
        self.attendance = dedup_attendance(records)
        return True

    def load(self) -> bool:
        """Fetch event, roster and attendance; each failure is reported on its own."""
        if not self._require_auth("Failed to load event"):
            return False
        results = [self.fetch_event(), self.fetch_participants(), self.fetch_attendance()]
        return all(results)

    # -- view ------------------------------------------------------------

    def view(self) -> ReconciledView:
        return reconcile(self.event, self.roster, self.attendance, self.state, self.query)

    def search(self, query: str) -> ReconciledView:
        self.query = query
        return self.view()

    def export_csv(self) -> Optional[CsvExport]:
        if not self._require_auth("Failed to export attendance"):
            return None
        return export_csv(self.view(), self.event.name if self.event else None)

    # -- server mutations ------------------------------------------------

    def _persisted_row(self, key: RowKey) -> Optional[RowView]:
        row = self.view().find(key)
        if row is None:
            self._report("Unknown row", PreconditionFailed(f"No visible row {key}"))
            return None
        if row.is_temporary:
            self._report(
                "Temporary row", PreconditionFailed("Temporary participants cannot be marked on the server")
            )
            return None
        return row

    def _mark(self, key: RowKey, action: str) -> bool:
        if not self._require_auth("Failed to record attendance"):
            return False
        row = self._persisted_row(key)
        if row is None:
            return False
        try:
            self.api.mark_attendance(row.participant.id, self.event_id, action)
        except AttendanceViewError as exc:
            self._report("Failed to record attendance", exc)
            return False
        self.notifier.success(f"{'Entry' if action == 'entry' else 'Exit'} recorded successfully")
        self.fetch_attendance()
        return True

    def mark_entry(self, key: RowKey) -> bool:
        return self._mark(key, "entry")

    def mark_exit(self, key: RowKey) -> bool:
        return self._mark(key, "exit")

    def set_status(self, key: RowKey, status: AttendanceStatus) -> bool:
        if not self._require_auth("Failed to update status"):
            return False
        row = self._persisted_row(key)
        if row is None:
            return False
        status = AttendanceStatus(status)
        try:
            self.api.update_status(row.participant.id, self.event_id, status)
        except AttendanceViewError as exc:
            self._report("Failed to update status", exc)
            return False
        self.notifier.success(f"Status updated to {status.value}")
        self.fetch_attendance()
        return True

    # -- session-only edits ----------------------------------------------

    def _event_of_type(self, event_type: EventType, message: str) -> Optional[EventInfo]:
        if not self._require_auth(message):
            return None
        if self.event is None:
            self._report(message, PreconditionFailed("Event details are not loaded"))
            return None
        if self.event.event_type != event_type:
            other = "group" if event_type == EventType.SOLO else "participant"
            self._report(
                message,
                ValidationError(f"{self.event.name} is a {self.event.event_type.value} event; add a {other} instead"),
            )
            return None
        return self.event

    def add_participant(self, person: NewPerson) -> Optional[Participant]:
        if self._event_of_type(EventType.SOLO, "Failed to add participant") is None:
            return None
        try:
            participant = self.state.add_participant(person, self.event_id, self.roster)
        except AttendanceViewError as exc:
            self._report("Failed to add participant", exc)
            return None
        self.notifier.success(f"Added {participant.name} for this session")
        return participant

    def add_group(self, leader: NewPerson, members: list[NewPerson]) -> Optional[Group]:
        event = self._event_of_type(EventType.GROUP, "Failed to add group")
        if event is None:
            return None
        try:
            group = self.state.add_group(leader, members, event, self.roster)
        except AttendanceViewError as exc:
            self._report("Failed to add group", exc)
            return None
        self.notifier.success(f"Added group led by {group.leader.name} for this session")
        return group

    def delete_row(self, key: RowKey) -> bool:
        if not self._require_auth("Failed to delete row"):
            return False
        self.state.delete_row(key)
        return True
