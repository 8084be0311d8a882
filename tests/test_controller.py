"""End-to-end tests of the organizer controller against the real API in-process."""
from typing import Optional

import httpx
import pytest

from attendance_tracker.config import settings
from attendance_tracker.models.event import EventType
from attendance_tracker.view.client import AttendanceApiClient
from attendance_tracker.view.controller import EventAttendanceController, RecordingNotifier
from attendance_tracker.view.errors import NotFound, ServerError, TransientNetworkError
from attendance_tracker.view.models import AttendanceStatus
from attendance_tracker.view.rows import RowKey
from attendance_tracker.view.session import NewPerson
from tests.conftest import create_test_event, create_test_team, create_test_user, register_solo


def _failing_client(exc_factory=None, response=None) -> AttendanceApiClient:
    """A client whose every request raises, or answers with a copy of ``response``."""
    def handler(request):
        if response is not None:
            return httpx.Response(response.status_code, headers=response.headers, content=response.content)
        raise exc_factory(request)

    return AttendanceApiClient(httpx.Client(base_url="http://testserver", transport=httpx.MockTransport(handler)))


def _controller(client, ev, password: Optional[str] = None):
    notifier = RecordingNotifier()
    ctl = EventAttendanceController(ev.event_id, AttendanceApiClient(client), notifier)
    if password is not None:
        assert ctl.authenticate(password)
    return ctl, notifier


@pytest.fixture
def solo_event_row(db):
    ev = create_test_event(db, "Aavishkar")
    ann = create_test_user(db, "Ann", "ann@fest.in", enrollment_no="EN-1")
    ben = create_test_user(db, "Ben", "ben@fest.in")
    dup = create_test_user(db, "Ann Again", "ann2@fest.in")
    register_solo(db, ev, [ann, ben, ann, dup])
    return ev


@pytest.fixture
def solo_setup(client, solo_event_row):
    ctl, notifier = _controller(client, solo_event_row, "AAVI2025")
    return ctl, notifier, solo_event_row


@pytest.fixture
def group_setup(client, db):
    ev = create_test_event(db, "Code Relay", EventType.group, min_member=2, max_member=4)
    alice = create_test_user(db, "Alice", "alice@x")
    bob = create_test_user(db, "Bob", "bob@x")
    carol = create_test_user(db, "Carol", "carol@y")
    team = create_test_team(db, ev, alice, [bob, carol])
    ctl, notifier = _controller(client, ev, "RELAY2025")
    return ctl, notifier, team


class TestAuthentication:

    def test_correct_password(self, client, solo_event_row):
        ctl, notifier = _controller(client, solo_event_row)
        assert ctl.authenticate("AAVI2025") is True
        assert ctl.authenticated
        assert notifier.errors == []

    def test_wrong_password(self, client, solo_event_row):
        ctl, notifier = _controller(client, solo_event_row)
        assert ctl.authenticate("nope") is False
        assert notifier.errors == ["Invalid password"]

    def test_locked_controller_cannot_load_or_mark(self, client, solo_event_row):
        ctl, notifier = _controller(client, solo_event_row)
        ctl.authenticate("nope")

        assert ctl.load() is False
        assert ctl.roster == []
        assert ctl.mark_entry(RowKey.solo("ann@fest.in")) is False
        assert ctl.set_status(RowKey.solo("ann@fest.in"), AttendanceStatus.PRESENT) is False
        assert ctl.add_participant(NewPerson("Walk In", "walkin@x")) is None
        assert ctl.delete_row(RowKey.solo("ann@fest.in")) is False
        assert ctl.export_csv() is None
        assert notifier.errors[1:] == ["Enter the event password first"] * 6

        server = client.get("/api/attendance", params={"eventId": solo_event_row.event_id}).json()["attendance"]
        assert server == []
        assert ctl.state.solo == [] and ctl.state.hidden == set()

    def test_unlocks_after_correct_password(self, client, solo_event_row):
        ctl, _ = _controller(client, solo_event_row)
        assert ctl.load() is False
        ctl.authenticate("AAVI2025")
        assert ctl.load() is True
        assert ctl.view().counters.total == 3


class TestSoloFlow:

    def test_load_dedups_roster(self, solo_setup):
        ctl, _, _ = solo_setup
        assert ctl.load() is True
        view = ctl.view()
        assert [r.participant.email for r in view.rows] == ["ann@fest.in", "ben@fest.in", "ann2@fest.in"]
        assert view.counters.total == 3
        assert view.counters.present == 0

    def test_entry_exit_and_override_refetch(self, solo_setup):
        ctl, notifier, _ = solo_setup
        ctl.load()
        key = RowKey.solo("ann@fest.in")

        assert ctl.mark_entry(key) is True
        assert notifier.last == ("success", "Entry recorded successfully")
        row = ctl.view().find(key)
        assert row.status == AttendanceStatus.PRESENT
        assert row.can_exit and not row.can_enter
        assert ctl.view().counters.present == 1

        assert ctl.mark_exit(key) is True
        assert notifier.last == ("success", "Exit recorded successfully")
        assert ctl.view().find(key).record.exit_time is not None

        assert ctl.set_status(key, AttendanceStatus.ABSENT) is True
        assert notifier.last == ("success", "Status updated to ABSENT")
        row = ctl.view().find(key)
        assert row.record.entry_time is None
        assert row.status == AttendanceStatus.ABSENT

    def test_override_without_record_reports_not_found(self, solo_setup):
        ctl, notifier, _ = solo_setup
        ctl.load()
        assert ctl.set_status(RowKey.solo("ben@fest.in"), AttendanceStatus.PARTIAL) is False
        assert notifier.errors == ["Attendance record not found"]

    def test_temporary_rows_never_reach_server(self, solo_setup, client):
        ctl, notifier, ev = solo_setup
        ctl.load()
        assert ctl.add_participant(NewPerson("Walk In", "walkin@x")) is not None
        assert ctl.view().counters.present == 1

        assert ctl.mark_entry(RowKey.solo("walkin@x")) is False
        assert ctl.set_status(RowKey.solo("walkin@x"), AttendanceStatus.ABSENT) is False
        assert notifier.errors[-1] == "Temporary participants cannot be marked on the server"
        server = client.get("/api/attendance", params={"eventId": ev.event_id}).json()["attendance"]
        assert server == []

    def test_duplicate_temporary_is_reported(self, solo_setup):
        ctl, notifier, _ = solo_setup
        ctl.load()
        assert ctl.add_participant(NewPerson("Ann", "Ann@Fest.in")) is None
        assert notifier.errors == ["A participant with email Ann@Fest.in already exists"]
        assert ctl.state.solo == []

    def test_delete_hides_and_export(self, solo_setup):
        ctl, _, _ = solo_setup
        ctl.load()
        ctl.delete_row(RowKey.solo("ben@fest.in"))
        assert ctl.view().counters.total == 2
        assert ctl.mark_entry(RowKey.solo("ben@fest.in")) is False

        export = ctl.export_csv()
        assert export.filename == "Aavishkar_attendance.csv"
        assert export.content.split("\n")[1:] == [
            "Ann,ann@fest.in,EN-1,—,",
            "Ann Again,ann2@fest.in,—,—,",
        ]

    def test_search(self, solo_setup):
        ctl, _, _ = solo_setup
        ctl.load()
        view = ctl.search("EN-1")
        assert [r.participant.name for r in view.rows] == ["Ann"]
        assert ctl.view().query == "EN-1"


class TestGroupFlow:

    def test_member_entry_and_temporary_group(self, group_setup):
        ctl, notifier, team = group_setup
        ctl.load()
        assert ctl.mark_entry(RowKey.member("carol@y", team.team_id)) is True
        view = ctl.search("carol")
        assert [m.participant.email for m in view.groups[0].members] == ["carol@y"]
        assert view.counters.present == 1

        assert ctl.add_group(NewPerson("Tia", "tia@x"), [NewPerson("Uma", "uma@x")]) is not None
        counters = ctl.view().counters
        assert (counters.total, counters.present, counters.rate) == (5, 3, 60)

        assert ctl.add_group(NewPerson("Vik", "vik@x"), [NewPerson(f"M{i}", f"m{i}@x") for i in range(4)]) is None
        assert notifier.errors == ["At most 3 member(s) allowed besides the leader"]

    def test_add_shape_must_match_event(self, group_setup):
        ctl, notifier, _ = group_setup
        ctl.load()
        before = ctl.view().counters

        assert ctl.add_participant(NewPerson("Walk In", "walkin@x")) is None
        assert notifier.errors == ["Code Relay is a GROUP event; add a group instead"]
        assert ctl.state.solo == [] and ctl.state.records == []
        assert ctl.view().counters == before
        assert ctl.add_group(NewPerson("Walk In", "walkin@x"), [NewPerson("Uma", "uma@x")]) is not None

    def test_group_rejected_on_solo_event(self, solo_setup):
        ctl, notifier, _ = solo_setup
        ctl.load()
        assert ctl.add_group(NewPerson("Tia", "tia@x"), []) is None
        assert notifier.errors == ["Aavishkar is a SOLO event; add a participant instead"]
        assert ctl.state.groups == []
        assert ctl.add_participant(NewPerson("Tia", "tia@x")) is not None


class TestFailures:

    def test_network_failure_keeps_last_view(self, solo_setup):
        ctl, notifier, _ = solo_setup
        ctl.load()
        ctl.mark_entry(RowKey.solo("ann@fest.in"))
        before = ctl.view()

        ctl.api = _failing_client(lambda request: httpx.ConnectError("connection refused", request=request))
        assert ctl.fetch_attendance() is False
        assert ctl.mark_entry(RowKey.solo("ben@fest.in")) is False
        assert notifier.errors == ["Failed to fetch attendance", "Failed to record attendance"]
        assert ctl.view() == before

    def test_load_reports_each_failure(self, solo_setup):
        ctl, notifier, _ = solo_setup
        ctl.api = _failing_client(response=httpx.Response(503, json={"success": False, "message": "down"}))
        assert ctl.load() is False
        assert notifier.errors == [
            "Failed to fetch event data",
            "Failed to fetch participants",
            "Failed to fetch attendance",
        ]


class TestApiClient:

    def test_error_mapping(self):
        api = _failing_client(response=httpx.Response(500, json={"success": False, "message": "boom"}))
        with pytest.raises(ServerError, match="boom"):
            api.fetch_attendance("ev")

        api = _failing_client(lambda request: httpx.ReadTimeout("slow", request=request))
        with pytest.raises(TransientNetworkError):
            api.fetch_events()

    def test_non_json_error_body(self):
        api = _failing_client(response=httpx.Response(502, text="<html>bad gateway</html>"))
        with pytest.raises(ServerError, match="502"):
            api.fetch_attendance("ev")

    def test_unknown_event(self, client):
        with pytest.raises(NotFound):
            AttendanceApiClient(client).fetch_event("missing")

    def test_default_client_reads_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "API_BASE_URL", "http://api.fest.in:9000")
        monkeypatch.setattr(settings, "REQUEST_TIMEOUT_SECONDS", 3.5)
        http = EventAttendanceController("ev-1").api._http
        assert http.base_url.host == "api.fest.in"
        assert http.base_url.port == 9000
        assert http.timeout.read == 3.5
