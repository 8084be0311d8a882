"""HTTP client the organizer view uses to talk to the attendance API."""
from __future__ import annotations
import logging
from typing import Any, Optional

import httpx

from attendance_tracker.config import settings
from attendance_tracker.view.errors import (
    NotFound,
    TransientNetworkError,
    Unauthorized,
    error_for_status,
)
from attendance_tracker.view.models import (
    AttendanceRecord,
    AttendanceStatus,
    EventInfo,
    EventType,
    parse_roster,
)

logger = logging.getLogger(__name__)


class AttendanceApiClient:
    """Thin wrapper over ``httpx.Client``.

    Any ``httpx.Client`` works, including FastAPI's ``TestClient``.
    """

    def __init__(self, http: httpx.Client):
        self._http = http

    @classmethod
    def from_settings(cls) -> AttendanceApiClient:
        return cls(httpx.Client(base_url=settings.API_BASE_URL, timeout=settings.REQUEST_TIMEOUT_SECONDS))

    def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        try:
            resp = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise TransientNetworkError(f"{method} {path} failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}

        if resp.is_success:
            return data
        message = data.get("message") if isinstance(data, dict) else None
        raise error_for_status(resp.status_code, message or f"{method} {path} returned {resp.status_code}")

    def fetch_events(self) -> list[EventInfo]:
        data = self._request("GET", "/api/events")
        return [EventInfo.model_validate(e) for e in data.get("events", [])]

    def fetch_event(self, event_id: str) -> EventInfo:
        for event in self.fetch_events():
            if event.id == event_id:
                return event
        raise NotFound("Event not found")

    def fetch_participants(self, event_id: str, event_type: Optional[EventType] = None) -> list:
        data = self._request("GET", f"/api/event/{event_id}/participants")
        return parse_roster(data.get("participants") or [], event_type)

    def fetch_attendance(self, event_id: str) -> list[AttendanceRecord]:
        data = self._request("GET", "/api/attendance", params={"eventId": event_id})
        return [AttendanceRecord.model_validate(r) for r in data.get("attendance") or []]

    def mark_attendance(self, user_id: str, event_id: str, action: str) -> AttendanceRecord:
        data = self._request(
            "POST", "/api/attendance",
            json={"userId": user_id, "eventId": event_id, "action": action},
        )
        return AttendanceRecord.model_validate(data["attendance"])

    def update_status(self, user_id: str, event_id: str, status: AttendanceStatus) -> AttendanceRecord:
        data = self._request(
            "PUT", "/api/attendance",
            json={"userId": user_id, "eventId": event_id, "status": AttendanceStatus(status).value},
        )
        return AttendanceRecord.model_validate(data["attendance"])

    def verify_password(self, event_name: str, password: str) -> bool:
        try:
            self._request("POST", "/api/verify-password", json={"eventName": event_name, "password": password})
        except Unauthorized:
            return False
        return True
