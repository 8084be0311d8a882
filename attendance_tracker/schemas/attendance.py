"""Pydantic schemas for attendance records."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from attendance_tracker.core.timeutils import ensure_utc
from attendance_tracker.models.attendance import AttendanceAction, AttendanceStatus
from attendance_tracker.schemas.user import UserRef

_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AttendanceActionIn(BaseModel):
    user_id: str = Field(min_length=1)
    event_id: str = Field(min_length=1)
    action: AttendanceAction

    model_config = _camel


class AttendanceStatusIn(BaseModel):
    user_id: str = Field(min_length=1)
    event_id: str = Field(min_length=1)
    status: AttendanceStatus

    model_config = _camel


class AttendanceOut(BaseModel):
    id: str
    user_id: Optional[UserRef] = None
    event_id: str
    entry_time: Optional[datetime] = None
    exit_time: Optional[datetime] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = _camel

    @classmethod
    def from_record(cls, record) -> "AttendanceOut":
        user = record.user
        return cls(
            id=record.attendance_id,
            user_id=UserRef(id=user.user_id, name=user.name, email=user.email) if user else None,
            event_id=record.event_id,
            entry_time=ensure_utc(record.entry_time),
            exit_time=ensure_utc(record.exit_time),
            status=record.status.value,
            created_at=ensure_utc(record.created_at),
            updated_at=ensure_utc(record.updated_at),
        )


class AttendanceEnvelope(BaseModel):
    success: bool = True
    attendance: AttendanceOut


class AttendanceListEnvelope(BaseModel):
    success: bool = True
    attendance: list[AttendanceOut] = []
