"""Attendance API routes: entry/exit actions, status overrides, listing."""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from attendance_tracker.database import get_db
from attendance_tracker.schemas.attendance import (
    AttendanceActionIn,
    AttendanceEnvelope,
    AttendanceListEnvelope,
    AttendanceOut,
    AttendanceStatusIn,
)
from attendance_tracker.services import attendance_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=AttendanceEnvelope)
def record_attendance(payload: AttendanceActionIn, db: Session = Depends(get_db)):
    """Record an entry or exit, creating the record on first contact."""
    record = attendance_service.record_action(db, payload.user_id, payload.event_id, payload.action)
    return AttendanceEnvelope(attendance=AttendanceOut.from_record(record))


@router.get("", response_model=AttendanceListEnvelope)
def list_attendance(event_id: str = Query("", alias="eventId"), db: Session = Depends(get_db)):
    """List all attendance records for an event."""
    if not event_id:
        raise HTTPException(status_code=400, detail="Event ID is required")
    records = attendance_service.list_by_event(db, event_id)
    return AttendanceListEnvelope(attendance=[AttendanceOut.from_record(r) for r in records])


@router.put("", response_model=AttendanceEnvelope)
def update_status(payload: AttendanceStatusIn, db: Session = Depends(get_db)):
    """Override the status of an existing record."""
    record = attendance_service.set_status(db, payload.user_id, payload.event_id, payload.status)
    return AttendanceEnvelope(attendance=AttendanceOut.from_record(record))
