"""Attendance record store: the per-(user, event) attendance state machine.

Rules:
- entry: sets entry_time and PRESENT only the first time; repeats are no-ops
- exit: requires entry_time set and exit_time unset; otherwise a no-op
- status override: needs an existing record; ABSENT clears both timestamps
- at most one record per (user, event), backed by a unique constraint
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from attendance_tracker.core.timeutils import utcnow
from attendance_tracker.models.attendance import AttendanceAction, AttendanceRecord, AttendanceStatus

logger = logging.getLogger(__name__)


def apply_action(record: AttendanceRecord, action: AttendanceAction, now: datetime) -> bool:
    """Apply an entry/exit action in place. Returns False when nothing changed."""
    if action == AttendanceAction.entry:
        if record.entry_time is not None:
            return False
        record.entry_time = now
        record.status = AttendanceStatus.present
        return True

    if action == AttendanceAction.exit:
        if record.entry_time is None or record.exit_time is not None:
            return False
        record.exit_time = now
        record.status = AttendanceStatus.present
        return True

    raise ValueError(f"Unknown attendance action: {action}")


def apply_status(record: AttendanceRecord, new_status: AttendanceStatus) -> None:
    """Override the status in place. ABSENT wipes both timestamps."""
    record.status = new_status
    if new_status == AttendanceStatus.absent:
        record.entry_time = None
        record.exit_time = None


def _find_record(db: Session, user_id: str, event_id: str) -> Optional[AttendanceRecord]:
    return (
        db.query(AttendanceRecord)
        .filter(AttendanceRecord.user_id == user_id, AttendanceRecord.event_id == event_id)
        .first()
    )


def _update_existing(db: Session, record: AttendanceRecord, action: AttendanceAction) -> AttendanceRecord:
    now = utcnow()
    if apply_action(record, action, now):
        record.updated_at = now
        db.commit()
        logger.info(
            "Recorded %s for user %s at event %s", action.value, record.user_id, record.event_id
        )
    else:
        logger.debug(
            "Ignored %s for user %s at event %s (precondition not met)",
            action.value, record.user_id, record.event_id,
        )
    return record


def record_action(db: Session, user_id: str, event_id: str, action: AttendanceAction) -> AttendanceRecord:
    """Create-or-update the (user, event) record for an entry or exit action."""
    try:
        record = _find_record(db, user_id, event_id)
        if record is not None:
            record = _update_existing(db, record, action)
        else:
            now = utcnow()
            record = AttendanceRecord(
                user_id=user_id,
                event_id=event_id,
                status=AttendanceStatus.absent,
                created_at=now,
                updated_at=now,
            )
            # An exit on a fresh record is a no-op and leaves it ABSENT
            apply_action(record, action, now)
            db.add(record)
            try:
                db.commit()
                logger.info("Created attendance for user %s at event %s (%s)", user_id, event_id, action.value)
            except IntegrityError:
                # Lost the race against a concurrent first action; take the update path once
                db.rollback()
                logger.warning("Duplicate attendance for user %s at event %s, retrying as update", user_id, event_id)
                record = _find_record(db, user_id, event_id)
                if record is None:
                    raise
                record = _update_existing(db, record, action)

        db.refresh(record)
        return record
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to record %s for user %s at event %s", action.value, user_id, event_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record attendance",
        )


def set_status(db: Session, user_id: str, event_id: str, new_status: AttendanceStatus) -> AttendanceRecord:
    """Override the status of an existing record."""
    try:
        record = _find_record(db, user_id, event_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Attendance record not found")

        apply_status(record, new_status)
        record.updated_at = utcnow()
        db.commit()
        db.refresh(record)
        logger.info("Set status %s for user %s at event %s", new_status.value, user_id, event_id)
        return record
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update status for user %s at event %s", user_id, event_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update attendance",
        )


def list_by_event(db: Session, event_id: str) -> list[AttendanceRecord]:
    """All records for an event, latest entry first, never-entered last."""
    try:
        return (
            db.query(AttendanceRecord)
            .filter(AttendanceRecord.event_id == event_id)
            .order_by(
                AttendanceRecord.entry_time.desc().nulls_last(),
                AttendanceRecord.created_at.desc(),
            )
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Failed to fetch attendance for event %s", event_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch attendance",
        )
