"""AttendanceRecord ORM model: one row per (user, event)."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from attendance_tracker.database import Base


class AttendanceStatus(str, enum.Enum):
    present = "PRESENT"
    absent = "ABSENT"
    partial = "PARTIAL"


class AttendanceAction(str, enum.Enum):
    entry = "entry"
    exit = "exit"


class AttendanceRecord(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_attendance_user_event"),
    )

    attendance_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False, index=True)
    entry_time = Column(DateTime(timezone=True), nullable=True)
    exit_time = Column(DateTime(timezone=True), nullable=True)
    status = Column(SAEnum(AttendanceStatus), nullable=False, default=AttendanceStatus.absent)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User")
