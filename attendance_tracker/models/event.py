"""Event ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, Integer, Enum as SAEnum
from sqlalchemy.sql import func
from attendance_tracker.database import Base


class EventType(str, enum.Enum):
    solo = "SOLO"
    group = "GROUP"


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), nullable=False, unique=True)
    event_type = Column(SAEnum(EventType), nullable=False)
    # GROUP only; inclusive bounds that count the leader
    min_member = Column(Integer, nullable=True)
    max_member = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
