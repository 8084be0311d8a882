"""User ORM model: registered fest participants."""
import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from attendance_tracker.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    enrollment_no = Column(String(50), nullable=True)
    phone_number = Column(String(30), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
