"""Roster ORM models: SOLO registrations and GROUP teams."""
import uuid
from sqlalchemy import Column, String, DateTime, Integer, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from attendance_tracker.database import Base


class Registration(Base):
    __tablename__ = "registrations"

    registration_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User")


class Team(Base):
    __tablename__ = "teams"

    team_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id"), nullable=False, index=True)
    leader_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    leader = relationship("User")
    members = relationship(
        "TeamMember",
        back_populates="team",
        cascade="all, delete-orphan",
        order_by="TeamMember.position",
    )


class TeamMember(Base):
    __tablename__ = "team_members"

    team_id = Column(String(36), ForeignKey("teams.team_id"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    position = Column(Integer, nullable=False, default=0)

    team = relationship("Team", back_populates="members")
    user = relationship("User")
