"""Pydantic schemas for participants (users)."""
from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UserRef(BaseModel):
    """Participant reference embedded in attendance records."""

    id: str
    name: str
    email: str


class ParticipantOut(BaseModel):
    id: str
    name: str
    email: str
    enrollment_no: Optional[str] = None
    phone_number: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_user(cls, user) -> "ParticipantOut":
        return cls(
            id=user.user_id,
            name=user.name,
            email=user.email,
            enrollment_no=user.enrollment_no,
            phone_number=user.phone_number,
        )
