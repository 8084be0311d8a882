"""Pydantic schemas for GROUP-event teams."""
from __future__ import annotations
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from attendance_tracker.schemas.user import ParticipantOut


class GroupOut(BaseModel):
    group_id: str
    leader: ParticipantOut
    members: list[ParticipantOut] = []

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_team(cls, team) -> "GroupOut":
        return cls(
            group_id=team.team_id,
            leader=ParticipantOut.from_user(team.leader),
            members=[ParticipantOut.from_user(m.user) for m in team.members],
        )
