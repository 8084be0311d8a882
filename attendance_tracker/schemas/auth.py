"""Pydantic schemas for the event password gate."""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PasswordCheckIn(BaseModel):
    event_name: str = Field(min_length=1)
    password: str = Field(min_length=1)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PasswordCheckOut(BaseModel):
    success: bool = True
