"""Shared pydantic base: snake_case in Python, camelCase on the wire."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """Plain ``{"message": ...}`` acknowledgement"""
    message: str


PHONE_MIN_LENGTH = 10
PHONE_MAX_LENGTH = 15
