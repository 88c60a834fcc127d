"""
Base classes and strict field types shared by all record models.

Records mirror the payload shapes returned by integration data providers.
Fields are strict: a provider that sends a string where a date is declared,
or a number where an id string is declared, is rejected rather than coerced.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Strict, StrictBool, StrictInt, StrictStr
from pydantic.alias_generators import to_camel

# Accepts datetime instances from Python input and ISO-8601 strings from JSON
StrictDatetime = Annotated[datetime, Strict()]

__all__ = [
    "CamelRecord",
    "SnakeRecord",
    "StrictBool",
    "StrictDatetime",
    "StrictInt",
    "StrictStr",
]


class CamelRecord(BaseModel):
    """
    Base for records whose wire format uses camelCase keys.

    Fields are declared in snake_case and accepted under either name.
    Unknown keys are dropped.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class SnakeRecord(BaseModel):
    """Base for records whose wire format already uses snake_case (GitHub)."""

    model_config = ConfigDict(extra="ignore", frozen=True)
