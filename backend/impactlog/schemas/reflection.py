import datetime as dt
from typing import Annotated, Optional

from pydantic import StringConstraints, field_validator

from impactlog.core import constants
from impactlog.core.time_utils import coerce_date, ensure_utc
from impactlog.schemas.base import CamelModel

ReflectionText = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=constants.MAX_REFLECTION_FIELD_LENGTH),
]

# Prompts shown on the current reflection form
CURRENT_FIELDS = ("focused_on", "contributed", "impact", "learned", "carry_forward")


class ReflectionBase(CamelModel):
    # legacy prompts
    went_well: Optional[str] = None
    unblocked: Optional[str] = None
    proud_of: Optional[str] = None
    # current prompts
    focused_on: Optional[str] = None
    contributed: Optional[str] = None
    impact: Optional[str] = None
    learned: Optional[str] = None
    carry_forward: Optional[str] = None


class ReflectionCreate(ReflectionBase):
    """New reflection; the week defaults to the current one when omitted."""

    week_start_date: Optional[dt.date] = None
    focused_on: Optional[ReflectionText] = None
    contributed: Optional[ReflectionText] = None
    impact: Optional[ReflectionText] = None
    learned: Optional[ReflectionText] = None
    carry_forward: Optional[ReflectionText] = None

    @field_validator("week_start_date", mode="before")
    @classmethod
    def _legacy_date(cls, v):
        return coerce_date(v)

    def is_blank(self) -> bool:
        return not any((getattr(self, name) or "").strip() for name in CURRENT_FIELDS)


class WeeklyReflection(ReflectionBase):
    id: str
    week_start_date: dt.date
    created_at: dt.datetime

    @field_validator("week_start_date", mode="before")
    @classmethod
    def _legacy_date(cls, v):
        return coerce_date(v)

    @field_validator("created_at")
    @classmethod
    def _utc(cls, v):
        return ensure_utc(v)
