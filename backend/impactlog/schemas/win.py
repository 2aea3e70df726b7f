import datetime as dt
from enum import Enum
from typing import Annotated, Optional

from pydantic import ConfigDict, StringConstraints, field_validator

from impactlog.core import constants
from impactlog.core.time_utils import coerce_date, ensure_utc
from impactlog.schemas.base import CamelModel


class WinCategory(str, Enum):
    delivery = "delivery"
    stakeholder = "stakeholder"
    leadership = "leadership"
    process = "process"
    ai = "ai"
    risk = "risk"


class ImpactType(str, Enum):
    time_saved = "time-saved"
    cost_avoided = "cost-avoided"
    risk_reduced = "risk-reduced"
    quality_improved = "quality-improved"
    customer_satisfaction = "customer-satisfaction"


class ImpactLevel(str, Enum):
    high = "High"
    medium = "Medium"
    low = "Low"


SituationText = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=constants.MIN_SITUATION_LENGTH,
        max_length=constants.MAX_SITUATION_LENGTH,
    ),
]
ActionText = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=constants.MIN_ACTION_LENGTH,
        max_length=constants.MAX_ACTION_LENGTH,
    ),
]
ImpactText = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=constants.MIN_IMPACT_LENGTH,
        max_length=constants.MAX_IMPACT_LENGTH,
    ),
]
EvidenceText = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=constants.MAX_EVIDENCE_LENGTH),
]


def _level_or_medium(v):
    # Records written before impactLevel existed carry no value
    if v in (None, ""):
        return ImpactLevel.medium
    return v


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class WinBase(CamelModel):
    date: dt.date
    category: WinCategory
    situation: str
    action: str
    impact: str
    impact_type: ImpactType
    impact_level: ImpactLevel = ImpactLevel.medium
    evidence: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _legacy_date(cls, v):
        return coerce_date(v)

    @field_validator("impact_level", mode="before")
    @classmethod
    def _default_level(cls, v):
        return _level_or_medium(v)


class WinCreate(WinBase):
    """Schema for logging a new win."""

    situation: SituationText
    action: ActionText
    impact: ImpactText
    evidence: Optional[EvidenceText] = None

    @field_validator("evidence", mode="before")
    @classmethod
    def _empty_evidence(cls, v):
        return _blank_to_none(v)


class WinUpdate(CamelModel):
    """Partial update; only provided fields are changed."""

    date: Optional[dt.date] = None
    category: Optional[WinCategory] = None
    situation: Optional[SituationText] = None
    action: Optional[ActionText] = None
    impact: Optional[ImpactText] = None
    impact_type: Optional[ImpactType] = None
    impact_level: Optional[ImpactLevel] = None
    evidence: Optional[EvidenceText] = None

    # Be lenient with extra fields from clients (id, createdAt, ...)
    model_config = ConfigDict(extra="ignore")

    # Omitted means "unchanged"; an explicit null cannot clear a required field
    @field_validator("date", "category", "situation", "action", "impact", "impact_type")
    @classmethod
    def _not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("date", mode="before")
    @classmethod
    def _legacy_date(cls, v):
        return coerce_date(v)

    @field_validator("evidence", mode="before")
    @classmethod
    def _empty_evidence(cls, v):
        return _blank_to_none(v)


class Win(WinBase):
    """A stored win as held in memory and returned to clients."""

    id: str
    created_at: dt.datetime
    updated_at: dt.datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _utc(cls, v):
        return ensure_utc(v)


class DashboardStats(CamelModel):
    wins_this_week: int
    wins_this_month: int
    categories_covered: int


class WeeklyWinCount(CamelModel):
    week_start: dt.date
    count: int
