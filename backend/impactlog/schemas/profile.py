import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from impactlog.core.time_utils import ensure_utc
from impactlog.schemas.base import CamelModel


class ProfileStatus(str, Enum):
    active = "Active Contributor"
    open_to_work = "Open to Work"
    sabbatical = "On Sabbatical"


class UserProfile(CamelModel):
    display_name: str = ""
    email: str = ""
    role: str = "Professional"
    bio: str = "Building impactful solutions."
    status: ProfileStatus = ProfileStatus.active
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
    updated_at: Optional[dt.datetime] = None

    @field_validator("updated_at")
    @classmethod
    def _utc(cls, v):
        return ensure_utc(v)


class ProfileUpdate(CamelModel):
    display_name: Optional[str] = None
    role: Optional[str] = None
    bio: Optional[str] = None
    status: Optional[ProfileStatus] = None
    photo_url: Optional[str] = Field(default=None, alias="photoURL")

    # email is owned by the auth provider; ignore it and anything unknown
    model_config = ConfigDict(extra="ignore")
