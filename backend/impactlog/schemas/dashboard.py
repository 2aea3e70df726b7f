from impactlog.core.identity import AccessLevel
from impactlog.schemas.base import CamelModel
from impactlog.schemas.win import DashboardStats


class DashboardRead(CamelModel):
    stats: DashboardStats
    motivation: str
    access_level: AccessLevel
    persistence: str  # "cloud" | "local"
    is_guest: bool
    storage_available: bool
