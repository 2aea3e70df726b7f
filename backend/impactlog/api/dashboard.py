from datetime import date

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from impactlog.api.deps import get_store
from impactlog.core.constants import MOTIVATIONAL_LINES
from impactlog.core.time_utils import utcnow
from impactlog.schemas.dashboard import DashboardRead
from impactlog.schemas.win import DashboardStats
from impactlog.services.summary import backup_filename, build_backup
from impactlog.storage.store import WinsStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def motivation_for(day: date) -> str:
    # Sunday = 0 ... Saturday = 6
    return MOTIVATIONAL_LINES[(day.isoweekday() % 7) % len(MOTIVATIONAL_LINES)]


@router.get("", response_model=DashboardRead)
def get_dashboard(store: WinsStore = Depends(get_store)):
    today = date.today()
    return DashboardRead(
        stats=DashboardStats(
            wins_this_week=store.wins_this_week(today),
            wins_this_month=store.wins_this_month(today),
            categories_covered=store.categories_covered(today),
        ),
        motivation=motivation_for(today),
        access_level=store.access_level,
        persistence=store.persistence,
        is_guest=store.is_guest,
        storage_available=store.storage_available(),
    )


@router.get("/export")
async def export_backup(store: WinsStore = Depends(get_store)):
    """Full JSON backup of the signed-in user's data."""
    now = utcnow()
    profile = await store.get_profile()
    payload = build_backup(store.wins, store.reflections, profile, now)
    return JSONResponse(
        payload,
        headers={"Content-Disposition": f'attachment; filename="{backup_filename(now)}"'},
    )
