from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from impactlog.api.deps import get_store
from impactlog.core.time_utils import start_of_week
from impactlog.schemas.reflection import ReflectionCreate, WeeklyReflection
from impactlog.storage.errors import StoreError
from impactlog.storage.store import WinsStore

router = APIRouter(prefix="/reflections", tags=["reflections"])


@router.get("/", response_model=list[WeeklyReflection])
def list_reflections(store: WinsStore = Depends(get_store)):
    return store.reflections


@router.get("/current", response_model=WeeklyReflection)
def get_current_reflection(store: WinsStore = Depends(get_store)):
    week_start = start_of_week(date.today(), store.week_starts_on)
    row = store.reflection_for_week(week_start)
    if not row:
        raise HTTPException(status_code=404, detail="No reflection for this week yet")
    return row


@router.post("/", response_model=WeeklyReflection)
async def create_reflection(payload: ReflectionCreate, store: WinsStore = Depends(get_store)):
    if payload.is_blank():
        raise HTTPException(status_code=422, detail="Please fill in at least one field")

    # one reflection per week; the store itself does not enforce this
    week_start = payload.week_start_date or start_of_week(date.today(), store.week_starts_on)
    if store.reflection_for_week(week_start):
        raise HTTPException(status_code=409, detail="You've already reflected on this week")

    try:
        return await store.add_reflection(payload.model_copy(update={"week_start_date": week_start}))
    except (StoreError, SQLAlchemyError):
        raise HTTPException(status_code=503, detail="Failed to save reflection")
