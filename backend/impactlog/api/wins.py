from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from impactlog.api.deps import get_store
from impactlog.core.constants import SUMMARY_DEFAULT_DAYS, SUMMARY_DEFAULT_LIMIT
from impactlog.schemas.win import DashboardStats, WeeklyWinCount, Win, WinCreate, WinUpdate
from impactlog.services.summary import build_manager_summary, summary_filename
from impactlog.storage.errors import StoreError
from impactlog.storage.store import WinsStore

router = APIRouter(prefix="/wins", tags=["wins"])

# Failures of either medium surface as a retryable 503
PERSISTENCE_ERRORS = (StoreError, SQLAlchemyError)


@router.get("/", response_model=list[Win])
def list_wins(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    store: WinsStore = Depends(get_store),
):
    """
    List wins, optionally filtered by [start_date, end_date], most recent first.

      GET /wins?start_date=2024-01-01&end_date=2024-01-07
    """
    if start_date is None and end_date is None:
        return store.wins
    return store.wins_in_range(start_date, end_date)


@router.post("/", response_model=Win)
async def create_win(payload: WinCreate, store: WinsStore = Depends(get_store)):
    try:
        return await store.add_win(payload)
    except PERSISTENCE_ERRORS:
        raise HTTPException(status_code=503, detail="Failed to save win")


@router.get("/stats", response_model=DashboardStats)
def get_win_stats(
    today: Optional[date] = Query(None),
    store: WinsStore = Depends(get_store),
):
    return DashboardStats(
        wins_this_week=store.wins_this_week(today),
        wins_this_month=store.wins_this_month(today),
        categories_covered=store.categories_covered(today),
    )


@router.get("/weekly_counts", response_model=list[WeeklyWinCount])
def get_weekly_counts(
    weeks: int = Query(12, ge=1, le=104),
    store: WinsStore = Depends(get_store),
):
    """Wins per week for the last `weeks` weeks (current week included), oldest first."""
    return [
        WeeklyWinCount(week_start=week_start, count=count)
        for week_start, count in store.weekly_counts(weeks)
    ]


@router.get("/summary", response_class=PlainTextResponse)
def get_manager_summary(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    limit: int = Query(SUMMARY_DEFAULT_LIMIT, ge=1, le=50),
    download: bool = Query(False),
    store: WinsStore = Depends(get_store),
):
    """Manager-ready text for the chosen range (defaults to the last 30 days)."""
    today = date.today()
    end = end_date or today
    start = start_date or (end - timedelta(days=SUMMARY_DEFAULT_DAYS))
    if start > end:
        raise HTTPException(status_code=422, detail="start_date must be on or before end_date")

    text = build_manager_summary(store.wins, start, end, limit)
    if not text:
        raise HTTPException(status_code=404, detail="No wins in this date range")

    headers = {}
    if download:
        headers["Content-Disposition"] = f'attachment; filename="{summary_filename(today)}"'
    return PlainTextResponse(text, headers=headers)


@router.get("/{win_id}", response_model=Win)
def get_win(win_id: str, store: WinsStore = Depends(get_store)):
    win = store.get_win(win_id)
    if not win:
        raise HTTPException(status_code=404, detail="Win not found")
    return win


@router.put("/{win_id}", response_model=Win)
async def update_win(win_id: str, payload: WinUpdate, store: WinsStore = Depends(get_store)):
    try:
        win = await store.update_win(win_id, payload)
    except PERSISTENCE_ERRORS:
        raise HTTPException(status_code=503, detail="Failed to update win")
    if not win:
        raise HTTPException(status_code=404, detail="Win not found")
    return win


@router.delete("/{win_id}")
async def delete_win(win_id: str, store: WinsStore = Depends(get_store)):
    # Deleting an unknown id is a no-op so repeated deletes succeed
    try:
        await store.delete_win(win_id)
    except PERSISTENCE_ERRORS:
        raise HTTPException(status_code=503, detail="Failed to delete win")
    return {"message": "Win deleted"}
