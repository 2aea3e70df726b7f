"""Text and JSON exports built from the in-memory record set."""
from datetime import date, datetime
from typing import Iterable, Optional

from impactlog.core.constants import APP_NAME, CATEGORY_LABELS, SUMMARY_DEFAULT_LIMIT
from impactlog.core.time_utils import format_long, format_short, within
from impactlog.schemas.profile import UserProfile
from impactlog.schemas.reflection import WeeklyReflection
from impactlog.schemas.win import Win


def format_win(win: Win, index: int) -> str:
    """One numbered entry of the manager-ready summary."""
    label = CATEGORY_LABELS.get(win.category.value, win.category.value)
    return (
        f"{index + 1}. {label}\n"
        f"   Problem: {win.situation}\n"
        f"   Action: {win.action}\n"
        f"   Impact: {win.impact}"
    )


def build_manager_summary(
    wins: Iterable[Win],
    start: date,
    end: date,
    limit: int = SUMMARY_DEFAULT_LIMIT,
) -> str:
    """
    Plain-text summary of the most recent wins in [start, end] for a 1:1.
    Returns '' when nothing falls in the range.
    """
    selected = sorted(
        (w for w in wins if within(w.date, start, end)),
        key=lambda w: w.date,
        reverse=True,
    )[:limit]
    if not selected:
        return ""

    header = f"📊 Impact Summary ({format_short(start)} - {format_long(end)})\n\n"
    body = "\n\n".join(format_win(w, i) for i, w in enumerate(selected))
    return header + body


def summary_filename(today: date) -> str:
    return f"impact-summary-{today.isoformat()}.txt"


def build_backup(
    wins: list[Win],
    reflections: list[WeeklyReflection],
    profile: Optional[UserProfile],
    now: datetime,
) -> dict:
    return {
        "app": APP_NAME,
        "exportedAt": now.isoformat(),
        "profile": profile.model_dump(mode="json", by_alias=True) if profile else None,
        "wins": [w.model_dump(mode="json", by_alias=True) for w in wins],
        "reflections": [r.model_dump(mode="json", by_alias=True) for r in reflections],
    }


def backup_filename(now: datetime) -> str:
    # ImpactLog_Backup_2024-01-31T09-15.json
    return f"ImpactLog_Backup_{now.strftime('%Y-%m-%dT%H-%M')}.json"
