from datetime import date, datetime, timezone

from impactlog.schemas.win import Win
from impactlog.services.summary import (
    backup_filename,
    build_backup,
    build_manager_summary,
    format_win,
    summary_filename,
)

NOW = datetime(2024, 1, 31, 9, 15, tzinfo=timezone.utc)


def make_win(day: date, category="delivery", n=0) -> Win:
    return Win(
        id=f"w-{day.isoformat()}-{n}",
        date=day,
        category=category,
        situation=f"Situation {n}",
        action=f"Action {n}",
        impact=f"Impact {n}",
        impact_type="time-saved",
        created_at=NOW,
        updated_at=NOW,
    )


def test_format_win_uses_category_label():
    text = format_win(make_win(date(2024, 1, 5), category="ai"), 0)
    assert text.splitlines() == [
        "1. AI / Automation",
        "   Problem: Situation 0",
        "   Action: Action 0",
        "   Impact: Impact 0",
    ]


def test_manager_summary_header_and_order():
    wins = [make_win(date(2024, 1, 2), n=1), make_win(date(2024, 1, 20), n=2), make_win(date(2024, 2, 2), n=3)]
    text = build_manager_summary(wins, date(2024, 1, 1), date(2024, 1, 31))

    assert text.startswith("📊 Impact Summary (Jan 1 - Jan 31, 2024)\n\n")
    assert text.index("Situation 2") < text.index("Situation 1")
    assert "Situation 3" not in text


def test_manager_summary_limit_and_empty_range():
    wins = [make_win(date(2024, 1, d), n=d) for d in range(1, 9)]
    text = build_manager_summary(wins, date(2024, 1, 1), date(2024, 1, 31), limit=5)
    assert "5. " in text and "6. " not in text
    assert "Situation 8" in text and "Situation 3" not in text

    assert build_manager_summary(wins, date(2023, 1, 1), date(2023, 1, 31)) == ""


def test_backup_shape_and_filenames():
    backup = build_backup([make_win(date(2024, 1, 2))], [], None, NOW)
    assert backup["app"] == "ImpactLog"
    assert backup["profile"] is None
    assert backup["wins"][0]["impactType"] == "time-saved"
    assert backup["wins"][0]["impactLevel"] == "Medium"

    assert backup_filename(NOW) == "ImpactLog_Backup_2024-01-31T09-15.json"
    assert summary_filename(date(2024, 1, 31)) == "impact-summary-2024-01-31.txt"
