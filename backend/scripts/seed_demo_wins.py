import argparse
import random
from datetime import date, timedelta

from impactlog.db import SessionLocal
from impactlog.models.win import WinRecord
from impactlog.schemas.win import ImpactLevel, ImpactType, WinCategory


DEMO_WINS = [
    (
        WinCategory.delivery,
        "Release train kept slipping because of late integration testing.",
        "I moved integration tests into the nightly pipeline and set an owner per suite.",
        "Two consecutive releases shipped on the planned date.",
        ImpactType.time_saved,
    ),
    (
        WinCategory.stakeholder,
        "Product and support disagreed on the priority of the billing fixes.",
        "I ran a short triage with both leads and published a shared ranking.",
        "Escalations on billing dropped and both teams signed off on the plan.",
        ImpactType.customer_satisfaction,
    ),
    (
        WinCategory.risk,
        "A vendor certificate was due to expire with no renewal owner.",
        "I tracked down the contract owner and scheduled the renewal early.",
        "Avoided an outage of the payments integration.",
        ImpactType.risk_reduced,
    ),
    (
        WinCategory.ai,
        "Weekly status reports took hours to compile by hand.",
        "I built a script that drafts the report from the tracker export.",
        "Report preparation now takes minutes instead of an afternoon.",
        ImpactType.time_saved,
    ),
]


def clear_recent_wins(db, user_id: str, days: int = 120) -> None:
    """Delete the user's wins in the last N days so we can reseed cleanly."""
    cutoff = date.today() - timedelta(days=days)
    db.query(WinRecord).filter(WinRecord.user_id == user_id, WinRecord.date >= cutoff).delete()
    db.commit()


def seed_demo_wins(db, user_id: str, weeks: int = 12) -> None:
    """Insert roughly two demo wins per week for the last `weeks` weeks."""
    today = date.today()
    start_day = today - timedelta(weeks=weeks - 1)

    wins_to_add = []
    for week in range(weeks):
        week_start = start_day + timedelta(weeks=week)
        for offset in random.sample(range(5), 2):
            d = week_start + timedelta(days=offset)
            # Skip future days
            if d > today:
                continue
            category, situation, action, impact, impact_type = random.choice(DEMO_WINS)
            wins_to_add.append(
                WinRecord(
                    user_id=user_id,
                    date=d,
                    category=category.value,
                    situation=situation,
                    action=action,
                    impact=impact,
                    impact_type=impact_type.value,
                    impact_level=random.choice(list(ImpactLevel)).value,
                )
            )

    if wins_to_add:
        db.add_all(wins_to_add)
        db.commit()

    print(f"Seeded {len(wins_to_add)} demo wins for {user_id}")


def main():
    ap = argparse.ArgumentParser(description="Seed demo wins directly into the database")
    ap.add_argument("--user-id", required=True, help="uid of the privileged account")
    ap.add_argument("--weeks", type=int, default=12)
    args = ap.parse_args()

    db = SessionLocal()
    try:
        clear_recent_wins(db, args.user_id, days=args.weeks * 7 + 30)
        seed_demo_wins(db, args.user_id, weeks=args.weeks)
    finally:
        db.close()


if __name__ == "__main__":
    main()
