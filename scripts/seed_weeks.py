#!/usr/bin/env python3
"""
Seed several weeks of wins and weekly reflections through the ImpactLog API.

Pattern per week (Mon-Sun):
  - Mon: delivery win
  - Wed: stakeholder or process win (alternating)
  - Fri: a win from the remaining categories, plus the weekly reflection

Requests are sent with the identity headers the auth gateway would add, so
the data lands in whichever medium that identity maps to.

Usage examples:
  - Against a local backend:
      python scripts/seed_weeks.py --base-url http://localhost:8000 \
          --user-id demo-user --email demo@example.com
  - Eight weeks only:
      python scripts/seed_weeks.py --base-url http://localhost:8000 \
          --user-id demo-user --email demo@example.com --weeks 8
"""

from __future__ import annotations

import argparse
import datetime as dt
import sys
from typing import Dict

try:
    import requests  # type: ignore
except Exception as exc:  # pragma: no cover
    print("This script requires the 'requests' package.\nInstall with: pip install requests", file=sys.stderr)
    raise


FRIDAY_CATEGORIES = ["leadership", "ai", "risk"]
IMPACT_TYPES = ["time-saved", "cost-avoided", "risk-reduced", "quality-improved", "customer-satisfaction"]


def monday_of_week(d: dt.date) -> dt.date:
    return d - dt.timedelta(days=d.weekday())


def post_json(base_url: str, path: str, payload: dict, headers: Dict[str, str]) -> None:
    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    r = requests.post(url, json=payload, headers=headers, timeout=15)
    # 409: reflection for that week already exists, fine when re-running
    if r.status_code >= 300 and r.status_code != 409:
        raise RuntimeError(f"{path} -> HTTP {r.status_code}: {r.text}")


def win_payload(day: dt.date, category: str, n: int) -> dict:
    return {
        "date": day.isoformat(),
        "category": category,
        "situation": f"Seeded challenge #{n}: work item was blocked on another team.",
        "action": f"Seeded action #{n}: I set up a working session and agreed next steps.",
        "impact": f"Seeded result #{n}: the item was unblocked within the week.",
        "impactType": IMPACT_TYPES[n % len(IMPACT_TYPES)],
        "impactLevel": ["High", "Medium", "Low"][n % 3],
    }


def seed_week(base_url: str, week_start: dt.date, index: int, headers: Dict[str, str], today: dt.date) -> None:
    plan = [
        (0, "delivery"),
        (2, "stakeholder" if index % 2 == 0 else "process"),
        (4, FRIDAY_CATEGORIES[index % len(FRIDAY_CATEGORIES)]),
    ]
    for n, (dow, category) in enumerate(plan):
        day = week_start + dt.timedelta(days=dow)
        if day > today:
            continue
        post_json(base_url, "wins/", win_payload(day, category, index * 3 + n), headers)

    reflection = {
        "weekStartDate": week_start.isoformat(),
        "focusedOn": "Seeded: unblocking cross-team dependencies.",
        "learned": "Seeded: early alignment beats late escalation.",
        "carryForward": "Seeded: keep the weekly dependency review.",
    }
    post_json(base_url, "reflections/", reflection, headers)


def main() -> None:
    ap = argparse.ArgumentParser(description="Seed weeks of wins and reflections")
    ap.add_argument("--base-url", required=True, help="API base URL (e.g., http://localhost:8000)")
    ap.add_argument("--user-id", required=True, help="uid sent as X-User-Id")
    ap.add_argument("--email", required=True, help="email sent as X-User-Email")
    ap.add_argument("--weeks", type=int, default=16)
    args = ap.parse_args()

    headers = {"X-User-Id": args.user_id, "X-User-Email": args.email}

    today = dt.date.today()
    this_monday = monday_of_week(today)

    # Week starts ending with the current week
    week_starts = [this_monday - dt.timedelta(weeks=args.weeks - 1 - i) for i in range(args.weeks)]

    for i, ws in enumerate(week_starts):
        seed_week(args.base_url, ws, i, headers, today)

    print(f"Seed complete: {args.weeks} weeks created.")


if __name__ == "__main__":
    main()
