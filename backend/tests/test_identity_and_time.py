from datetime import date, datetime, timezone

from impactlog.core.identity import AccessLevel, AccessPolicy, Principal
from impactlog.core.time_utils import (
    coerce_date,
    end_of_month,
    end_of_week,
    ensure_utc,
    start_of_week,
    within,
)


def test_policy_resolves_three_states():
    policy = AccessPolicy("owner@example.com")
    assert policy.resolve(None) is AccessLevel.unauthenticated
    assert policy.resolve(Principal("1", "owner@example.com")) is AccessLevel.privileged
    assert policy.resolve(Principal("2", "someone@example.com")) is AccessLevel.standard


def test_policy_match_is_case_sensitive():
    policy = AccessPolicy("owner@example.com")
    assert policy.resolve(Principal("1", "Owner@Example.com")) is AccessLevel.standard


def test_policy_without_address_has_no_privileged_user():
    policy = AccessPolicy(None)
    assert policy.resolve(Principal("1", None)) is AccessLevel.standard


def test_week_bounds_monday_start():
    # 2024-01-03 is a Wednesday
    assert start_of_week(date(2024, 1, 3)) == date(2024, 1, 1)
    assert end_of_week(date(2024, 1, 3)) == date(2024, 1, 7)
    # Sunday belongs to the week that started the Monday before
    assert start_of_week(date(2024, 1, 7)) == date(2024, 1, 1)


def test_week_bounds_sunday_start():
    assert start_of_week(date(2024, 1, 3), week_starts_on=6) == date(2023, 12, 31)


def test_end_of_month_leap_year():
    assert end_of_month(date(2024, 2, 10)) == date(2024, 2, 29)


def test_within_is_closed_interval():
    start, end = date(2024, 1, 1), date(2024, 1, 7)
    assert within(start, start, end)
    assert within(end, start, end)
    assert not within(date(2024, 1, 8), start, end)
    assert within(date(2030, 1, 1), start, None)


def test_coerce_date_accepts_legacy_iso_datetimes():
    assert coerce_date("2024-01-08T05:00:00.000Z") == date(2024, 1, 8)
    assert coerce_date(datetime(2024, 1, 8, 9, 30)) == date(2024, 1, 8)
    assert coerce_date("2024-01-08") == "2024-01-08"


def test_ensure_utc_marks_naive_values():
    naive = datetime(2024, 1, 1, 12, 0)
    assert ensure_utc(naive).tzinfo is timezone.utc
    assert ensure_utc(None) is None
