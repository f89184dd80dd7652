from datetime import date, datetime, timedelta, timezone

from dashmetrics.rows import ProfileRow, UserRow
from dashmetrics.services.period import resolve_period
from dashmetrics.services.retention import (
    build_cohorts,
    churn_rate,
    cohort_week,
    compute_growth_stats,
    overall_retention,
    retained,
    status_breakdown,
)

NOW = datetime(2026, 3, 18, 12, tzinfo=timezone.utc)  # Wednesday


def _at(day: int, hour: int = 10) -> datetime:
    return datetime(2026, 3, day, hour, tzinfo=timezone.utc)


def test_cohort_key_is_monday_of_signup_week():
    assert cohort_week(_at(18)) == date(2026, 3, 16)
    assert cohort_week(_at(16)) == date(2026, 3, 16)
    assert cohort_week(_at(15)) == date(2026, 3, 9)


def test_retained_requires_last_seen_past_horizon():
    u = UserRow(id="u", created_at=_at(1), last_seen_at=_at(8))
    assert retained(u, 7)
    assert not retained(u, 30)
    assert not retained(UserRow(id="v", created_at=_at(1)), 1)


def test_cohorts_newest_first_with_unobservable_horizons_null():
    users = [
        UserRow(id="a", created_at=_at(2), last_seen_at=_at(10)),
        UserRow(id="b", created_at=_at(3)),
        UserRow(id="c", created_at=_at(17, 9), last_seen_at=_at(18, 11)),
    ]
    cohorts = build_cohorts(users, NOW)
    assert [c.cohort_date for c in cohorts] == ["2026-03-16", "2026-03-02"]

    recent, older = cohorts
    assert recent.cohort_size == 1
    assert recent.days_old == 2
    assert recent.d1_pct == 100
    assert recent.d7_pct is None
    assert recent.d30_pct is None
    assert recent.d90_pct is None

    assert older.cohort_size == 2
    assert older.days_old == 16
    assert older.d1_pct == 50
    assert older.d7_pct == 50
    assert older.d30_pct is None
    assert older.d90_pct is None


def test_horizon_is_never_a_number_before_it_is_reachable():
    users = [UserRow(id=f"u{i}", created_at=NOW - timedelta(days=i), last_seen_at=NOW) for i in range(0, 120, 3)]
    for row in build_cohorts(users, NOW):
        cohort_start = datetime.fromisoformat(row.cohort_date).replace(tzinfo=timezone.utc)
        for h, value in ((1, row.d1_pct), (7, row.d7_pct), (30, row.d30_pct), (90, row.d90_pct)):
            if cohort_start > NOW - timedelta(days=h):
                assert value is None
            else:
                assert value is not None and 0 <= value <= 100
        for h, value in ((1, row.d1_eligible_pct), (7, row.d7_eligible_pct), (30, row.d30_eligible_pct), (90, row.d90_eligible_pct)):
            if cohort_start > NOW - timedelta(days=h):
                assert value is None


def test_eligible_pct_leaves_out_members_too_young_for_the_horizon():
    users = [
        UserRow(id="a", created_at=_at(9), last_seen_at=_at(17)),
        UserRow(id="b", created_at=_at(14)),
    ]
    (row,) = build_cohorts(users, NOW)
    assert row.cohort_date == "2026-03-09"
    assert row.d1_pct == 50
    assert row.d1_eligible_pct == 50
    assert row.d7_pct == 50
    assert row.d7_eligible_pct == 100
    assert row.d30_pct is None
    assert row.d30_eligible_pct is None


def test_overall_retention_only_counts_eligible_users():
    users = [
        UserRow(id="old", created_at=_at(1), last_seen_at=_at(9)),
        UserRow(id="old2", created_at=_at(1)),
        UserRow(id="new", created_at=_at(17), last_seen_at=_at(18)),
    ]
    assert overall_retention(users, 7, NOW) == 50
    assert overall_retention([], 7, NOW) == 0


def test_churn_rate_over_users_with_activity():
    users = [
        UserRow(id="a", created_at=_at(1), last_seen_at=_at(2)),
        UserRow(id="b", created_at=_at(1), last_seen_at=_at(17)),
        UserRow(id="c", created_at=_at(1)),
    ]
    assert churn_rate(users, 7, NOW) == 50


def test_status_breakdown_buckets_unknown_values():
    profiles = [
        ProfileRow(id="1", user_id="1", status="live"),
        ProfileRow(id="2", user_id="2", status="waitlisted"),
        ProfileRow(id="3", user_id="3", status="pending_delete"),
        ProfileRow(id="4", user_id="4", status="banned"),
        ProfileRow(id="5", user_id="5", status="frozen"),
    ]
    out = status_breakdown(profiles)
    assert (out.live, out.waitlisted, out.deleted, out.banned, out.other) == (1, 1, 1, 1, 1)


def test_growth_stats_totals_and_period_scope():
    users = [
        UserRow(id="a", created_at=_at(1), last_seen_at=_at(3)),
        UserRow(id="b", created_at=_at(12), last_seen_at=_at(13)),
        UserRow(id="c", created_at=_at(17), last_seen_at=_at(18)),
    ]
    stats = compute_growth_stats(users, [ProfileRow(id="p", user_id="a")], resolve_period("7", now=NOW))
    assert stats.total_users == 3
    assert stats.new_this_week == 2
    assert stats.new_this_month == 3
    assert stats.d1_retention == 100
    assert stats.d30_retention == 0
    assert stats.status_breakdown.live == 1
    assert stats.avg_user_lifetime_days == 1
