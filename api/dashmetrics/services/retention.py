from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime, time, timedelta

from ..rows import ProfileRow, UserRow
from ..schemas import CohortRow, GrowthStats, StatusBreakdown
from .numeric import finite_or_zero, mean_or_none, pct
from .period import Period, days_ago

HORIZONS: tuple[int, ...] = (1, 7, 30, 90)


def cohort_week(ts: datetime) -> date:
    d = ts.date()
    return d - timedelta(days=d.weekday())


def retained(user: UserRow, horizon_days: int) -> bool:
    if user.last_seen_at is None:
        return False
    return user.last_seen_at >= user.created_at + timedelta(days=horizon_days)


def horizon_pct(members: Sequence[UserRow], cohort_start: datetime, horizon_days: int, now: datetime) -> float | None:
    # Horizon not reached yet: report nothing rather than a low percentage.
    if cohort_start > now - timedelta(days=horizon_days):
        return None
    return pct(sum(1 for u in members if retained(u, horizon_days)), len(members))


def eligible_horizon_pct(members: Sequence[UserRow], horizon_days: int, now: datetime) -> float | None:
    """Dh% over the members who signed up at least h days before now."""
    eligible = [u for u in members if u.created_at <= now - timedelta(days=horizon_days)]
    if not eligible:
        return None
    return pct(sum(1 for u in eligible if retained(u, horizon_days)), len(eligible))


def build_cohorts(users: Iterable[UserRow], now: datetime) -> list[CohortRow]:
    groups: dict[date, list[UserRow]] = defaultdict(list)
    for u in users:
        groups[cohort_week(u.created_at)].append(u)

    out: list[CohortRow] = []
    for week in sorted(groups, reverse=True):
        members = groups[week]
        start = datetime.combine(week, time.min, tzinfo=now.tzinfo)
        pcts = {h: horizon_pct(members, start, h, now) for h in HORIZONS}
        eligible = {h: eligible_horizon_pct(members, h, now) for h in HORIZONS}
        out.append(
            CohortRow(
                cohort_date=week.isoformat(),
                cohort_size=len(members),
                days_old=(now.date() - week).days,
                d1_pct=pcts[1],
                d7_pct=pcts[7],
                d30_pct=pcts[30],
                d90_pct=pcts[90],
                d1_eligible_pct=eligible[1],
                d7_eligible_pct=eligible[7],
                d30_eligible_pct=eligible[30],
                d90_eligible_pct=eligible[90],
            )
        )
    return out


def overall_retention(users: Sequence[UserRow], horizon_days: int, now: datetime) -> float:
    cutoff = days_ago(now, horizon_days)
    eligible = [u for u in users if u.created_at <= cutoff]
    return pct(sum(1 for u in eligible if retained(u, horizon_days)), len(eligible))


def churn_rate(users: Sequence[UserRow], inactive_days: int, now: datetime) -> float:
    seen = [u for u in users if u.last_seen_at is not None]
    cutoff = days_ago(now, inactive_days)
    return pct(sum(1 for u in seen if u.last_seen_at < cutoff), len(seen))


def status_breakdown(profiles: Iterable[ProfileRow]) -> StatusBreakdown:
    counts = {"live": 0, "waitlisted": 0, "banned": 0, "deleted": 0, "other": 0}
    for p in profiles:
        status = (p.status or "").strip().lower()
        if status == "pending_delete":
            status = "deleted"
        counts[status if status in counts else "other"] += 1
    return StatusBreakdown(**counts)


def compute_growth_stats(users: Sequence[UserRow], profiles: Sequence[ProfileRow], period: Period) -> GrowthStats:
    now = period.now
    scoped = [u for u in users if period.includes(u.created_at)]
    lifetimes = [((u.last_seen_at or now) - u.created_at).total_seconds() / 86400.0 for u in scoped]

    return GrowthStats(
        total_users=len(users),
        new_this_week=sum(1 for u in users if u.created_at >= days_ago(now, 7)),
        new_this_month=sum(1 for u in users if u.created_at >= days_ago(now, 30)),
        d1_retention=overall_retention(scoped, 1, now),
        d7_retention=overall_retention(scoped, 7, now),
        d30_retention=overall_retention(scoped, 30, now),
        d90_retention=overall_retention(scoped, 90, now),
        churn_rate_7d=churn_rate(scoped, 7, now),
        churn_rate_30d=churn_rate(scoped, 30, now),
        avg_user_lifetime_days=finite_or_zero(mean_or_none(lifetimes)),
        status_breakdown=status_breakdown(profiles),
    )
