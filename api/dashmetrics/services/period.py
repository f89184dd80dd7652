from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone

PERIOD_DAYS: dict[str, int] = {"1": 1, "7": 7, "30": 30, "90": 90}
ALL = "all"


@dataclass(frozen=True)
class Period:
    token: str
    days: int | None
    since: datetime | None
    now: datetime

    @property
    def is_all(self) -> bool:
        return self.since is None

    def includes(self, ts: datetime | None) -> bool:
        if self.since is None:
            return True
        if ts is None:
            return False
        return ts >= self.since


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def start_of_day(ts: datetime) -> datetime:
    return datetime.combine(ts.date(), time.min, tzinfo=ts.tzinfo)


def days_ago(now: datetime, days: int) -> datetime:
    """Midnight of ``now``'s date minus ``days``, like ``CURRENT_DATE - INTERVAL 'n days'``."""
    return start_of_day(now) - timedelta(days=days)


def resolve_period(token: str | None, now: datetime | None = None) -> Period:
    now = now or utc_now()
    key = str(token or "").strip().lower()
    days = PERIOD_DAYS.get(key)
    if days is None:
        return Period(token=ALL, days=None, since=None, now=now)
    return Period(token=key, days=days, since=days_ago(now, days), now=now)
