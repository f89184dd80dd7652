from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta

from ..config import FUNNEL_TRENDS_ALL_DAYS, FUNNEL_TRENDS_DEFAULT_DAYS
from ..rows import MatchRow, MessageRow, ProfileRow, UserRow
from ..schemas import ConversionRates, FunnelStats, FunnelTrendPoint
from .numeric import finite_or_zero, hours_between, mean_or_none, pct
from .period import Period


def first_messages(messages: Iterable[MessageRow]) -> dict[str, MessageRow]:
    """Earliest message per conversation; ties on created_at fall back to message id."""
    out: dict[str, MessageRow] = {}
    for msg in messages:
        cur = out.get(msg.conversation_id)
        if cur is None or (msg.created_at, msg.id) < (cur.created_at, cur.id):
            out[msg.conversation_id] = msg
    return out


def conversion_rates(signups: int, created: int, completed: int, matched: int, messaged: int) -> ConversionRates:
    return ConversionRates(
        signup_to_profile=pct(created, signups),
        profile_to_complete=pct(completed, created),
        complete_to_match=pct(matched, completed),
        match_to_message=pct(messaged, matched),
        overall=pct(messaged, signups),
    )


def _earliest(values: Iterable[datetime | None]) -> datetime | None:
    vals = [v for v in values if v is not None]
    return min(vals) if vals else None


def compute_funnel(
    users: Sequence[UserRow],
    profiles: Sequence[ProfileRow],
    matches: Sequence[MatchRow],
    messages: Sequence[MessageRow],
    period: Period,
) -> FunnelStats:
    base = {u.id: u for u in users if period.includes(u.created_at)}

    profiles_by_user: dict[str, list[ProfileRow]] = defaultdict(list)
    for p in profiles:
        if p.user_id in base:
            profiles_by_user[p.user_id].append(p)
    owner = {p.id: p.user_id for ps in profiles_by_user.values() for p in ps}

    matched_at: dict[str, list[datetime]] = defaultdict(list)
    for m in matches:
        for pid in (m.profile1_id, m.profile2_id):
            if pid in owner:
                matched_at[pid].append(m.created_at)

    sent_at: dict[str, list[datetime]] = defaultdict(list)
    for msg in messages:
        if msg.sender_profile_id in owner:
            sent_at[msg.sender_profile_id].append(msg.created_at)

    first_senders = {
        fm.sender_profile_id for fm in first_messages(messages).values() if fm.sender_profile_id in owner
    }

    signups = len(base)
    profiles_created = len(profiles_by_user)
    profiles_completed = sum(1 for ps in profiles_by_user.values() if any(p.completed for p in ps))
    with_match = len(matched_at)
    with_message = len(first_senders)

    to_profile: list[float] = []
    to_complete: list[float] = []
    to_match: list[float] = []
    to_message: list[float] = []
    for user_id, ps in profiles_by_user.items():
        signup = base[user_id].created_at
        milestones = (
            (to_profile, _earliest(p.created_at for p in ps)),
            (to_complete, _earliest(p.updated_at for p in ps if p.completed)),
            (to_match, _earliest(t for p in ps for t in matched_at.get(p.id, ()))),
            (to_message, _earliest(t for p in ps for t in sent_at.get(p.id, ()))),
        )
        for bucket, reached in milestones:
            if reached is not None:
                bucket.append(hours_between(signup, reached))

    return FunnelStats(
        signups=signups,
        profiles_created=profiles_created,
        profiles_completed=profiles_completed,
        with_match=with_match,
        with_message=with_message,
        conversion_rates=conversion_rates(signups, profiles_created, profiles_completed, with_match, with_message),
        avg_time_to_profile_hours=finite_or_zero(mean_or_none(to_profile)),
        avg_time_to_complete_hours=finite_or_zero(mean_or_none(to_complete)),
        avg_time_to_match_hours=finite_or_zero(mean_or_none(to_match)),
        avg_time_to_message_hours=finite_or_zero(mean_or_none(to_message)),
    )


def trend_window_days(period: Period) -> int:
    if period.is_all:
        return FUNNEL_TRENDS_ALL_DAYS
    return period.days or FUNNEL_TRENDS_DEFAULT_DAYS


def compute_funnel_trends(
    users: Sequence[UserRow],
    profiles: Sequence[ProfileRow],
    matches: Sequence[MatchRow],
    messages: Sequence[MessageRow],
    *,
    days: int,
    today: date,
) -> list[FunnelTrendPoint]:
    start = today - timedelta(days=days)
    series = [start + timedelta(days=i) for i in range(days + 1)]

    signups: dict[date, int] = defaultdict(int)
    for u in users:
        signups[u.created_at.date()] += 1

    completed: dict[date, int] = defaultdict(int)
    for p in profiles:
        if p.completed and p.updated_at is not None:
            completed[p.updated_at.date()] += 1

    matched: dict[date, set[str]] = defaultdict(set)
    for m in matches:
        matched[m.created_at.date()].update((m.profile1_id, m.profile2_id))

    senders: dict[date, set[str]] = defaultdict(set)
    for msg in messages:
        senders[msg.created_at.date()].add(msg.sender_profile_id)

    return [
        FunnelTrendPoint(
            date=d.isoformat(),
            signups=signups.get(d, 0),
            completed=completed.get(d, 0),
            with_match=len(matched.get(d, ())),
            with_message=len(senders.get(d, ())),
        )
        for d in series
    ]
