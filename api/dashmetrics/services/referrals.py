from __future__ import annotations

from collections.abc import Sequence

from ..rows import MatchRow, ProfileRow, UserRow
from ..schemas import ReferralComparison, ReferralStats
from .numeric import pct
from .period import Period, days_ago
from .retention import retained


def is_referred(user: UserRow) -> bool:
    return bool(user.referral_code)


def compute_referral_stats(
    users: Sequence[UserRow],
    profiles: Sequence[ProfileRow],
    matches: Sequence[MatchRow],
    period: Period,
) -> ReferralStats:
    scoped = [u for u in users if period.includes(u.created_at)]
    referred = [u for u in scoped if is_referred(u)]
    live_users = {p.user_id for p in profiles if p.status == "live"}
    converted = sum(1 for u in referred if u.id in live_users)

    matched_profiles = {pid for m in matches for pid in (m.profile1_id, m.profile2_id)}
    live_matched_users = {p.user_id for p in profiles if p.status == "live" and p.id in matched_profiles}

    # Only users old enough for a 7-day horizon are compared.
    cutoff = days_ago(period.now, 7)
    mature = [u for u in scoped if u.created_at <= cutoff]
    groups = {
        "referral": [u for u in mature if is_referred(u)],
        "organic": [u for u in mature if not is_referred(u)],
    }

    def retention(group: str) -> float:
        members = groups[group]
        return pct(sum(1 for u in members if retained(u, 7)), len(members))

    def match_rate(group: str) -> float:
        members = groups[group]
        return pct(sum(1 for u in members if u.id in live_matched_users), len(members))

    return ReferralStats(
        total_referrals=len(referred),
        unique_referrers=len({u.referral_code for u in referred}),
        conversion_rate=pct(converted, len(referred)),
        referral_vs_organic=ReferralComparison(
            referral_retention_7d=retention("referral"),
            organic_retention_7d=retention("organic"),
            referral_match_rate=match_rate("referral"),
            organic_match_rate=match_rate("organic"),
        ),
    )
