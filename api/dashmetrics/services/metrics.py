"""Metric objects per dashboard card: load rows concurrently, then compute.

Every builder resolves its loaders through ``run_concurrently``; a failing
loader surfaces as MetricsComputationError and no object is produced.
"""

from __future__ import annotations

import logging

from .. import repo
from ..config import COHORT_LOOKBACK_WEEKS, QUALITY_PROFILE_STATUSES
from ..rows import ProfileContent
from ..schemas import (
    CityDetailStats,
    CohortRow,
    CompletenessScore,
    ConversationPlans,
    DominationResponse,
    DropComparison,
    FunnelStats,
    FunnelTrendPoint,
    GenderCounts,
    GrowthStats,
    HourBucket,
    MessagePlanFlag,
    MessagingStats,
    QualityStats,
    QualityTier,
    ReferralStats,
    ScoreBucket,
)
from .completeness import (
    completeness_for,
    compute_quality_stats,
    eligible_profiles,
    quality_impact,
    score_distribution,
)
from .domination import city_detail_stats, compute_domination
from .drops import compare_drops
from .fanout import run_concurrently
from .funnel import compute_funnel, compute_funnel_trends, trend_window_days
from .messaging import MessagingSnapshot, compute_messaging_stats, messages_by_gender, messages_by_hour
from .period import Period, days_ago
from .plans import matching_rules
from .referrals import compute_referral_stats
from .retention import build_cohorts, compute_growth_stats

logger = logging.getLogger(__name__)


class NotFoundError(LookupError):
    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


def funnel_stats(period: Period) -> FunnelStats:
    rows = run_concurrently(
        {
            "users": lambda: repo.fetch_users(since=period.since),
            "profiles": repo.fetch_profiles,
            "matches": repo.fetch_matches,
            "messages": repo.fetch_messages,
        }
    )
    return compute_funnel(rows["users"], rows["profiles"], rows["matches"], rows["messages"], period)


def funnel_trends(period: Period) -> list[FunnelTrendPoint]:
    days = trend_window_days(period)
    since = days_ago(period.now, days)
    rows = run_concurrently(
        {
            "users": lambda: repo.fetch_users(since=since),
            "profiles": repo.fetch_profiles,
            "matches": repo.fetch_matches,
            "messages": lambda: repo.fetch_messages(since=since),
        }
    )
    completed = [p for p in rows["profiles"] if p.updated_at is not None and p.updated_at >= since]
    matches = [m for m in rows["matches"] if m.created_at >= since]
    return compute_funnel_trends(
        rows["users"], completed, matches, rows["messages"], days=days, today=period.now.date()
    )


def retention_cohorts(period: Period) -> list[CohortRow]:
    since = days_ago(period.now, COHORT_LOOKBACK_WEEKS * 7)
    users = run_concurrently({"users": lambda: repo.fetch_users(since=since)})["users"]
    return build_cohorts(users, period.now)


def growth_stats(period: Period) -> GrowthStats:
    rows = run_concurrently({"users": repo.fetch_users, "profiles": repo.fetch_profiles})
    return compute_growth_stats(rows["users"], rows["profiles"], period)


def _quality_contents(period: Period) -> list[ProfileContent]:
    return eligible_profiles(repo.fetch_profile_contents(statuses=QUALITY_PROFILE_STATUSES, since=period.since))


def quality_stats(period: Period) -> QualityStats:
    contents = run_concurrently({"contents": lambda: _quality_contents(period)})["contents"]
    return compute_quality_stats(contents)


def quality_distribution(period: Period) -> list[ScoreBucket]:
    contents = run_concurrently({"contents": lambda: _quality_contents(period)})["contents"]
    return score_distribution(contents)


def quality_tiers(period: Period) -> list[QualityTier]:
    rows = run_concurrently(
        {
            "contents": lambda: _quality_contents(period),
            "matches": repo.fetch_matches,
            "messages": repo.fetch_messages,
        }
    )
    return quality_impact(rows["contents"], rows["matches"], rows["messages"])


def profile_completeness(profile_id: str) -> CompletenessScore:
    content = run_concurrently({"content": lambda: repo.fetch_profile_content(profile_id)})["content"]
    if content is None:
        raise NotFoundError("Profile", profile_id)
    return completeness_for(content)


def referral_stats(period: Period) -> ReferralStats:
    rows = run_concurrently({"users": repo.fetch_users, "profiles": repo.fetch_profiles, "matches": repo.fetch_matches})
    return compute_referral_stats(rows["users"], rows["profiles"], rows["matches"], period)


def load_messaging_snapshot(period: Period) -> MessagingSnapshot:
    since = period.since
    rows = run_concurrently(
        {
            "messages": repo.fetch_messages,
            "conversations": repo.fetch_conversations,
            "matches": repo.fetch_matches,
            "genders": repo.fetch_profile_genders,
            "blocks": repo.fetch_profile_blocks,
            "requests": repo.fetch_match_requests,
            "candidates": lambda: repo.fetch_standout_candidates(since=since),
            "rejections": lambda: repo.fetch_match_rejections(since=since),
            "notifications": lambda: repo.fetch_message_notifications(since=since),
        }
    )
    return MessagingSnapshot(**rows)


def messaging_stats(period: Period) -> MessagingStats:
    snapshot = load_messaging_snapshot(period)
    stats = compute_messaging_stats(snapshot, period)
    logger.info(
        "[METRICS] messaging period=%s messages=%s conversations=%s",
        period.token,
        stats.total_messages,
        len(snapshot.conversations),
    )
    return stats


def hourly_messages(period: Period) -> list[HourBucket]:
    messages = run_concurrently({"messages": lambda: repo.fetch_messages(since=period.since)})["messages"]
    return messages_by_hour(messages, period)


def gender_messages(period: Period) -> GenderCounts:
    rows = run_concurrently(
        {
            "messages": lambda: repo.fetch_messages(since=period.since),
            "genders": repo.fetch_profile_genders,
        }
    )
    return messages_by_gender(rows["messages"], rows["genders"], period)


def conversation_plans(conversation_id: str) -> ConversationPlans:
    rows = run_concurrently(
        {
            "conversation": lambda: repo.fetch_conversation(conversation_id),
            "messages": lambda: repo.fetch_messages(conversation_id=conversation_id),
        }
    )
    if rows["conversation"] is None:
        raise NotFoundError("Conversation", conversation_id)
    flags = []
    for msg in rows["messages"]:
        rules = matching_rules(msg.content)
        flags.append(MessagePlanFlag(message_id=msg.id, has_plans=bool(rules), rules=rules))
    return ConversationPlans(
        conversation_id=conversation_id,
        has_plans=any(f.has_plans for f in flags),
        messages=flags,
    )


def drop_comparison(current_id: str, previous_id: str) -> DropComparison:
    rows = run_concurrently(
        {
            "current_drop": lambda: repo.fetch_drop(current_id),
            "current_stats": lambda: repo.fetch_drop_stats(current_id),
            "previous_drop": lambda: repo.fetch_drop(previous_id),
            "previous_stats": lambda: repo.fetch_drop_stats(previous_id),
        }
    )
    for side, drop_id in (("current", current_id), ("previous", previous_id)):
        if rows[f"{side}_drop"] is None:
            raise NotFoundError("Drop", drop_id)
        if rows[f"{side}_stats"] is None:
            raise NotFoundError("Drop stats", drop_id)
    return compare_drops(rows["current_drop"], rows["current_stats"], rows["previous_drop"], rows["previous_stats"])


def world_domination() -> DominationResponse:
    cities = run_concurrently({"cities": repo.fetch_waitlist_cities})["cities"]
    return compute_domination(cities)


def city_detail(city_id: str) -> CityDetailStats:
    rows = run_concurrently(
        {
            "city": lambda: repo.fetch_waitlist_city(city_id),
            "profiles": lambda: repo.fetch_profiles(waitlist_city_id=city_id),
        }
    )
    if rows["city"] is None:
        raise NotFoundError("City", city_id)
    return city_detail_stats(rows["city"], rows["profiles"])
