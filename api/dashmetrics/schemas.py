from typing import Literal

from pydantic import BaseModel, Field


class GenderCounts(BaseModel):
    women: int = 0
    men: int = 0
    nonbinary: int = 0
    other: int = 0


class GenderScores(BaseModel):
    women: float = 0.0
    men: float = 0.0
    nonbinary: float = 0.0
    other: float = 0.0


class FieldFlags(BaseModel):
    bio: bool
    school: bool
    job_title: bool
    hometown: bool
    neighborhood: bool
    height: bool
    photos: bool
    prompts: bool
    interests: bool


class CompletenessScore(BaseModel):
    profile_id: str
    score: int = Field(ge=0, le=100)
    fields: FieldFlags


class PhotoMetrics(BaseModel):
    avg_photos: float
    pct_with_6_photos: float


class BioMetrics(BaseModel):
    avg_length: float
    pct_with_bio: float


class FieldCompletion(BaseModel):
    bio: float
    school: float
    job_title: float
    hometown: float
    neighborhood: float
    height: float


class QualityStats(BaseModel):
    profile_count: int
    avg_completeness_score: float
    photo_metrics: PhotoMetrics
    bio_metrics: BioMetrics
    field_completion: FieldCompletion
    by_gender: GenderScores


class ScoreBucket(BaseModel):
    bucket: str
    count: int
    percentage: float


class QualityTier(BaseModel):
    quality_tier: Literal["high", "medium", "low"]
    avg_matches: float
    avg_messages: float
    profile_count: int


class ConversionRates(BaseModel):
    signup_to_profile: float
    profile_to_complete: float
    complete_to_match: float
    match_to_message: float
    overall: float


class FunnelStats(BaseModel):
    signups: int
    profiles_created: int
    profiles_completed: int
    with_match: int
    with_message: int
    conversion_rates: ConversionRates
    avg_time_to_profile_hours: float
    avg_time_to_complete_hours: float
    avg_time_to_match_hours: float
    avg_time_to_message_hours: float


class FunnelTrendPoint(BaseModel):
    date: str
    signups: int
    completed: int
    with_match: int
    with_message: int


class CohortRow(BaseModel):
    cohort_date: str
    cohort_size: int
    days_old: int
    d1_pct: float | None = None
    d7_pct: float | None = None
    d30_pct: float | None = None
    d90_pct: float | None = None
    d1_eligible_pct: float | None = None
    d7_eligible_pct: float | None = None
    d30_eligible_pct: float | None = None
    d90_eligible_pct: float | None = None


class StatusBreakdown(BaseModel):
    live: int = 0
    waitlisted: int = 0
    banned: int = 0
    deleted: int = 0
    other: int = 0


class GrowthStats(BaseModel):
    total_users: int
    new_this_week: int
    new_this_month: int
    d1_retention: float
    d7_retention: float
    d30_retention: float
    d90_retention: float
    churn_rate_7d: float
    churn_rate_30d: float
    avg_user_lifetime_days: float
    status_breakdown: StatusBreakdown


class MessageCountBuckets(BaseModel):
    zero: int = 0
    one_to_four: int = 0
    five_plus: int = 0


class MessagingStats(BaseModel):
    period: str
    total_messages: int
    messages_today: int
    messages_this_week: int
    active_conversations: int
    avg_messages_per_conversation: float
    matches_with_messages_pct: float
    first_message_reply_rate: float
    avg_response_time_hours: float
    liked_messages_count: int
    liked_messages_rate: float
    contact_exchange_count: int
    contact_exchange_rate: float
    conversations_by_message_count: MessageCountBuckets
    unmatched_count: int
    unmatch_rate: float
    double_text_conversations: int
    double_text_rate: float
    avg_message_length: float
    avg_time_to_first_message_hours: float
    ghosted_conversations: int
    ghost_rate: float
    first_message_by_gender: GenderCounts
    unread_conversations: int
    conversations_with_plans: int
    plans_rate: float
    mutual_messaging_rate: float
    mutual_messaging_count: int
    block_rate: float
    blocked_conversations: int
    avg_messages_with_overlaps: float
    avg_messages_without_overlaps: float
    request_acceptance_rate: float
    accepted_requests: int
    total_requests: int
    message_with_request_rate: float
    requests_with_message: int
    standout_conversion_rate: float
    standouts_converted: int
    total_standouts: int
    rejection_by_gender: GenderCounts
    notification_delivery_rate: float
    notifications_delivered: int
    total_notifications: int


class HourBucket(BaseModel):
    hour: int
    message_count: int
    percentage: float


class MessagePlanFlag(BaseModel):
    message_id: str
    has_plans: bool
    rules: list[str]


class ConversationPlans(BaseModel):
    conversation_id: str
    has_plans: bool
    messages: list[MessagePlanFlag]


class MetricDelta(BaseModel):
    key: str
    label: str
    unit: Literal["count", "percent", "decimal"]
    invert_trend: bool
    current: float
    previous: float
    diff: float
    pct_change: float | None
    point_diff: float | None
    display_delta: float | None
    direction: Literal["up", "down", "flat"]
    is_better: bool
    is_positive: bool


class DropSummary(BaseModel):
    id: str
    number: int
    start_date: str
    end_date: str


class DropComparison(BaseModel):
    current: DropSummary
    previous: DropSummary
    metrics: list[MetricDelta]


DominationStatus = Literal["dominating", "strong", "growing", "early", "starting", "unknown"]


class CityDomination(BaseModel):
    id: str
    name: str
    state: str | None
    population: int | None
    waitlist_count: int
    penetration_rate: float | None
    status: DominationStatus


class TopCity(BaseModel):
    name: str
    state: str | None
    penetration_rate: float


class DominationStats(BaseModel):
    total_market: int
    total_waitlist: int
    top_city: TopCity | None
    avg_penetration: float


class DominationResponse(BaseModel):
    cities: list[CityDomination]
    stats: DominationStats


class CityGenderBreakdown(BaseModel):
    woman: int = 0
    man: int = 0
    nonbinary: int = 0
    other: int = 0


class CityDetailStats(BaseModel):
    city: CityDomination
    total_signups: int
    waitlisted: int
    gender_breakdown: CityGenderBreakdown


class ReferralComparison(BaseModel):
    referral_retention_7d: float
    organic_retention_7d: float
    referral_match_rate: float
    organic_match_rate: float


class ReferralStats(BaseModel):
    total_referrals: int
    unique_referrers: int
    conversion_rate: float
    referral_vs_organic: ReferralComparison
