from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence

from ..config import QUALITY_PROFILE_STATUSES
from ..rows import MatchRow, MessageRow, ProfileContent, ProfileRow
from ..schemas import (
    BioMetrics,
    CompletenessScore,
    FieldCompletion,
    FieldFlags,
    GenderScores,
    PhotoMetrics,
    QualityStats,
    QualityTier,
    ScoreBucket,
)
from .gender import gender_bucket
from .numeric import finite_or_zero, mean_or_none, pct

# Points per present text field; height is scored separately (non-null only).
TEXT_FIELD_POINTS: dict[str, int] = {
    "bio": 15,
    "school": 10,
    "job_title": 10,
    "hometown": 5,
    "neighborhood": 5,
}
HEIGHT_POINTS = 5
PHOTO_POINTS = 5
MAX_PHOTOS = 6
PROMPT_POINTS = 5
MAX_PROMPTS = 3
INTEREST_POINTS = 5

SCORE_BUCKETS: list[tuple[str, int]] = [
    ("0-19", 0),
    ("20-39", 20),
    ("40-59", 40),
    ("60-79", 60),
    ("80-100", 80),
]
HIGH_TIER_MIN = 70
MEDIUM_TIER_MIN = 40


def _present(value: str | None) -> bool:
    return value is not None and value != ""


def field_flags(profile: ProfileRow, photo_count: int = 0, prompt_count: int = 0, interest_count: int = 0) -> FieldFlags:
    return FieldFlags(
        bio=_present(profile.bio),
        school=_present(profile.school),
        job_title=_present(profile.job_title),
        hometown=_present(profile.hometown),
        neighborhood=_present(profile.neighborhood),
        height=profile.height is not None,
        photos=photo_count > 0,
        prompts=prompt_count > 0,
        interests=interest_count > 0,
    )


def score_profile(profile: ProfileRow, photo_count: int = 0, prompt_count: int = 0, interest_count: int = 0) -> int:
    score = 0
    for name, points in TEXT_FIELD_POINTS.items():
        if _present(getattr(profile, name)):
            score += points
    if profile.height is not None:
        score += HEIGHT_POINTS
    score += min(max(photo_count, 0), MAX_PHOTOS) * PHOTO_POINTS
    score += min(max(prompt_count, 0), MAX_PROMPTS) * PROMPT_POINTS
    if interest_count > 0:
        score += INTEREST_POINTS
    return score


def score_content(content: ProfileContent) -> int:
    return score_profile(content.profile, content.photo_count, content.prompt_count, content.interest_count)


def completeness_for(content: ProfileContent) -> CompletenessScore:
    return CompletenessScore(
        profile_id=content.profile.id,
        score=score_content(content),
        fields=field_flags(content.profile, content.photo_count, content.prompt_count, content.interest_count),
    )


def eligible_profiles(contents: Iterable[ProfileContent], statuses: Sequence[str] = QUALITY_PROFILE_STATUSES) -> list[ProfileContent]:
    allowed = set(statuses)
    return [c for c in contents if c.profile.status in allowed]


def compute_quality_stats(contents: Sequence[ProfileContent]) -> QualityStats:
    n = len(contents)
    scores = [score_content(c) for c in contents]

    def completion(name: str) -> float:
        if name == "height":
            hits = sum(1 for c in contents if c.profile.height is not None)
        else:
            hits = sum(1 for c in contents if _present(getattr(c.profile, name)))
        return pct(hits, n)

    bio_lengths = [len(c.profile.bio) for c in contents if _present(c.profile.bio)]

    by_gender: dict[str, list[int]] = defaultdict(list)
    for c, s in zip(contents, scores):
        by_gender[gender_bucket(c.profile.gender)].append(s)

    return QualityStats(
        profile_count=n,
        avg_completeness_score=finite_or_zero(mean_or_none(scores)),
        photo_metrics=PhotoMetrics(
            avg_photos=finite_or_zero(mean_or_none(c.photo_count for c in contents)),
            pct_with_6_photos=pct(sum(1 for c in contents if c.photo_count >= MAX_PHOTOS), n),
        ),
        bio_metrics=BioMetrics(
            avg_length=finite_or_zero(mean_or_none(bio_lengths)),
            pct_with_bio=completion("bio"),
        ),
        field_completion=FieldCompletion(
            bio=completion("bio"),
            school=completion("school"),
            job_title=completion("job_title"),
            hometown=completion("hometown"),
            neighborhood=completion("neighborhood"),
            height=completion("height"),
        ),
        by_gender=GenderScores(**{k: finite_or_zero(mean_or_none(v)) for k, v in by_gender.items()}),
    )


def bucket_for(score: int) -> str:
    label = SCORE_BUCKETS[0][0]
    for name, lower in SCORE_BUCKETS:
        if score >= lower:
            label = name
    return label


def score_distribution(contents: Sequence[ProfileContent]) -> list[ScoreBucket]:
    counts = {name: 0 for name, _ in SCORE_BUCKETS}
    for c in contents:
        counts[bucket_for(score_content(c))] += 1
    total = len(contents)
    return [
        ScoreBucket(bucket=name, count=counts[name], percentage=round(pct(counts[name], total), 1))
        for name, _ in SCORE_BUCKETS
    ]


def quality_tier(score: int) -> str:
    if score >= HIGH_TIER_MIN:
        return "high"
    if score >= MEDIUM_TIER_MIN:
        return "medium"
    return "low"


def quality_impact(
    contents: Sequence[ProfileContent],
    matches: Iterable[MatchRow],
    messages: Iterable[MessageRow],
) -> list[QualityTier]:
    """Average matches and sent messages per completeness tier."""
    match_counts: dict[str, int] = defaultdict(int)
    for m in matches:
        match_counts[m.profile1_id] += 1
        if m.profile2_id != m.profile1_id:
            match_counts[m.profile2_id] += 1
    message_counts: dict[str, int] = defaultdict(int)
    for msg in messages:
        message_counts[msg.sender_profile_id] += 1

    tiers: dict[str, list[str]] = defaultdict(list)
    for c in contents:
        tiers[quality_tier(score_content(c))].append(c.profile.id)

    out: list[QualityTier] = []
    for tier in ("high", "medium", "low"):
        ids = tiers.get(tier)
        if not ids:
            continue
        out.append(
            QualityTier(
                quality_tier=tier,
                avg_matches=finite_or_zero(mean_or_none(match_counts[i] for i in ids)),
                avg_messages=finite_or_zero(mean_or_none(message_counts[i] for i in ids)),
                profile_count=len(ids),
            )
        )
    return out
