from typing import Any

from fastapi import APIRouter, Depends, Query

from ..auth.admin_deps import require_admin_role
from ..config import COHORT_DISPLAY_LIMIT
from ..http_helpers import compute_or_fail
from ..services import metrics
from ..services.period import resolve_period

router = APIRouter(prefix="/analytics", dependencies=[Depends(require_admin_role("viewer"))])


@router.get("/funnel/stats")
def funnel_stats(period: str | None = None) -> Any:
    return compute_or_fail("funnel stats", metrics.funnel_stats, resolve_period(period))


@router.get("/funnel/trends")
def funnel_trends(period: str | None = None) -> Any:
    return compute_or_fail("funnel trends", metrics.funnel_trends, resolve_period(period))


@router.get("/growth/stats")
def growth_stats(period: str | None = None) -> Any:
    return compute_or_fail("growth stats", metrics.growth_stats, resolve_period(period))


@router.get("/growth/cohorts")
def growth_cohorts(limit: int = Query(default=COHORT_DISPLAY_LIMIT, ge=1, le=52)) -> Any:
    cohorts = compute_or_fail("retention cohorts", metrics.retention_cohorts, resolve_period(None))
    return cohorts[:limit]


@router.get("/quality/stats")
def quality_stats(period: str | None = None) -> Any:
    return compute_or_fail("quality stats", metrics.quality_stats, resolve_period(period))


@router.get("/quality/distribution")
def quality_distribution(period: str | None = None) -> Any:
    return compute_or_fail("quality distribution", metrics.quality_distribution, resolve_period(period))


@router.get("/quality/impact")
def quality_impact(period: str | None = None) -> Any:
    return compute_or_fail("quality impact", metrics.quality_tiers, resolve_period(period))


@router.get("/referrals/stats")
def referral_stats(period: str | None = None) -> Any:
    return compute_or_fail("referral stats", metrics.referral_stats, resolve_period(period))
