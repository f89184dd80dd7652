"""Deltas between two drop statistics snapshots.

Rates such as match rate are already percentages once scaled to 0-100, so the
number to show for them is the point difference; a percent-of-percent change
is carried too, but only as ``pct_change``. ``display_delta`` picks the right
one per metric unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal

from ..rows import DropRow, DropStatsRow
from ..schemas import DropComparison, DropSummary, MetricDelta
from .numeric import finite_or_none, finite_or_zero

Unit = Literal["count", "percent", "decimal"]


@dataclass(frozen=True)
class DropMetric:
    key: str
    label: str
    unit: Unit = "count"
    invert_trend: bool = False
    # Stored as a 0-1 fraction; scaled to 0-100 before comparing.
    fraction: bool = False
    aliases: tuple[str, ...] = ()


DROP_METRICS: tuple[DropMetric, ...] = (
    DropMetric("total_participants", "Participants"),
    DropMetric("total_conversations", "Matches"),
    DropMetric("match_rate", "Match Rate", unit="percent", fraction=True),
    DropMetric("unmatch_rate", "Unmatch Rate", unit="percent", invert_trend=True, fraction=True),
    DropMetric("total_match_requests", "Total Requests"),
    DropMetric("unique_request_senders", "Unique Senders"),
    DropMetric("total_match_rejections", "Rejections", invert_trend=True),
    DropMetric("total_unmatches", "Unmatches", invert_trend=True),
    DropMetric("avg_candidates_per_participant", "Avg Candidates/User", unit="decimal"),
    DropMetric("women_participants", "Women"),
    DropMetric("men_participants", "Men"),
    DropMetric("nonbinary_participants", "Non-binary", aliases=("non_binary_participants",)),
)


def pct_change(current: float, previous: float) -> float | None:
    if previous == 0:
        if current > 0:
            return 100.0
        return None
    return finite_or_none((current - previous) / previous * 100.0)


def compare_metric(
    key: str,
    current: float,
    previous: float,
    *,
    label: str | None = None,
    unit: Unit = "count",
    invert_trend: bool = False,
) -> MetricDelta:
    current = finite_or_zero(current)
    previous = finite_or_zero(previous)
    diff = current - previous
    change = pct_change(current, previous)
    point_diff = diff if unit == "percent" else None
    display = point_diff if unit == "percent" else change

    if diff > 0:
        direction = "up"
    elif diff < 0:
        direction = "down"
    else:
        direction = "flat"
    is_better = (diff < 0) if invert_trend else (diff > 0)

    return MetricDelta(
        key=key,
        label=label or key,
        unit=unit,
        invert_trend=invert_trend,
        current=current,
        previous=previous,
        diff=diff,
        pct_change=change,
        point_diff=point_diff,
        display_delta=display,
        direction=direction,
        is_better=is_better,
        is_positive=is_better,
    )


def metric_value(stats: DropStatsRow, metric: DropMetric) -> float:
    raw = None
    for name in (metric.key, *metric.aliases):
        if stats.values.get(name) is not None:
            raw = stats.values[name]
            break
    value = finite_or_zero(float(raw) if raw is not None else None)
    return value * 100.0 if metric.fraction else value


def _iso(value: date | datetime) -> str:
    return value.isoformat()


def summarize_drop(drop: DropRow) -> DropSummary:
    return DropSummary(id=drop.id, number=drop.number, start_date=_iso(drop.start_date), end_date=_iso(drop.end_date))


def compare_drop_stats(
    current: DropStatsRow,
    previous: DropStatsRow,
    metrics: tuple[DropMetric, ...] = DROP_METRICS,
) -> list[MetricDelta]:
    return [
        compare_metric(
            m.key,
            metric_value(current, m),
            metric_value(previous, m),
            label=m.label,
            unit=m.unit,
            invert_trend=m.invert_trend,
        )
        for m in metrics
    ]


def compare_drops(
    current_drop: DropRow,
    current_stats: DropStatsRow,
    previous_drop: DropRow,
    previous_stats: DropStatsRow,
) -> DropComparison:
    return DropComparison(
        current=summarize_drop(current_drop),
        previous=summarize_drop(previous_drop),
        metrics=compare_drop_stats(current_stats, previous_stats),
    )
