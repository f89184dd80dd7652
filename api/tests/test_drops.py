from datetime import date

from dashmetrics.rows import DropRow, DropStatsRow
from dashmetrics.services.drops import (
    DROP_METRICS,
    compare_drop_stats,
    compare_drops,
    compare_metric,
    metric_value,
    pct_change,
)


def test_pct_change_reference_values():
    assert pct_change(0, 0) is None
    assert pct_change(10, 0) == 100
    assert pct_change(50, 100) == -50
    assert pct_change(-5, 0) is None


def test_direction_and_inverted_trend():
    up = compare_metric("total_participants", 120, 100)
    assert up.direction == "up"
    assert up.is_better is True
    assert up.diff == 20
    assert up.pct_change == 20
    assert up.point_diff is None
    assert up.display_delta == 20

    worse = compare_metric("total_unmatches", 12, 10, invert_trend=True)
    assert worse.direction == "up"
    assert worse.is_better is False
    assert worse.is_positive is False

    flat = compare_metric("men_participants", 7, 7)
    assert flat.direction == "flat"
    assert flat.is_better is False


def test_percent_metrics_show_point_difference():
    delta = compare_metric("match_rate", 45.0, 30.0, unit="percent")
    assert delta.point_diff == 15
    assert delta.display_delta == 15
    assert delta.pct_change == 50


def test_fraction_metrics_are_scaled_and_aliases_resolve():
    by_key = {m.key: m for m in DROP_METRICS}
    stats = DropStatsRow(match_drop_id="d", values={"match_rate": 0.42, "non_binary_participants": 3})
    assert round(metric_value(stats, by_key["match_rate"]), 6) == 42
    assert metric_value(stats, by_key["nonbinary_participants"]) == 3
    assert metric_value(stats, by_key["total_participants"]) == 0


def test_compare_drop_stats_covers_every_metric():
    current = DropStatsRow(match_drop_id="d2", values={"total_participants": 150, "unmatch_rate": 0.1, "total_match_rejections": 4})
    previous = DropStatsRow(match_drop_id="d1", values={"total_participants": 100, "unmatch_rate": 0.2, "total_match_rejections": 8})
    deltas = {d.key: d for d in compare_drop_stats(current, previous)}
    assert set(deltas) == {m.key for m in DROP_METRICS}
    assert deltas["total_participants"].pct_change == 50
    assert deltas["unmatch_rate"].is_better is True
    assert round(deltas["unmatch_rate"].point_diff, 6) == -10
    assert deltas["total_match_rejections"].is_better is True
    assert deltas["avg_candidates_per_participant"].pct_change is None


def test_compare_drops_summaries():
    out = compare_drops(
        DropRow(id="d2", number=2, start_date=date(2026, 3, 9), end_date=date(2026, 3, 15)),
        DropStatsRow(match_drop_id="d2", values={"total_participants": 10}),
        DropRow(id="d1", number=1, start_date=date(2026, 3, 2), end_date=date(2026, 3, 8)),
        DropStatsRow(match_drop_id="d1", values={"total_participants": 0}),
    )
    assert out.current.number == 2
    assert out.previous.start_date == "2026-03-02"
    participants = next(m for m in out.metrics if m.key == "total_participants")
    assert participants.pct_change == 100
