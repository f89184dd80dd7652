from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import datetime


def pct(num: float, den: float) -> float:
    """Percentage 0-100; 0 when the denominator is not positive."""
    if not den or den <= 0:
        return 0.0
    return finite_or_zero(num * 100.0 / den)


def ratio(num: float, den: float) -> float:
    if not den or den <= 0:
        return 0.0
    return finite_or_zero(num / den)


def mean_or_none(values: Iterable[float | None]) -> float | None:
    vals = [float(v) for v in values if v is not None]
    if not vals:
        return None
    return sum(vals) / len(vals)


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600.0


def finite_or_zero(value: float | None) -> float:
    if value is None:
        return 0.0
    v = float(value)
    if math.isnan(v) or math.isinf(v):
        return 0.0
    return v


def finite_or_none(value: float | None) -> float | None:
    if value is None:
        return None
    v = float(value)
    if math.isnan(v) or math.isinf(v):
        return None
    return v
