from __future__ import annotations

from collections.abc import Iterable

from ..schemas import GenderCounts

GENDER_LABELS: dict[str, str] = {
    "woman": "women",
    "man": "men",
    "non_binary": "nonbinary",
    "nonbinary": "nonbinary",
}


def gender_bucket(value: str | None) -> str:
    """Map a stored gender value to women/men/nonbinary, anything else to other."""
    if value is None:
        return "other"
    return GENDER_LABELS.get(str(value).strip().lower(), "other")


def count_by_gender(genders: Iterable[str | None]) -> GenderCounts:
    counts = {"women": 0, "men": 0, "nonbinary": 0, "other": 0}
    for g in genders:
        counts[gender_bucket(g)] += 1
    return GenderCounts(**counts)
