"""Heuristic detection of real-world meetup planning in chat messages.

Each rule is compiled on its own so coverage can be asserted per rule. A
message "has plans" when any rule matches; a conversation has plans when any
of its messages does. Matching is case-insensitive and anchored on word
boundaries, so "8pm" matches while "7pmx" does not.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "ʼ": "'"})


@dataclass(frozen=True)
class PlanRule:
    name: str
    description: str
    pattern: re.Pattern[str]

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def _rule(name: str, description: str, regex: str) -> PlanRule:
    return PlanRule(name=name, description=description, pattern=re.compile(regex, re.IGNORECASE))


PLAN_RULES: tuple[PlanRule, ...] = (
    _rule("clock_time", "clock time with am/pm: 7:30pm, 7:30 pm", r"\b\d{1,2}:\d{2}\s*(?:am|pm)\b"),
    _rule("hour_meridiem", "hour with am/pm: 7pm, 7 pm", r"\b\d{1,2}\s*(?:am|pm)\b"),
    _rule("at_time", "at/around a clock time: at 7, around 8pm", r"\b(?:at|around)\s+\d{1,2}(?::\d{2})?(?:\s*(?:am|pm))?\b"),
    _rule(
        "relative_day",
        "relative day: tomorrow, tonight, this weekend",
        r"\b(?:tomorrow night|tomorrow|tonight|this weekend|next week|this week)\b",
    ),
    _rule(
        "lets_meet",
        "planning verb: let's meet, wanna hang out",
        r"\b(?:lets|let's|want to|wanna|should we|we should)\s+(?:meet up|meet|grab|hang out|hang|get together)\b",
    ),
    _rule(
        "grab_food",
        "grab coffee/drinks/dinner",
        r"\b(?:grab|get)\s+(?:coffee|drinks|dinner|lunch|brunch|a drink|a bite|food together)\b",
    ),
    _rule("meet_up", "meet up / meeting at the", r"\bmeet(?:ing)?\s+(?:up|at the|at a|you at)\b"),
    _rule("availability", "are you free", r"\b(?:are you|r u|ru)\s+(?:free|available)\b"),
    _rule("what_time", "what time should we", r"\bwhat time (?:should|do|are|can)\b"),
    _rule("when_question", "when can we", r"\bwhen (?:are you|should we|can we)\b"),
    _rule("where_meet", "where should we meet", r"\bwhere (?:should we|do you want to) meet\b"),
    _rule("date_mention", "first date / go on a date", r"\b(?:first date|our date|go on a date)\b"),
    _rule("location", "come over / my place", r"\b(?:pick you up|come over|my place|your place|come to my)\b"),
    _rule("see_you", "see you at", r"\b(?:see you|meet you) (?:at|on|this)\b"),
    _rule("venue_time", "dinner at / drinks this", r"\b(?:dinner|drinks|coffee) (?:at|on|this)\b"),
)


def _normalize(text: str | None) -> str:
    return (text or "").translate(_APOSTROPHES)


def matching_rules(text: str | None, rules: Iterable[PlanRule] = PLAN_RULES) -> list[str]:
    body = _normalize(text)
    if not body:
        return []
    return [r.name for r in rules if r.matches(body)]


def detect_plans(text: str | None, rules: Iterable[PlanRule] = PLAN_RULES) -> bool:
    body = _normalize(text)
    if not body:
        return False
    return any(r.matches(body) for r in rules)


def conversation_has_plans(contents: Iterable[str | None]) -> bool:
    return any(detect_plans(c) for c in contents)
