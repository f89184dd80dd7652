"""Typed read-only rows handed to the calculators by the data-access layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any


@dataclass(frozen=True)
class UserRow:
    id: str
    created_at: datetime
    last_seen_at: datetime | None = None
    referral_code: str | None = None


@dataclass(frozen=True)
class ProfileRow:
    id: str
    user_id: str
    gender: str | None = None
    bio: str | None = None
    school: str | None = None
    job_title: str | None = None
    hometown: str | None = None
    neighborhood: str | None = None
    height: float | None = None
    completed: bool = False
    status: str = "live"
    created_at: datetime | None = None
    updated_at: datetime | None = None
    waitlist_city_id: str | None = None


@dataclass(frozen=True)
class ProfileContent:
    profile: ProfileRow
    photo_count: int = 0
    prompt_count: int = 0
    interest_count: int = 0


@dataclass(frozen=True)
class MatchRow:
    id: str
    profile1_id: str
    profile2_id: str
    created_at: datetime
    profile1_unmatched_at: datetime | None = None
    profile2_unmatched_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.profile1_unmatched_at is None and self.profile2_unmatched_at is None


@dataclass(frozen=True)
class ConversationRow:
    id: str
    match_id: str
    profile1_id: str
    profile2_id: str
    created_at: datetime
    p1_contact_exchanged_at: datetime | None = None
    p2_contact_exchanged_at: datetime | None = None
    profile1_unread: bool = False
    profile2_unread: bool = False


@dataclass(frozen=True)
class MessageRow:
    id: str
    conversation_id: str
    sender_profile_id: str
    content: str | None
    created_at: datetime
    is_liked: bool = False


@dataclass(frozen=True)
class MatchRequestRow:
    id: str
    sender_profile_id: str
    receiver_profile_id: str
    status: str
    created_at: datetime
    message: str | None = None
    overlaps: tuple[Any, ...] = ()


@dataclass(frozen=True)
class MatchCandidateRow:
    profile_id: str
    candidate_profile_id: str
    is_standout: bool
    created_at: datetime


@dataclass(frozen=True)
class MatchRejectionRow:
    profile_id: str
    created_at: datetime


@dataclass(frozen=True)
class ProfileBlockRow:
    profile_id: str
    blocked_profile_id: str


@dataclass(frozen=True)
class NotificationLogRow:
    purpose: str
    status: str
    created_at: datetime


@dataclass(frozen=True)
class DropRow:
    id: str
    number: int
    start_date: date | datetime
    end_date: date | datetime


@dataclass(frozen=True)
class DropStatsRow:
    match_drop_id: str
    values: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class WaitlistCityRow:
    id: str
    name: str
    state: str | None
    latitude: float | None = None
    longitude: float | None = None
    population: int | None = None
    waitlist_count: int = 0
