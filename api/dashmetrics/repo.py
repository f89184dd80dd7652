from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import text

from .database import SessionLocal
from .rows import (
    ConversationRow,
    DropRow,
    DropStatsRow,
    MatchCandidateRow,
    MatchRejectionRow,
    MatchRequestRow,
    MatchRow,
    MessageRow,
    NotificationLogRow,
    ProfileBlockRow,
    ProfileContent,
    ProfileRow,
    UserRow,
    WaitlistCityRow,
)

_DROP_STATS_SKIP = {"id", "match_drop_id", "created_at", "updated_at"}


def _ts(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    parsed = datetime.fromisoformat(str(value))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _str(value: Any) -> str | None:
    return None if value is None else str(value)


def _rows(sql: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
    with SessionLocal() as db:
        rows = db.execute(text(sql), params or {}).mappings().all()
    return [dict(r) for r in rows]


def _since_clause(column: str, since: datetime | None) -> str:
    return f"AND {column} >= :since" if since is not None else ""


def _user(r: dict[str, Any]) -> UserRow:
    return UserRow(
        id=str(r["id"]),
        created_at=_ts(r["created_at"]),
        last_seen_at=_ts(r.get("last_seen_at")),
        referral_code=r.get("referral_code") or None,
    )


def _profile(r: dict[str, Any]) -> ProfileRow:
    height = r.get("height")
    return ProfileRow(
        id=str(r["id"]),
        user_id=str(r["user_id"]),
        gender=r.get("gender"),
        bio=r.get("bio"),
        school=r.get("school"),
        job_title=r.get("job_title"),
        hometown=r.get("hometown"),
        neighborhood=r.get("neighborhood"),
        height=float(height) if height is not None else None,
        completed=bool(r.get("completed")),
        status=str(r.get("status") or ""),
        created_at=_ts(r.get("created_at")),
        updated_at=_ts(r.get("updated_at")),
        waitlist_city_id=_str(r.get("waitlist_city_id")),
    )


def _match(r: dict[str, Any]) -> MatchRow:
    return MatchRow(
        id=str(r["id"]),
        profile1_id=str(r["profile1_id"]),
        profile2_id=str(r["profile2_id"]),
        created_at=_ts(r["created_at"]),
        profile1_unmatched_at=_ts(r.get("profile1_unmatched_at")),
        profile2_unmatched_at=_ts(r.get("profile2_unmatched_at")),
    )


def _conversation(r: dict[str, Any]) -> ConversationRow:
    return ConversationRow(
        id=str(r["id"]),
        match_id=str(r["match_id"]),
        profile1_id=str(r["profile1_id"]),
        profile2_id=str(r["profile2_id"]),
        created_at=_ts(r["created_at"]),
        p1_contact_exchanged_at=_ts(r.get("p1_contact_exchanged_at")),
        p2_contact_exchanged_at=_ts(r.get("p2_contact_exchanged_at")),
        profile1_unread=bool(r.get("profile1_unread")),
        profile2_unread=bool(r.get("profile2_unread")),
    )


def _message(r: dict[str, Any]) -> MessageRow:
    return MessageRow(
        id=str(r["id"]),
        conversation_id=str(r["conversation_id"]),
        sender_profile_id=str(r["sender_profile_id"]),
        content=r.get("content"),
        created_at=_ts(r["created_at"]),
        is_liked=bool(r.get("is_liked")),
    )


USER_COLUMNS = "u.id, u.created_at, u.last_seen_at, u.referral_code"
PROFILE_COLUMNS = (
    "p.id, p.user_id, p.gender::text AS gender, p.bio, p.school, p.job_title, p.hometown, p.neighborhood, "
    "p.height, p.completed, p.status::text AS status, p.created_at, p.updated_at, p.waitlist_city_id"
)


def fetch_users(since: datetime | None = None) -> list[UserRow]:
    rows = _rows(
        f"""
        SELECT {USER_COLUMNS}
        FROM users u
        WHERE 1=1 {_since_clause("u.created_at", since)}
        """,
        {"since": since},
    )
    return [_user(r) for r in rows]


def fetch_profiles(
    *,
    statuses: tuple[str, ...] | None = None,
    since: datetime | None = None,
    waitlist_city_id: str | None = None,
) -> list[ProfileRow]:
    status_clause = "AND p.status::text = ANY(:statuses)" if statuses else ""
    city_clause = "AND p.waitlist_city_id = CAST(:city_id AS uuid)" if waitlist_city_id else ""
    rows = _rows(
        f"""
        SELECT {PROFILE_COLUMNS}
        FROM profiles p
        WHERE 1=1 {status_clause} {city_clause} {_since_clause("p.created_at", since)}
        """,
        {"statuses": list(statuses or ()), "city_id": waitlist_city_id, "since": since},
    )
    return [_profile(r) for r in rows]


def _content_sql(where: str) -> str:
    return f"""
        SELECT
          {PROFILE_COLUMNS},
          (SELECT COUNT(*) FROM profile_uploads pu WHERE pu.profile_id = p.id AND pu.type = 'photo') AS photo_count,
          (SELECT COUNT(*) FROM profile_prompt_responses pr WHERE pr.profile_id = p.id) AS prompt_count,
          (SELECT COUNT(*) FROM profile_interests pi WHERE pi.profile_id = p.id) AS interest_count
        FROM profiles p
        WHERE {where}
        """


def _content(r: dict[str, Any]) -> ProfileContent:
    return ProfileContent(
        profile=_profile(r),
        photo_count=int(r.get("photo_count") or 0),
        prompt_count=int(r.get("prompt_count") or 0),
        interest_count=int(r.get("interest_count") or 0),
    )


def fetch_profile_contents(*, statuses: tuple[str, ...], since: datetime | None = None) -> list[ProfileContent]:
    rows = _rows(
        _content_sql(f"p.status::text = ANY(:statuses) {_since_clause('p.created_at', since)}"),
        {"statuses": list(statuses), "since": since},
    )
    return [_content(r) for r in rows]


def fetch_profile_content(profile_id: str) -> ProfileContent | None:
    rows = _rows(_content_sql("p.id = CAST(:id AS uuid)"), {"id": profile_id})
    return _content(rows[0]) if rows else None


def fetch_profile_genders() -> dict[str, str | None]:
    rows = _rows("SELECT id, gender::text AS gender FROM profiles")
    return {str(r["id"]): r.get("gender") for r in rows}


def fetch_matches() -> list[MatchRow]:
    rows = _rows(
        """
        SELECT id, profile1_id, profile2_id, created_at, profile1_unmatched_at, profile2_unmatched_at
        FROM matches
        """
    )
    return [_match(r) for r in rows]


CONVERSATION_COLUMNS = (
    "c.id, c.match_id, c.profile1_id, c.profile2_id, c.created_at, c.p1_contact_exchanged_at, "
    "c.p2_contact_exchanged_at, c.profile1_unread, c.profile2_unread"
)


def fetch_conversations() -> list[ConversationRow]:
    rows = _rows(f"SELECT {CONVERSATION_COLUMNS} FROM conversations c")
    return [_conversation(r) for r in rows]


def fetch_conversation(conversation_id: str) -> ConversationRow | None:
    rows = _rows(
        f"SELECT {CONVERSATION_COLUMNS} FROM conversations c WHERE c.id = CAST(:id AS uuid)",
        {"id": conversation_id},
    )
    return _conversation(rows[0]) if rows else None


def fetch_messages(since: datetime | None = None, conversation_id: str | None = None) -> list[MessageRow]:
    conv_clause = "AND cm.conversation_id = CAST(:conversation_id AS uuid)" if conversation_id else ""
    rows = _rows(
        f"""
        SELECT cm.id, cm.conversation_id, cm.sender_profile_id, cm.content, cm.is_liked, cm.created_at
        FROM conversation_messages cm
        WHERE 1=1 {conv_clause} {_since_clause("cm.created_at", since)}
        ORDER BY cm.conversation_id, cm.created_at ASC, cm.id ASC
        """,
        {"since": since, "conversation_id": conversation_id},
    )
    return [_message(r) for r in rows]


def fetch_profile_blocks() -> list[ProfileBlockRow]:
    rows = _rows("SELECT profile_id, blocked_profile_id FROM profile_blocks")
    return [ProfileBlockRow(profile_id=str(r["profile_id"]), blocked_profile_id=str(r["blocked_profile_id"])) for r in rows]


def fetch_match_requests(since: datetime | None = None) -> list[MatchRequestRow]:
    rows = _rows(
        f"""
        SELECT id, sender_profile_id, receiver_profile_id, status::text AS status, message, overlaps, created_at
        FROM match_requests
        WHERE 1=1 {_since_clause("created_at", since)}
        """,
        {"since": since},
    )
    return [
        MatchRequestRow(
            id=str(r["id"]),
            sender_profile_id=str(r["sender_profile_id"]),
            receiver_profile_id=str(r["receiver_profile_id"]),
            status=str(r.get("status") or ""),
            created_at=_ts(r["created_at"]),
            message=r.get("message"),
            overlaps=tuple(r.get("overlaps") or ()),
        )
        for r in rows
    ]


def fetch_standout_candidates(since: datetime | None = None) -> list[MatchCandidateRow]:
    rows = _rows(
        f"""
        SELECT profile_id, candidate_profile_id, is_standout, created_at
        FROM match_candidates
        WHERE is_standout = true {_since_clause("created_at", since)}
        """,
        {"since": since},
    )
    return [
        MatchCandidateRow(
            profile_id=str(r["profile_id"]),
            candidate_profile_id=str(r["candidate_profile_id"]),
            is_standout=bool(r["is_standout"]),
            created_at=_ts(r["created_at"]),
        )
        for r in rows
    ]


def fetch_match_rejections(since: datetime | None = None) -> list[MatchRejectionRow]:
    rows = _rows(
        f"SELECT profile_id, created_at FROM match_rejections WHERE 1=1 {_since_clause('created_at', since)}",
        {"since": since},
    )
    return [MatchRejectionRow(profile_id=str(r["profile_id"]), created_at=_ts(r["created_at"])) for r in rows]


def fetch_message_notifications(since: datetime | None = None) -> list[NotificationLogRow]:
    rows = _rows(
        f"""
        SELECT purpose::text AS purpose, status::text AS status, created_at
        FROM push_notification_logs
        WHERE purpose::text ILIKE '%message%' {_since_clause("created_at", since)}
        """,
        {"since": since},
    )
    return [
        NotificationLogRow(purpose=str(r.get("purpose") or ""), status=str(r.get("status") or ""), created_at=_ts(r["created_at"]))
        for r in rows
    ]


def _drop(r: dict[str, Any]) -> DropRow:
    return DropRow(id=str(r["id"]), number=int(r["number"]), start_date=r["start_date"], end_date=r["end_date"])


def fetch_drop(drop_id: str) -> DropRow | None:
    rows = _rows(
        "SELECT id, number, start_date, end_date FROM match_drops WHERE id = CAST(:id AS uuid)",
        {"id": drop_id},
    )
    return _drop(rows[0]) if rows else None


def fetch_drop_stats(drop_id: str) -> DropStatsRow | None:
    rows = _rows("SELECT * FROM match_drop_stats WHERE match_drop_id = CAST(:id AS uuid)", {"id": drop_id})
    if not rows:
        return None
    values: dict[str, float] = {}
    for key, value in rows[0].items():
        if key in _DROP_STATS_SKIP or value is None:
            continue
        try:
            values[key] = float(value)
        except (TypeError, ValueError):
            continue
    return DropStatsRow(match_drop_id=drop_id, values=values)


def _city(r: dict[str, Any]) -> WaitlistCityRow:
    return WaitlistCityRow(
        id=str(r["id"]),
        name=str(r["name"]),
        state=r.get("state"),
        latitude=float(r["latitude"]) if r.get("latitude") is not None else None,
        longitude=float(r["longitude"]) if r.get("longitude") is not None else None,
        population=int(r["population"]) if r.get("population") else None,
        waitlist_count=int(r.get("waitlist_count") or 0),
    )


def fetch_waitlist_cities() -> list[WaitlistCityRow]:
    rows = _rows(
        """
        SELECT
          wc.id, wc.name, wc.state, wc.latitude, wc.longitude,
          COUNT(p.id) FILTER (WHERE p.status = 'waitlisted') AS waitlist_count
        FROM waitlist_cities wc
        LEFT JOIN profiles p ON wc.id = p.waitlist_city_id
        GROUP BY wc.id, wc.name, wc.state, wc.latitude, wc.longitude
        ORDER BY wc.name ASC
        """
    )
    return [_city(r) for r in rows]


def fetch_waitlist_city(city_id: str) -> WaitlistCityRow | None:
    rows = _rows(
        "SELECT id, name, state, latitude, longitude FROM waitlist_cities WHERE id = CAST(:id AS uuid)",
        {"id": city_id},
    )
    return _city(rows[0]) if rows else None
