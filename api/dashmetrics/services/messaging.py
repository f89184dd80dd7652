from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import timedelta

from ..config import GHOST_AFTER_DAYS
from ..rows import (
    ConversationRow,
    MatchCandidateRow,
    MatchRejectionRow,
    MatchRequestRow,
    MatchRow,
    MessageRow,
    NotificationLogRow,
    ProfileBlockRow,
)
from ..schemas import GenderCounts, HourBucket, MessageCountBuckets, MessagingStats
from .funnel import first_messages
from .gender import count_by_gender
from .numeric import finite_or_zero, hours_between, mean_or_none, pct, ratio
from .period import Period, days_ago, start_of_day
from .plans import conversation_has_plans


@dataclass(frozen=True)
class MessagingSnapshot:
    messages: Sequence[MessageRow] = ()
    conversations: Sequence[ConversationRow] = ()
    matches: Sequence[MatchRow] = ()
    genders: Mapping[str, str | None] = field(default_factory=dict)
    blocks: Sequence[ProfileBlockRow] = ()
    requests: Sequence[MatchRequestRow] = ()
    candidates: Sequence[MatchCandidateRow] = ()
    rejections: Sequence[MatchRejectionRow] = ()
    notifications: Sequence[NotificationLogRow] = ()


def _pair(a: str, b: str) -> tuple[str, str]:
    return (a, b) if a <= b else (b, a)


def group_by_conversation(messages: Iterable[MessageRow]) -> dict[str, list[MessageRow]]:
    """Messages per conversation in created_at order (message id breaks ties)."""
    grouped: dict[str, list[MessageRow]] = defaultdict(list)
    for msg in messages:
        grouped[msg.conversation_id].append(msg)
    for msgs in grouped.values():
        msgs.sort(key=lambda m: (m.created_at, m.id))
    return grouped


def response_gaps_hours(threads: Mapping[str, Sequence[MessageRow]]) -> list[float]:
    """Hours between consecutive messages where the sender changes."""
    gaps: list[float] = []
    for msgs in threads.values():
        for prev, cur in zip(msgs, msgs[1:]):
            if cur.sender_profile_id != prev.sender_profile_id:
                gaps.append(hours_between(prev.created_at, cur.created_at))
    return gaps


def avg_response_time_hours(threads: Mapping[str, Sequence[MessageRow]]) -> float:
    return finite_or_zero(mean_or_none(response_gaps_hours(threads)))


def has_double_text(msgs: Sequence[MessageRow]) -> bool:
    return any(cur.sender_profile_id == prev.sender_profile_id for prev, cur in zip(msgs, msgs[1:]))


def first_message_reply_rate(messages: Sequence[MessageRow], period: Period) -> float:
    senders: dict[str, set[str]] = defaultdict(set)
    for msg in messages:
        senders[msg.conversation_id].add(msg.sender_profile_id)
    firsts = [fm for fm in first_messages(messages).values() if period.includes(fm.created_at)]
    replied = sum(1 for fm in firsts if senders[fm.conversation_id] - {fm.sender_profile_id})
    return pct(replied, len(firsts))


def ghosted(
    window_threads: Mapping[str, Sequence[MessageRow]],
    all_threads: Mapping[str, Sequence[MessageRow]],
    conversations: Mapping[str, ConversationRow],
    matches: Mapping[str, MatchRow],
    period: Period,
) -> tuple[int, int]:
    """(ghosted, eligible) over window conversations whose match is still active."""
    cutoff = period.now - timedelta(days=GHOST_AFTER_DAYS)
    count = total = 0
    for conv_id in window_threads:
        conv = conversations.get(conv_id)
        match = matches.get(conv.match_id) if conv else None
        if match is None or not match.is_active:
            continue
        total += 1
        if all_threads[conv_id][-1].created_at < cutoff:
            count += 1
    return count, total


def _contact_exchange(
    conversations: Sequence[ConversationRow],
    window_threads: Mapping[str, Sequence[MessageRow]],
    period: Period,
) -> tuple[int, int]:
    if period.is_all:
        count = sum(
            1 for c in conversations if c.p1_contact_exchanged_at is not None or c.p2_contact_exchanged_at is not None
        )
        return count, len(conversations)
    in_window = [c for c in conversations if c.id in window_threads]
    count = sum(
        1
        for c in in_window
        if (c.p1_contact_exchanged_at is not None and period.includes(c.p1_contact_exchanged_at))
        or (c.p2_contact_exchanged_at is not None and period.includes(c.p2_contact_exchanged_at))
    )
    return count, len(in_window)


def _unmatched(matches: Sequence[MatchRow], period: Period) -> int:
    if period.is_all:
        return sum(1 for m in matches if not m.is_active)
    return sum(
        1
        for m in matches
        if (m.profile1_unmatched_at is not None and period.includes(m.profile1_unmatched_at))
        or (m.profile2_unmatched_at is not None and period.includes(m.profile2_unmatched_at))
    )


def _standouts(snapshot: MessagingSnapshot, all_threads: Mapping[str, Sequence[MessageRow]], period: Period) -> tuple[int, int]:
    talking: set[tuple[str, str]] = set()
    active = {m.id: m for m in snapshot.matches if m.is_active}
    for conv in snapshot.conversations:
        m = active.get(conv.match_id)
        if m is not None and all_threads.get(conv.id):
            talking.add(_pair(m.profile1_id, m.profile2_id))
    pairs = {
        (c.profile_id, c.candidate_profile_id)
        for c in snapshot.candidates
        if c.is_standout and period.includes(c.created_at)
    }
    converted = sum(1 for a, b in pairs if _pair(a, b) in talking)
    return converted, len(pairs)


def _overlap_impact(
    snapshot: MessagingSnapshot,
    window_threads: Mapping[str, Sequence[MessageRow]],
) -> tuple[float, float]:
    with_overlaps: set[tuple[str, str]] = {
        _pair(r.sender_profile_id, r.receiver_profile_id) for r in snapshot.requests if r.overlaps
    }
    match_by_id = {m.id: m for m in snapshot.matches}
    per_match: dict[str, int] = defaultdict(int)
    for conv in snapshot.conversations:
        if conv.match_id in match_by_id and conv.id in window_threads:
            per_match[conv.match_id] += len(window_threads[conv.id])

    yes: list[int] = []
    no: list[int] = []
    for match_id, n in per_match.items():
        m = match_by_id[match_id]
        (yes if _pair(m.profile1_id, m.profile2_id) in with_overlaps else no).append(n)
    return finite_or_zero(mean_or_none(yes)), finite_or_zero(mean_or_none(no))


def _message_count_buckets(
    matches: Sequence[MatchRow],
    conversations: Sequence[ConversationRow],
    window_threads: Mapping[str, Sequence[MessageRow]],
) -> MessageCountBuckets:
    per_match: dict[str, int] = defaultdict(int)
    for conv in conversations:
        per_match[conv.match_id] += len(window_threads.get(conv.id, ()))
    buckets = MessageCountBuckets()
    for m in matches:
        n = per_match.get(m.id, 0)
        if n == 0:
            buckets.zero += 1
        elif n <= 4:
            buckets.one_to_four += 1
        else:
            buckets.five_plus += 1
    return buckets


def compute_messaging_stats(snapshot: MessagingSnapshot, period: Period) -> MessagingStats:
    now = period.now
    window = [m for m in snapshot.messages if period.includes(m.created_at)]
    window_threads = group_by_conversation(window)
    all_threads = group_by_conversation(snapshot.messages)
    conversations = {c.id: c for c in snapshot.conversations}
    matches = {m.id: m for m in snapshot.matches}
    total_matches = len(snapshot.matches)
    n_convs = len(window_threads)

    if period.is_all:
        week_ago = days_ago(now, 7)
        active_conversations = len({m.conversation_id for m in snapshot.messages if m.created_at >= week_ago})
    else:
        active_conversations = n_convs

    matches_with_msgs = {conversations[c].match_id for c in window_threads if c in conversations}
    liked = sum(1 for m in window if m.is_liked)
    contact_count, contact_total = _contact_exchange(snapshot.conversations, window_threads, period)
    unmatched = _unmatched(snapshot.matches, period)
    double_text = sum(1 for msgs in window_threads.values() if has_double_text(msgs))

    to_first: list[float] = []
    for conv_id, msgs in window_threads.items():
        conv = conversations.get(conv_id)
        if conv is not None and msgs[0].created_at > conv.created_at:
            to_first.append(hours_between(conv.created_at, msgs[0].created_at))

    ghost_count, ghost_total = ghosted(window_threads, all_threads, conversations, matches, period)
    first_by_gender = count_by_gender(snapshot.genders.get(msgs[0].sender_profile_id) for msgs in window_threads.values())

    unread = sum(
        1 for c in snapshot.conversations if (c.profile1_unread or c.profile2_unread) and c.id in window_threads
    )
    with_plans = sum(1 for msgs in window_threads.values() if conversation_has_plans(m.content for m in msgs))
    mutual = sum(1 for msgs in window_threads.values() if len({m.sender_profile_id for m in msgs}) >= 2)

    blocked_pairs = {(b.profile_id, b.blocked_profile_id) for b in snapshot.blocks}
    blocked = 0
    for conv_id in window_threads:
        conv = conversations.get(conv_id)
        if conv is None:
            continue
        if (conv.profile1_id, conv.profile2_id) in blocked_pairs or (conv.profile2_id, conv.profile1_id) in blocked_pairs:
            blocked += 1
    block_total = sum(1 for c in window_threads if c in conversations)

    avg_with_overlaps, avg_without_overlaps = _overlap_impact(snapshot, window_threads)

    requests = [r for r in snapshot.requests if period.includes(r.created_at)]
    accepted = sum(1 for r in requests if r.status == "accepted")
    with_message = sum(1 for r in requests if r.message)

    standouts_converted, total_standouts = _standouts(snapshot, all_threads, period)

    rejections = count_by_gender(
        snapshot.genders.get(r.profile_id) for r in snapshot.rejections if period.includes(r.created_at)
    )

    notifications = [
        n for n in snapshot.notifications if "message" in (n.purpose or "").lower() and period.includes(n.created_at)
    ]
    delivered = sum(1 for n in notifications if n.status == "sent")

    return MessagingStats(
        period=period.token,
        total_messages=len(window),
        messages_today=sum(1 for m in snapshot.messages if m.created_at >= start_of_day(now)),
        messages_this_week=sum(1 for m in snapshot.messages if m.created_at >= days_ago(now, 7)),
        active_conversations=active_conversations,
        avg_messages_per_conversation=ratio(len(window), n_convs),
        matches_with_messages_pct=pct(len(matches_with_msgs), total_matches),
        first_message_reply_rate=first_message_reply_rate(snapshot.messages, period),
        avg_response_time_hours=avg_response_time_hours(window_threads),
        liked_messages_count=liked,
        liked_messages_rate=pct(liked, len(window)),
        contact_exchange_count=contact_count,
        contact_exchange_rate=pct(contact_count, contact_total),
        conversations_by_message_count=_message_count_buckets(snapshot.matches, snapshot.conversations, window_threads),
        unmatched_count=unmatched,
        unmatch_rate=pct(unmatched, total_matches),
        double_text_conversations=double_text,
        double_text_rate=pct(double_text, n_convs),
        avg_message_length=finite_or_zero(mean_or_none(len(m.content) for m in window if m.content is not None)),
        avg_time_to_first_message_hours=finite_or_zero(mean_or_none(to_first)),
        ghosted_conversations=ghost_count,
        ghost_rate=pct(ghost_count, ghost_total),
        first_message_by_gender=first_by_gender,
        unread_conversations=unread,
        conversations_with_plans=with_plans,
        plans_rate=pct(with_plans, n_convs),
        mutual_messaging_rate=pct(mutual, n_convs),
        mutual_messaging_count=mutual,
        block_rate=pct(blocked, block_total),
        blocked_conversations=blocked,
        avg_messages_with_overlaps=avg_with_overlaps,
        avg_messages_without_overlaps=avg_without_overlaps,
        request_acceptance_rate=pct(accepted, len(requests)),
        accepted_requests=accepted,
        total_requests=len(requests),
        message_with_request_rate=pct(with_message, len(requests)),
        requests_with_message=with_message,
        standout_conversion_rate=pct(standouts_converted, total_standouts),
        standouts_converted=standouts_converted,
        total_standouts=total_standouts,
        rejection_by_gender=rejections,
        notification_delivery_rate=pct(delivered, len(notifications)),
        notifications_delivered=delivered,
        total_notifications=len(notifications),
    )


def messages_by_hour(messages: Iterable[MessageRow], period: Period) -> list[HourBucket]:
    counts = [0] * 24
    for m in messages:
        if period.includes(m.created_at):
            counts[m.created_at.hour] += 1
    peak = max(max(counts), 1)
    return [HourBucket(hour=h, message_count=c, percentage=c * 100.0 / peak) for h, c in enumerate(counts)]


def messages_by_gender(messages: Iterable[MessageRow], genders: Mapping[str, str | None], period: Period) -> GenderCounts:
    return count_by_gender(genders.get(m.sender_profile_id) for m in messages if period.includes(m.created_at))
