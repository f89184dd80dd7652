from datetime import datetime, timedelta, timezone

from dashmetrics.rows import (
    ConversationRow,
    MatchCandidateRow,
    MatchRejectionRow,
    MatchRequestRow,
    MatchRow,
    MessageRow,
    NotificationLogRow,
    ProfileBlockRow,
)
from dashmetrics.services.messaging import (
    MessagingSnapshot,
    avg_response_time_hours,
    compute_messaging_stats,
    group_by_conversation,
    has_double_text,
    messages_by_gender,
    messages_by_hour,
)
from dashmetrics.services.period import resolve_period

NOW = datetime(2026, 3, 18, 12, tzinfo=timezone.utc)


def _at(day: int, hour: int = 10) -> datetime:
    return datetime(2026, 3, day, hour, tzinfo=timezone.utc)


def _msg(mid: str, conv: str, sender: str, at: datetime, content: str = "hey", liked: bool = False) -> MessageRow:
    return MessageRow(id=mid, conversation_id=conv, sender_profile_id=sender, content=content, created_at=at, is_liked=liked)


def _snapshot() -> MessagingSnapshot:
    matches = [
        MatchRow(id="m1", profile1_id="pA", profile2_id="pB", created_at=_at(1, 9)),
        MatchRow(id="m2", profile1_id="pC", profile2_id="pD", created_at=_at(5, 8)),
        MatchRow(id="m3", profile1_id="pE", profile2_id="pF", created_at=_at(16, 7), profile1_unmatched_at=_at(17)),
        MatchRow(id="m4", profile1_id="pG", profile2_id="pH", created_at=_at(10)),
    ]
    conversations = [
        ConversationRow(id="c1", match_id="m1", profile1_id="pA", profile2_id="pB", created_at=_at(1, 10), p1_contact_exchanged_at=_at(5)),
        ConversationRow(id="c2", match_id="m2", profile1_id="pC", profile2_id="pD", created_at=_at(5, 9), profile1_unread=True),
        ConversationRow(id="c3", match_id="m3", profile1_id="pE", profile2_id="pF", created_at=_at(16, 8)),
        ConversationRow(id="c4", match_id="m4", profile1_id="pG", profile2_id="pH", created_at=_at(10, 11)),
    ]
    messages = [
        _msg("1", "c1", "pA", _at(1, 12), "want to grab coffee?"),
        _msg("2", "c1", "pB", _at(1, 14), "sure"),
        _msg("3", "c1", "pA", _at(17, 10), "see you soon", liked=True),
        _msg("4", "c2", "pC", _at(5, 10), "hey"),
        _msg("5", "c2", "pC", _at(5, 11), "hello?"),
        _msg("6", "c3", "pE", _at(16, 9), "hi"),
        _msg("7", "c3", "pF", _at(16, 10), "hey"),
    ]
    return MessagingSnapshot(
        messages=messages,
        conversations=conversations,
        matches=matches,
        genders={"pA": "woman", "pB": "man", "pC": "non_binary", "pE": "woman", "pF": "man"},
        blocks=[ProfileBlockRow(profile_id="pE", blocked_profile_id="pF")],
        requests=[
            MatchRequestRow(id="r1", sender_profile_id="pA", receiver_profile_id="pB", status="accepted", created_at=_at(1, 8), message="hi", overlaps=("hiking",)),
            MatchRequestRow(id="r2", sender_profile_id="pC", receiver_profile_id="pD", status="pending", created_at=_at(5, 7)),
        ],
        candidates=[
            MatchCandidateRow(profile_id="pA", candidate_profile_id="pB", is_standout=True, created_at=_at(1, 6)),
            MatchCandidateRow(profile_id="pG", candidate_profile_id="pH", is_standout=True, created_at=_at(9)),
            MatchCandidateRow(profile_id="pC", candidate_profile_id="pD", is_standout=False, created_at=_at(4)),
        ],
        rejections=[MatchRejectionRow(profile_id="pB", created_at=_at(10))],
        notifications=[
            NotificationLogRow(purpose="new_message", status="sent", created_at=_at(1, 12)),
            NotificationLogRow(purpose="new_message", status="failed", created_at=_at(5, 10)),
            NotificationLogRow(purpose="match", status="sent", created_at=_at(5, 8)),
        ],
    )


def test_same_sender_only_conversation_has_zero_response_time():
    threads = group_by_conversation([_msg("1", "c", "p1", _at(1)), _msg("2", "c", "p1", _at(2)), _msg("3", "c", "p1", _at(3))])
    assert avg_response_time_hours(threads) == 0
    assert avg_response_time_hours({}) == 0


def test_response_time_uses_sender_changes_only():
    threads = group_by_conversation(
        [
            _msg("1", "c", "p1", _at(1, 10)),
            _msg("2", "c", "p1", _at(1, 11)),
            _msg("3", "c", "p2", _at(1, 14)),
        ]
    )
    assert avg_response_time_hours(threads) == 3


def test_double_text_detection():
    assert has_double_text([_msg("1", "c", "a", _at(1)), _msg("2", "c", "a", _at(2))])
    assert not has_double_text([_msg("1", "c", "a", _at(1)), _msg("2", "c", "b", _at(2))])
    assert not has_double_text([])


def test_messaging_stats_all_time():
    stats = compute_messaging_stats(_snapshot(), resolve_period("all", now=NOW))
    assert stats.period == "all"
    assert stats.total_messages == 7
    assert stats.messages_today == 0
    assert stats.messages_this_week == 3
    assert stats.active_conversations == 2
    assert round(stats.avg_messages_per_conversation, 4) == round(7 / 3, 4)
    assert stats.matches_with_messages_pct == 75
    assert round(stats.first_message_reply_rate, 4) == round(200 / 3, 4)
    assert round(stats.avg_response_time_hours, 4) == round((2 + 380 + 1) / 3, 4)
    assert stats.liked_messages_count == 1
    assert stats.contact_exchange_count == 1
    assert stats.contact_exchange_rate == 25
    buckets = stats.conversations_by_message_count
    assert (buckets.zero, buckets.one_to_four, buckets.five_plus) == (1, 3, 0)
    assert stats.unmatched_count == 1
    assert stats.unmatch_rate == 25
    assert stats.double_text_conversations == 1
    assert round(stats.avg_time_to_first_message_hours, 4) == round(4 / 3, 4)
    assert stats.unread_conversations == 1
    assert stats.conversations_with_plans == 1
    assert stats.mutual_messaging_count == 2
    assert stats.blocked_conversations == 1


def test_ghosting_counts_only_active_matches_past_cutoff():
    stats = compute_messaging_stats(_snapshot(), resolve_period("all", now=NOW))
    assert stats.ghosted_conversations == 1
    assert stats.ghost_rate == 50


def test_gender_and_request_breakdowns():
    stats = compute_messaging_stats(_snapshot(), resolve_period("all", now=NOW))
    assert stats.first_message_by_gender.women == 2
    assert stats.first_message_by_gender.nonbinary == 1
    assert stats.first_message_by_gender.men == 0
    assert stats.rejection_by_gender.men == 1
    assert stats.total_requests == 2
    assert stats.request_acceptance_rate == 50
    assert stats.requests_with_message == 1
    assert stats.avg_messages_with_overlaps == 3
    assert stats.avg_messages_without_overlaps == 2
    assert stats.total_standouts == 2
    assert stats.standouts_converted == 1
    assert stats.standout_conversion_rate == 50
    assert stats.total_notifications == 2
    assert stats.notification_delivery_rate == 50


def test_bounded_period_scopes_window_metrics():
    stats = compute_messaging_stats(_snapshot(), resolve_period("7", now=NOW))
    assert stats.period == "7"
    assert stats.total_messages == 3
    assert stats.active_conversations == 2
    assert stats.first_message_reply_rate == 100
    assert stats.total_requests == 0
    assert stats.request_acceptance_rate == 0
    assert stats.contact_exchange_count == 0


def test_empty_snapshot_never_divides_by_zero():
    stats = compute_messaging_stats(MessagingSnapshot(), resolve_period("30", now=NOW))
    assert stats.total_messages == 0
    assert stats.avg_messages_per_conversation == 0
    assert stats.ghost_rate == 0
    assert stats.plans_rate == 0


def test_messages_by_hour_relative_to_peak():
    buckets = messages_by_hour(_snapshot().messages, resolve_period("all", now=NOW))
    assert [b.hour for b in buckets] == list(range(24))
    assert buckets[10].message_count == 3
    assert buckets[10].percentage == 100
    assert round(buckets[12].percentage, 4) == round(100 / 3, 4)
    assert buckets[0].percentage == 0
    assert all(b.percentage == 0 for b in messages_by_hour([], resolve_period("all", now=NOW)))


def test_messages_by_gender_unknown_sender_is_other():
    snap = _snapshot()
    counts = messages_by_gender(snap.messages + [_msg("8", "c9", "ghost", NOW - timedelta(hours=1))], snap.genders, resolve_period("all", now=NOW))
    assert counts.women == 3
    assert counts.men == 2
    assert counts.nonbinary == 2
    assert counts.other == 1


def test_contact_exchange_rate_stays_within_window_conversations():
    jan = datetime(2026, 1, 1, 12, tzinfo=timezone.utc)
    conversations = [
        ConversationRow(id="c0", match_id="m0", profile1_id="a0", profile2_id="b0", created_at=jan, p1_contact_exchanged_at=_at(17)),
        ConversationRow(id="c1", match_id="m1", profile1_id="a1", profile2_id="b1", created_at=jan, p2_contact_exchanged_at=_at(17)),
        ConversationRow(id="c2", match_id="m2", profile1_id="a2", profile2_id="b2", created_at=jan),
    ]
    matches = [MatchRow(id=f"m{i}", profile1_id=f"a{i}", profile2_id=f"b{i}", created_at=jan) for i in range(3)]
    old_threads = [_msg("1", "c0", "a0", jan), _msg("2", "c1", "a1", jan), _msg("3", "c2", "a2", _at(17))]
    week = resolve_period("7", now=NOW)

    stats = compute_messaging_stats(MessagingSnapshot(messages=old_threads, conversations=conversations, matches=matches), week)
    assert stats.contact_exchange_count == 0
    assert stats.contact_exchange_rate == 0

    revived = old_threads + [_msg("4", "c0", "b0", _at(16))]
    stats = compute_messaging_stats(MessagingSnapshot(messages=revived, conversations=conversations, matches=matches), week)
    assert stats.contact_exchange_count == 1
    assert stats.contact_exchange_rate == 50


def test_unknown_gender_rejections_and_first_messages_are_other():
    snapshot = MessagingSnapshot(
        messages=[_msg("1", "c1", "ghost", _at(17)), _msg("2", "c2", "pX", _at(17, 11))],
        conversations=[
            ConversationRow(id="c1", match_id="m1", profile1_id="ghost", profile2_id="pB", created_at=_at(17, 9)),
            ConversationRow(id="c2", match_id="m2", profile1_id="pX", profile2_id="pB", created_at=_at(17, 9)),
        ],
        genders={"pB": "woman", "pX": "prefer_not_to_say", "pY": None},
        rejections=[
            MatchRejectionRow(profile_id="pY", created_at=_at(16)),
            MatchRejectionRow(profile_id="pB", created_at=_at(16)),
        ],
    )
    stats = compute_messaging_stats(snapshot, resolve_period("all", now=NOW))
    assert stats.first_message_by_gender.other == 2
    assert stats.first_message_by_gender.women == 0
    assert stats.rejection_by_gender.other == 1
    assert stats.rejection_by_gender.women == 1
