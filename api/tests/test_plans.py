import pytest

from dashmetrics.services.plans import PLAN_RULES, conversation_has_plans, detect_plans, matching_rules


def test_reference_messages():
    assert detect_plans("Let's meet tomorrow at 7pm")
    assert not detect_plans("I love hiking and board games")
    assert not detect_plans("hey whats up")


def test_empty_and_missing_content():
    assert not detect_plans(None)
    assert not detect_plans("")
    assert matching_rules(None) == []


@pytest.mark.parametrize(
    "rule,text",
    [
        ("clock_time", "how about 7:30pm"),
        ("hour_meridiem", "free after 8pm"),
        ("at_time", "around 8 works"),
        ("relative_day", "what are you up to TONIGHT"),
        ("lets_meet", "we should hang out sometime"),
        ("grab_food", "want to grab coffee?"),
        ("meet_up", "meeting at the park?"),
        ("availability", "are you free saturday"),
        ("what_time", "what time should we go"),
        ("when_question", "when can we do this"),
        ("where_meet", "where should we meet"),
        ("date_mention", "this is our first date"),
        ("location", "come over and cook"),
        ("see_you", "see you on friday"),
        ("venue_time", "drinks this thursday"),
    ],
)
def test_each_rule_matches_its_phrasing(rule, text):
    assert rule in matching_rules(text)


def test_every_rule_is_covered():
    assert len({r.name for r in PLAN_RULES}) == len(PLAN_RULES) == 15


def test_hour_needs_word_boundary_after_meridiem():
    assert "hour_meridiem" in matching_rules("7 pm")
    assert "hour_meridiem" in matching_rules("7PM")
    assert matching_rules("7pmx") == []
    assert not detect_plans("room 8")


def test_curly_apostrophe_is_normalized():
    assert "lets_meet" in matching_rules("Let’s meet")


def test_rules_are_order_independent_and_deterministic():
    text = "Let's grab drinks tomorrow at 9pm"
    assert matching_rules(text) == matching_rules(text)
    assert matching_rules(text, reversed(PLAN_RULES)) == list(reversed(matching_rules(text)))


def test_conversation_flag_is_any_message():
    assert conversation_has_plans(["hi", None, "see you at 8"])
    assert not conversation_has_plans(["hi", "how was your week"])
    assert not conversation_has_plans([])
