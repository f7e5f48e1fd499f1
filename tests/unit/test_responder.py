"""Unit tests for the keyword responder."""
from dataclasses import FrozenInstanceError

import pytest

from lumi.chat.responder import (
    FESTIVAL_RULES,
    INTERFERENCE_RESPONSE,
    CannedRule,
    KeywordResponder,
    match,
)

TICKETS, LINEUP, LOCATION, DATES, GREETING = (rule.response for rule in FESTIVAL_RULES)


@pytest.mark.unit
class TestFestivalRules:
    """Test the built-in festival responses."""

    @pytest.mark.parametrize("message,expected", [
        ("How much does a ticket cost?", TICKETS),
        ("I want to BUY a pass", TICKETS),
        ("Show me the lineup", LINEUP),
        ("Which band headlines?", LINEUP),
        ("What city is it in?", LOCATION),
        ("Festival location please", LOCATION),
        ("What's the schedule?", DATES),
        ("Which date does it open?", DATES),
        ("Hello there", GREETING),
        ("hey", GREETING),
    ])
    def test_single_rule_match(self, message, expected):
        """Test that a keyword from one rule returns that rule's response."""
        assert match(message) == expected

    def test_ticket_response_text(self):
        assert match("ticket price?") == (
            "Tickets are flying fast! 🎫 Day Pass: $149, Weekend: $349, Astral VIP: $899. "
            "Secure your spot in the void now."
        )

    def test_matching_is_case_insensitive(self):
        assert match("LINEUP?") == LINEUP

    def test_earlier_rule_wins(self):
        """Test that tickets (rule 1) beat greetings (rule 5)."""
        assert match("hello, ticket please") == TICKETS

    def test_earlier_rule_wins_regardless_of_word_order(self):
        assert match("where is the band playing") == LINEUP

    def test_substring_containment(self):
        """Test that keywords match inside longer words ('hi' in 'this')."""
        assert match("this") == GREETING

    @pytest.mark.parametrize("message", [
        "",
        "zzz",
        "¿Qué?",
        "12345",
    ])
    def test_no_match_returns_default(self, message):
        assert match(message) == INTERFERENCE_RESPONSE

    def test_non_string_input_returns_default(self):
        assert match(None) == INTERFERENCE_RESPONSE

    def test_long_message(self):
        assert match("x" * 10000 + " lineup") == LINEUP

    def test_rules_are_immutable(self):
        with pytest.raises(FrozenInstanceError):
            FESTIVAL_RULES[0].response = "changed"


@pytest.mark.unit
class TestKeywordResponder:
    """Test responders built with custom rules."""

    def test_custom_rules_and_default(self):
        responder = KeywordResponder(
            rules=[
                CannedRule(keywords=("hello",), response="greeting"),
                CannedRule(keywords=("ticket",), response="tickets"),
            ],
            default="nothing",
        )

        assert responder.match("hello, ticket?") == "greeting"
        assert responder.match("ticket") == "tickets"
        assert responder.match("bye") == "nothing"

    def test_empty_rule_list_always_defaults(self):
        responder = KeywordResponder(rules=[], default="fallback")
        assert responder.match("ticket") == "fallback"

    def test_empty_default_rejected(self):
        with pytest.raises(ValueError):
            KeywordResponder(default="")

    def test_empty_rule_response_rejected(self):
        with pytest.raises(ValueError):
            CannedRule(keywords=("x",), response="")

    def test_responses_are_never_empty(self):
        responder = KeywordResponder()
        for message in ["", "ticket", "nothing here", "when", "hi"]:
            assert responder.match(message)
