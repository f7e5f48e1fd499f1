"""Keyword responder used in demo mode and when the live model fails."""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple


@dataclass(frozen=True)
class CannedRule:
    """A canned response triggered by any of its keywords."""
    keywords: Tuple[str, ...]
    response: str

    def __post_init__(self):
        if not self.response:
            raise ValueError("Canned response must be non-empty")

    def matches(self, message_lower: str) -> bool:
        return any(kw in message_lower for kw in self.keywords)


# Checked in order, first match wins
FESTIVAL_RULES: Tuple[CannedRule, ...] = (
    CannedRule(
        keywords=("ticket", "price", "cost", "buy"),
        response=(
            "Tickets are flying fast! 🎫 Day Pass: $149, Weekend: $349, Astral VIP: $899. "
            "Secure your spot in the void now."
        ),
    ),
    CannedRule(
        keywords=("lineup", "artist", "who", "playing", "band"),
        response=(
            "The sonic architects include Neon Void, Data Mosh, and Ether Real. 🎹 "
            "Prepare for audio deconstruction."
        ),
    ),
    CannedRule(
        keywords=("where", "location", "place", "city"),
        response=(
            "We are manifesting in the Neon District, Tokyo. 🗼 "
            "Follow the signal to the coordinates provided on your ticket."
        ),
    ),
    CannedRule(
        keywords=("time", "when", "date", "schedule"),
        response="The transmission begins Oct 24-26, 2025. 📅 Don't be late for the future.",
    ),
    CannedRule(
        keywords=("hello", "hi", "hey", "start"),
        response="System Online. ⚡️ I am LUMI. How can I guide your experience?",
    ),
)

INTERFERENCE_RESPONSE = (
    "I'm receiving interference... 📡 Ask me about Tickets, Lineup, or the Experience."
)


class KeywordResponder:
    """Maps a message to a canned response by keyword containment."""

    def __init__(
        self,
        rules: Sequence[CannedRule] = FESTIVAL_RULES,
        default: str = INTERFERENCE_RESPONSE,
    ):
        if not default:
            raise ValueError("Default response must be non-empty")
        self.rules = tuple(rules)
        self.default = default

    def match(self, message: Optional[str]) -> str:
        """Return the response of the first rule with a keyword in the message."""
        message_lower = message.lower() if isinstance(message, str) else ""

        for rule in self.rules:
            if rule.matches(message_lower):
                return rule.response
        return self.default


_default_responder = KeywordResponder()


def match(message: Optional[str]) -> str:
    """Match against the festival rules."""
    return _default_responder.match(message)
