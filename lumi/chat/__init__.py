"""Chat entry points."""
from .responder import CannedRule, KeywordResponder
from .router import (
    ResponseRouter,
    get_router,
    initialize_chat,
    reset_router,
    send_message_to_gemini,
)

__all__ = [
    "CannedRule",
    "KeywordResponder",
    "ResponseRouter",
    "get_router",
    "initialize_chat",
    "reset_router",
    "send_message_to_gemini",
]
