"""
Response Router

Decides per message between the live Gemini session and the keyword
responder. respond() always resolves to a string: remote failures are turned
into keyword matches, never raised.

Usage:
    from lumi.chat.router import send_message_to_gemini

    reply = await send_message_to_gemini("How much are tickets?")
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Optional, Union

from lumi.core.config import Config, get_config
from lumi.core.constants import DEFAULT_MOCK_LATENCY, EMPTY_REPLY_PLACEHOLDER
from lumi.core.llm import GeminiChatSession
from lumi.core.logging import setup_logging
from lumi.core.session import SessionHandle

from .responder import KeywordResponder

logger = logging.getLogger(__name__)


# =============================================================================
# Live Call Result
# =============================================================================

@dataclass(frozen=True)
class LiveReply:
    """The remote model answered; text may be empty."""
    text: str


@dataclass(frozen=True)
class LiveFallback:
    """The remote call failed; use the keyword responder."""
    reason: str


LiveResult = Union[LiveReply, LiveFallback]


async def ask_live(session: GeminiChatSession, message: str) -> LiveResult:
    """Send a message to the live session, reporting failure as a value."""
    try:
        text = await session.send(message)
    except Exception as e:
        logger.error(f"[Router] Gemini error: {e!r}")
        return LiveFallback(reason=str(e) or type(e).__name__)

    if text is not None and not isinstance(text, str):
        logger.error(f"[Router] Gemini returned {type(text).__name__}, expected text")
        return LiveFallback(reason="non-text reply")

    return LiveReply(text=text or "")


# =============================================================================
# Router
# =============================================================================

class ResponseRouter:
    """Chooses between live and demo replies."""

    def __init__(
        self,
        sessions: SessionHandle,
        responder: Optional[KeywordResponder] = None,
        mock_latency: float = DEFAULT_MOCK_LATENCY,
    ):
        """
        Args:
            sessions: Handle owning the live chat session
            responder: Keyword responder for demo mode and fallbacks
            mock_latency: Seconds to wait before a demo reply (0 disables)
        """
        self.sessions = sessions
        self.responder = responder or KeywordResponder()
        self.mock_latency = max(0.0, mock_latency)

    async def _demo_reply(self, message: str) -> str:
        if self.mock_latency:
            await asyncio.sleep(self.mock_latency)
        return self.responder.match(message)

    async def respond(self, message: str) -> str:
        """Reply to a single chat message."""
        if not self.sessions.has_credential:
            logger.info("[Router] Demo mode: simulating AI response")
            return await self._demo_reply(message)

        session = self.sessions.get()
        if session is None:
            logger.info("[Router] Chat session unavailable, using demo reply")
            return await self._demo_reply(message)

        result = await ask_live(session, message)

        if isinstance(result, LiveFallback):
            return self.responder.match(message)
        return result.text or EMPTY_REPLY_PLACEHOLDER

    @classmethod
    def from_config(cls, config: Config) -> "ResponseRouter":
        return cls(
            SessionHandle.from_config(config),
            mock_latency=config.assistant.mock_latency_seconds,
        )


# =============================================================================
# Process-wide Router
# =============================================================================

_router: Optional[ResponseRouter] = None
_router_lock = threading.Lock()


def get_router() -> ResponseRouter:
    """Get the process-wide router, built from configuration on first call."""
    global _router

    if _router is None:
        with _router_lock:
            if _router is None:
                config = get_config()
                setup_logging(config.system.log_level, config.system.log_file)
                _router = ResponseRouter.from_config(config)
                mode = "live" if config.gemini.has_credential else "demo"
                logger.info(f"[Router] Initialized in {mode} mode")

    return _router


def reset_router():
    """Discard the process-wide router (next call rebuilds it)."""
    global _router
    with _router_lock:
        _router = None


def initialize_chat() -> Optional[GeminiChatSession]:
    """Return the process-wide chat session, or None in demo mode."""
    return get_router().sessions.get()


async def send_message_to_gemini(message: str) -> str:
    """Reply to a chat message using Gemini when available."""
    return await get_router().respond(message)
