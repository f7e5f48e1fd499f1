"""
Memoized chat session.

A SessionHandle builds the remote chat session on first use and hands the same
object back afterwards. If construction fails the handle becomes unavailable
and stays that way until reset().
"""

import logging
import threading
from enum import Enum
from typing import Callable, Optional

from .config import Config
from .llm import GeminiChatSession, GeminiClient

logger = logging.getLogger(__name__)


SessionFactory = Callable[[str], GeminiChatSession]


class SessionState(str, Enum):
    """Lifecycle of a SessionHandle."""
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    UNAVAILABLE = "unavailable"


def gemini_session_factory(config: Config) -> SessionFactory:
    """Return a factory building Gemini chat sessions from configuration."""

    def build(api_key: str) -> GeminiChatSession:
        client = GeminiClient(
            api_key=api_key,
            model=config.gemini.model_name,
            base_url=config.gemini.base_url,
            temperature=config.gemini.temperature,
            max_output_tokens=config.gemini.max_output_tokens,
            timeout=config.gemini.timeout,
        )
        return GeminiChatSession(
            client,
            system_instruction=config.assistant.system_instruction,
            max_history_turns=config.assistant.max_history_turns,
        )

    return build


class SessionHandle:
    """Owns at most one remote chat session."""

    def __init__(self, credential: Optional[str], factory: SessionFactory):
        """
        Args:
            credential: API key, or None/empty for demo mode
            factory: Builds a session from the credential
        """
        self._credential = credential.strip() if credential else None
        self._factory = factory
        self._session: Optional[GeminiChatSession] = None
        self._state = SessionState.UNINITIALIZED
        self._lock = threading.Lock()

    @property
    def has_credential(self) -> bool:
        return bool(self._credential)

    @property
    def state(self) -> SessionState:
        return self._state

    def get(self) -> Optional[GeminiChatSession]:
        """Return the session, building it on first use.

        Returns None when there is no credential or construction failed.
        Construction runs at most once, even when called from several threads.
        """
        if not self._credential:
            return None

        if self._state is SessionState.UNINITIALIZED:
            with self._lock:
                if self._state is SessionState.UNINITIALIZED:
                    self._build()

        return self._session if self._state is SessionState.READY else None

    def _build(self):
        try:
            self._session = self._factory(self._credential)
        except Exception as e:
            logger.warning(f"[Session] Failed to initialize chat, falling back to demo mode: {e}")
            self._session = None
            self._state = SessionState.UNAVAILABLE
            return

        self._state = SessionState.READY
        logger.info(f"[Session] Chat session initialized: {getattr(self._session, 'model', 'unknown')}")

    def reset(self):
        """Forget the current session or cached failure."""
        with self._lock:
            self._session = None
            self._state = SessionState.UNINITIALIZED

    @classmethod
    def from_config(cls, config: Config) -> "SessionHandle":
        return cls(config.gemini.api_key, gemini_session_factory(config))
