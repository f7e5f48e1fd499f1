"""
LUMI Gemini Client

Async client for the Gemini generateContent REST API, plus the chat session
object that carries the conversation turns between calls.

Usage:
    from lumi.core.llm import GeminiClient, GeminiChatSession

    client = GeminiClient(api_key="...", model="gemini-2.5-flash")
    chat = GeminiChatSession(client, system_instruction="You are LUMI.")
    reply = await chat.send("Hello!")
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from .constants import DEFAULT_GEMINI_BASE_URL, DEFAULT_GEMINI_MODEL, DEFAULT_LLM_TIMEOUT
from .exceptions import MalformedResponseError

logger = logging.getLogger(__name__)


# =============================================================================
# Payload Helpers
# =============================================================================

def make_turn(role: str, text: str) -> Dict[str, Any]:
    """Build a single Gemini content entry."""
    return {"role": role, "parts": [{"text": text}]}


def extract_text(data: Any) -> str:
    """Pull the reply text out of a generateContent response.

    Returns an empty string when the model produced no candidates or no text
    parts (blocked prompts, empty completions).

    Raises:
        MalformedResponseError: If the payload does not have the expected shape
    """
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Expected JSON object, got {type(data).__name__}")

    candidates = data.get("candidates")
    if candidates is None:
        return ""
    if not isinstance(candidates, list):
        raise MalformedResponseError("'candidates' is not a list")
    if not candidates:
        return ""

    first = candidates[0]
    if not isinstance(first, dict):
        raise MalformedResponseError("Candidate is not an object")

    content = first.get("content") or {}
    parts = content.get("parts") if isinstance(content, dict) else None
    if parts is None:
        return ""
    if not isinstance(parts, list):
        raise MalformedResponseError("'parts' is not a list")

    texts = []
    for part in parts:
        if isinstance(part, dict) and isinstance(part.get("text"), str):
            # Skip thought summaries, keep only the answer
            if part.get("thought"):
                continue
            texts.append(part["text"])
    return "".join(texts)


# =============================================================================
# Gemini Client
# =============================================================================

class GeminiClient:
    """Async client for the Gemini REST API."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_GEMINI_MODEL,
        base_url: str = DEFAULT_GEMINI_BASE_URL,
        temperature: float = 1.0,
        max_output_tokens: int = 256,
        timeout: float = DEFAULT_LLM_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the Gemini client.

        Args:
            api_key: Gemini API key
            model: Model identifier
            base_url: Base URL of the REST API
            temperature: Sampling temperature
            max_output_tokens: Maximum tokens to generate
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests pass a MockTransport)

        Raises:
            ValueError: If the API key or model is empty
        """
        if not api_key or not api_key.strip():
            raise ValueError("Gemini API key is required")
        if not model or not model.strip():
            raise ValueError("Gemini model name is required")

        self.api_key = api_key.strip()
        self.model = model.strip()
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.timeout = timeout
        self._transport = transport

        self._client: Optional[httpx.AsyncClient] = None
        self._client_loop: Optional[asyncio.AbstractEventLoop] = None

    def __repr__(self) -> str:
        return f"GeminiClient(model={self.model!r}, base_url={self.base_url!r})"

    @property
    def model_url(self) -> str:
        return f"{self.base_url}/models/{self.model}"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client for the running event loop.

        Pooled connections belong to the loop that opened them, so a client
        built under an earlier (now closed) loop is replaced, not reused.
        """
        loop = asyncio.get_running_loop()
        if self._client is not None and self._client_loop is not loop:
            logger.debug("[LLM] Event loop changed, rebuilding HTTP client")
            self._client = None

        if self._client is None or self._client.is_closed:
            self._client_loop = loop
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self.api_key,
                },
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            # A client from a finished loop cannot be closed from this one
            if self._client_loop is asyncio.get_running_loop():
                await self._client.aclose()
        self._client = None
        self._client_loop = None

    def build_payload(
        self,
        contents: List[Dict[str, Any]],
        system_instruction: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Build a generateContent request body."""
        payload: Dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        return payload

    async def generate(
        self,
        contents: List[Dict[str, Any]],
        system_instruction: Optional[str] = None,
    ) -> str:
        """Generate a reply for the given conversation.

        Args:
            contents: Conversation turns, oldest first
            system_instruction: Optional persona prompt

        Returns:
            Reply text, possibly empty

        Raises:
            httpx.HTTPStatusError: On non-2xx responses
            httpx.RequestError: On transport failures and timeouts
            MalformedResponseError: If the body is not a valid response
        """
        client = await self._get_client()
        payload = self.build_payload(contents, system_instruction)

        try:
            response = await client.post(f"{self.model_url}:generateContent", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"[LLM] API error {e.response.status_code}: {e.response.text[:200]}")
            raise
        except httpx.RequestError as e:
            logger.error(f"[LLM] Request failed to {self.base_url}: {e}")
            raise

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Response is not JSON: {e}") from e

        return extract_text(data)

    async def health_check(self) -> bool:
        """Check if the configured model is reachable.

        Returns:
            True if API is reachable, False otherwise
        """
        try:
            client = await self._get_client()
            response = await client.get(self.model_url)
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"[LLM] Health check failed: {e}")
            return False


# =============================================================================
# Chat Session
# =============================================================================

class GeminiChatSession:
    """A conversation with a fixed persona.

    Turns are appended only after the model answers, so a failed call leaves
    the history unchanged.
    """

    def __init__(
        self,
        client: GeminiClient,
        system_instruction: Optional[str] = None,
        max_history_turns: Optional[int] = None,
    ):
        """
        Args:
            client: Gemini client used for every request
            system_instruction: Persona prompt sent with each request
            max_history_turns: Exchanges (user + model) kept; None or 0 keeps all
        """
        self.client = client
        self.system_instruction = system_instruction
        self.max_history_turns = max_history_turns
        self._history: List[Dict[str, Any]] = []

    @property
    def model(self) -> str:
        return self.client.model

    @property
    def history(self) -> List[Dict[str, Any]]:
        """Copy of the conversation so far."""
        return list(self._history)

    async def send(self, message: str) -> str:
        """Send a user message and return the model's reply text."""
        user_turn = make_turn("user", message)
        contents = self._history + [user_turn]

        text = await self.client.generate(contents, self.system_instruction)

        if text:
            self._history.extend([user_turn, make_turn("model", text)])
            if self.max_history_turns and self.max_history_turns > 0:
                # Drop whole exchanges so the history still opens with a user turn
                self._history = self._history[-2 * self.max_history_turns:]
        return text

    async def close(self):
        await self.client.close()
