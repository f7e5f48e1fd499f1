"""
LUMI Constants

Shared constants used across the codebase.
"""

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# Default timeout for remote model requests (seconds)
DEFAULT_LLM_TIMEOUT = 30.0

# Simulated round trip for demo mode (seconds)
DEFAULT_MOCK_LATENCY = 1.0

# Exchanges kept in a chat session's history
DEFAULT_MAX_HISTORY_TURNS = 20

# Returned when the remote model answers with no text
EMPTY_REPLY_PLACEHOLDER = "Transmission interrupted."
