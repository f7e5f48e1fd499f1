"""LUMI - festival concierge chat with a keyword fallback."""

__version__ = "1.0.0"
