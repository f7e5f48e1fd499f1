"""
LUMI Test Configuration

Shared fixtures and configuration for pytest.
"""

import os
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

CREDENTIAL_VARS = ("API_KEY", "GEMINI_API_KEY")


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: fast tests with no network access"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# =============================================================================
# Environment Fixtures
# =============================================================================

@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable that could switch on live mode."""
    for key in list(os.environ):
        if key.startswith("LUMI_") or key in CREDENTIAL_VARS:
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def no_config_file(monkeypatch):
    """Pretend there is no config.yml anywhere."""
    monkeypatch.setattr("lumi.core.config.find_config_file", lambda: None)


@pytest.fixture(autouse=True)
def reset_globals():
    """Drop cached config and router between tests."""
    import lumi.chat.router as router_module
    import lumi.core.config as config_module

    config_module._config = None
    router_module._router = None
    yield
    config_module._config = None
    router_module._router = None


# =============================================================================
# Mock Fixtures
# =============================================================================

@pytest.fixture
def fake_session():
    """A chat session whose send() is an AsyncMock."""
    session = MagicMock()
    session.model = "gemini-test"
    session.send = AsyncMock(return_value="Hello!")
    return session


@pytest.fixture
def session_factory(fake_session):
    """A factory that always returns fake_session."""
    return MagicMock(return_value=fake_session)
