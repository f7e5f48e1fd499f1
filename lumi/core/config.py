"""
LUMI Configuration Loader

Loads configuration from:
1. Environment variables (.env)
2. config.yml (YAML file)
3. Default values

Environment variables take precedence over YAML values.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .constants import (
    DEFAULT_GEMINI_BASE_URL,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_LLM_TIMEOUT,
    DEFAULT_MAX_HISTORY_TURNS,
    DEFAULT_MOCK_LATENCY,
)
from .prompts import LUMI_SYSTEM_INSTRUCTION


# Load .env file
load_dotenv()

logger = logging.getLogger(__name__)

ENV_PREFIX = "LUMI_"

# Plain variables accepted as the Gemini credential, in order of preference
CREDENTIAL_ENV_VARS = ("API_KEY", "GEMINI_API_KEY")


# =============================================================================
# Pydantic Configuration Models
# =============================================================================

class SystemConfig(BaseModel):
    """System-level configuration."""
    log_level: str = "INFO"
    log_file: Optional[Path] = None


class GeminiConfig(BaseModel):
    """Remote model configuration."""
    api_key: str = ""
    model_name: str = DEFAULT_GEMINI_MODEL
    base_url: str = DEFAULT_GEMINI_BASE_URL
    temperature: float = 1.0
    max_output_tokens: int = 256
    timeout: float = DEFAULT_LLM_TIMEOUT

    @property
    def has_credential(self) -> bool:
        """Whether live mode is possible."""
        return bool(self.api_key and self.api_key.strip())


class AssistantConfig(BaseModel):
    """Assistant persona and demo mode configuration."""
    system_instruction: str = LUMI_SYSTEM_INSTRUCTION
    mock_latency_seconds: float = DEFAULT_MOCK_LATENCY
    max_history_turns: int = DEFAULT_MAX_HISTORY_TURNS


class Config(BaseModel):
    """Main configuration container."""
    system: SystemConfig = Field(default_factory=SystemConfig)
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    assistant: AssistantConfig = Field(default_factory=AssistantConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def find_config_file() -> Optional[Path]:
    """Find the config.yml file, searching up the directory tree."""
    current = Path(__file__).parent

    # Search up to 5 levels
    for _ in range(5):
        config_path = current / "config.yml"
        if config_path.exists():
            return config_path
        current = current.parent

    cwd_config = Path.cwd() / "config.yml"
    if cwd_config.exists():
        return cwd_config

    return None


def load_yaml_config(config_path: Path) -> dict:
    """Load configuration from YAML file."""
    try:
        with open(config_path, "r") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        print(f"Warning: Could not load config from {config_path}: {e}")
        return {}


def apply_env_overrides(config_dict: dict) -> dict:
    """Apply environment variable overrides to config dictionary.

    Environment variables are mapped using LUMI_ prefix and double underscores
    for nesting. For example:
    - LUMI_SYSTEM__LOG_LEVEL=DEBUG -> config['system']['log_level'] = 'DEBUG'
    - LUMI_GEMINI__MODEL_NAME=... -> config['gemini']['model_name'] = ...
    """
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue

        config_key = key[len(ENV_PREFIX):].lower()
        parts = config_key.split("__")

        if len(parts) != 2:
            continue

        section, setting = parts
        if not isinstance(config_dict.get(section), dict):
            config_dict[section] = {}
        # Credentials stay strings even when they look numeric
        if setting == "api_key":
            config_dict[section][setting] = value
        else:
            config_dict[section][setting] = _parse_env_value(value)

    return config_dict


def apply_credential_fallback(config_dict: dict) -> dict:
    """Fill gemini.api_key from API_KEY / GEMINI_API_KEY when not set."""
    gemini = config_dict.get("gemini")
    if not isinstance(gemini, dict):
        gemini = {}
        config_dict["gemini"] = gemini

    if gemini.get("api_key"):
        return config_dict

    for env_var in CREDENTIAL_ENV_VARS:
        value = os.getenv(env_var)
        if value:
            gemini["api_key"] = value
            break

    return config_dict


def _parse_env_value(value: str):
    """Parse environment variable value to appropriate type."""
    # Boolean
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    # Integer
    try:
        return int(value)
    except ValueError:
        pass

    # Float
    try:
        return float(value)
    except ValueError:
        pass

    # String
    return value


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Explicit YAML path (searched for when omitted)

    Returns:
        Config: Validated configuration object
    """
    if config_path is None:
        config_path = find_config_file()

    config_dict = load_yaml_config(config_path) if config_path else {}
    config_dict = drop_invalid_sections(config_dict)

    config_dict = apply_env_overrides(config_dict)
    config_dict = apply_credential_fallback(config_dict)

    try:
        return Config(**config_dict)
    except ValidationError as e:
        logger.warning(f"Invalid configuration, using defaults: {e}")

    # Keep the credential so an unrelated typo does not switch off live mode
    api_key = config_dict.get("gemini", {}).get("api_key")
    if not isinstance(api_key, str):
        api_key = ""
    return Config(gemini=GeminiConfig(api_key=api_key))


def drop_invalid_sections(config_dict) -> dict:
    """Remove sections that are not mappings (e.g. a key left as `assistant:`)."""
    if not isinstance(config_dict, dict):
        logger.warning("Config file is not a mapping, ignoring it")
        return {}

    cleaned = {}
    for section, values in config_dict.items():
        if isinstance(values, dict):
            cleaned[section] = values
        elif values is not None:
            logger.warning(f"Ignoring config section '{section}': expected a mapping")
    return cleaned


# =============================================================================
# Global Configuration Instance
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.

    The credential is read once here; use reload_config() to force a reload.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """Force reload of configuration from files.

    Returns:
        Config: Newly loaded configuration
    """
    global _config
    _config = load_config()
    return _config
