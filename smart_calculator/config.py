"""Configuration for Smart Calculator.

Settings live in <home>/config.json; anything missing falls back to the
defaults below. The API key is never stored there: it is read from the
process environment, optionally populated from a .env file.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .output_helper import OutputConfig, typed_setting


logger = logging.getLogger(__name__)

HOME_ENV_VAR = "SMART_CALCULATOR_HOME"
DEFAULT_HOME = Path.home() / ".smart-calculator"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_API_KEY_ENV = "GEMINI_API_KEY"
# Name used by the original web build's deployment settings
FALLBACK_API_KEY_ENV = "API_KEY"


@dataclass
class CalculatorConfig:
    """Effective calculator settings."""

    home: Path = DEFAULT_HOME
    model: str = DEFAULT_MODEL
    history_file: str = "history.json"
    api_key_env: str = DEFAULT_API_KEY_ENV
    output: OutputConfig = field(default_factory=OutputConfig)

    @property
    def config_path(self) -> Path:
        return self.home / "config.json"

    @property
    def history_path(self) -> Path:
        """Absolute path of the history file."""
        path = Path(self.history_file).expanduser()
        if path.is_absolute():
            return path
        return self.home / path

    def to_dict(self) -> dict:
        return {
            "model": self.model,
            "history_file": self.history_file,
            "api_key_env": self.api_key_env,
            "output": self.output.to_dict(),
        }


def resolve_home(home: Optional[str] = None) -> Path:
    """Pick the data directory: explicit value, environment, then default."""
    if home:
        return Path(home).expanduser().resolve()
    env_home = os.environ.get(HOME_ENV_VAR)
    if env_home:
        return Path(env_home).expanduser().resolve()
    return DEFAULT_HOME


def load_config(home: Optional[str] = None) -> CalculatorConfig:
    """Load configuration from <home>/config.json.

    Args:
        home: Data directory override.

    Returns:
        CalculatorConfig with settings from config.json or defaults.
    """
    home_path = resolve_home(home)
    config = CalculatorConfig(home=home_path)

    if not config.config_path.exists():
        return config

    try:
        with open(config.config_path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", config.config_path, e)
        return config

    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a JSON object", config.config_path)
        return config

    config.model = typed_setting(data, "model", config.model)
    config.history_file = typed_setting(data, "history_file", config.history_file)
    config.api_key_env = typed_setting(data, "api_key_env", config.api_key_env)
    output = data.get("output", {})
    if isinstance(output, dict):
        config.output = OutputConfig.from_dict(output)

    return config


def get_api_key(config: CalculatorConfig, dotenv_path: Optional[str] = None) -> Optional[str]:
    """Read the service credential from the environment.

    A .env file is loaded first without overriding variables that are
    already set.
    """
    load_dotenv(dotenv_path or find_dotenv(usecwd=True), override=False)
    for name in (config.api_key_env, FALLBACK_API_KEY_ENV):
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None


def mask_secret(value: Optional[str]) -> str:
    """Mask a secret for display, keeping the last four characters."""
    if not value:
        return "(not set)"
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * 8 + value[-4:]
