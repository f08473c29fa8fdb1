# Area: Shared
"""
scrim_manager._config — Configuration
=====================================

Configuration defaults, loading and validation. Values come from an
optional JSON file, then from environment variables (a ``.env`` file
in the working directory is loaded first).
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

logger = logging.getLogger("scrim_manager")

DEFAULTS: Dict[str, Any] = {
    "db_path": "scrims.db",
    "log_file": "scrim_manager.log",
    "log_level": "INFO",
    "champion_cache_seconds": 3600,
    "champion_locale": "ko_KR",
    "max_transaction_attempts": 5,
    "admin_emails": [],
}

# Environment variable -> config key
ENV_MAPPINGS = {
    "SCRIM_DB_PATH": "db_path",
    "SCRIM_LOG_FILE": "log_file",
    "SCRIM_LOG_LEVEL": "log_level",
    "CHAMPION_CACHE_SECONDS": "champion_cache_seconds",
    "CHAMPION_LOCALE": "champion_locale",
    "MAX_TRANSACTION_ATTEMPTS": "max_transaction_attempts",
    "SCRIM_ADMIN_EMAILS": "admin_emails",
}

INT_KEYS = {"champion_cache_seconds", "max_transaction_attempts"}

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def load_config(config_path: Optional[str] = None, use_dotenv: bool = True) -> Dict[str, Any]:
    """
    Load config from file and environment.

    Args:
        config_path: Optional JSON config file
        use_dotenv: Load ``.env`` into the environment first

    Returns:
        Config dict with defaults filled in

    Raises:
        ValueError: If a numeric environment value is not an integer
    """
    if use_dotenv:
        load_dotenv()

    config: Dict[str, Any] = copy.deepcopy(DEFAULTS)

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config.update(json.load(f))
        else:
            logger.warning(f"Config file not found: {config_path}")

    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            value: Any = os.environ[env_key]
            if config_key in INT_KEYS:
                try:
                    value = int(value)
                except ValueError:
                    raise ValueError(f"{env_key} must be an integer, got {value!r}") from None
            elif config_key == "admin_emails":
                value = [e.strip() for e in value.split(",") if e.strip()]
            config[config_key] = value

    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration dict

    Raises:
        ValueError: If keys are missing or hold invalid values
    """
    missing = [k for k in DEFAULTS if k not in config]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    errors = []
    if not config["db_path"]:
        errors.append("db_path must not be empty")
    if str(config["log_level"]).upper() not in LOG_LEVELS:
        errors.append(f"log_level must be one of {sorted(LOG_LEVELS)}")
    for key in INT_KEYS:
        value = config[key]
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            errors.append(f"{key} must be a positive integer")
    if not isinstance(config["admin_emails"], list):
        errors.append("admin_emails must be a list")
    if errors:
        raise ValueError(f"Invalid config: {'; '.join(errors)}")


def log_level(config: Dict[str, Any]) -> int:
    return getattr(logging, str(config["log_level"]).upper())
