"""
Application configuration.

Settings come from a YAML file (``streamtv_config.yaml`` by default, or the
path in ``STREAMTV_CONFIG``) layered over built-in defaults, with a few
environment variables (loaded from ``.env`` when present) taking priority.
"""
from __future__ import annotations

import copy
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "streamtv_config.yaml"

DEFAULTS: dict[str, Any] = {
    "app": {
        "secret_key": "dev-only-change-me",
        "debug": False,
        "timezone": "America/New_York",
    },
    "database": {
        "path": "streamtv.db",
        "enable_wal": True,
    },
    "logging": {
        "level": "INFO",
        "file": "development.log",
        "max_bytes": 10485760,
        "backup_count": 5,
    },
}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConfigError(ValueError):
    """A configuration value the application cannot run with."""


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: str | os.PathLike | None = None) -> dict[str, Any]:
    """Load configuration from YAML, falling back to defaults.

    An explicitly requested file must exist; the default file is optional.
    """
    load_dotenv()

    explicit = config_path or os.getenv("STREAMTV_CONFIG")
    config_file = Path(explicit) if explicit else DEFAULT_CONFIG_PATH
    if config_file.exists():
        with open(config_file, "r") as f:
            loaded = yaml.safe_load(f) or {}
    elif explicit:
        raise FileNotFoundError(f"Configuration file not found: {config_file}")
    else:
        loaded = {}

    config = _merge(DEFAULTS, loaded)

    if os.getenv("SECRET_KEY"):
        config["app"]["secret_key"] = os.getenv("SECRET_KEY")
    if os.getenv("DATABASE_PATH"):
        config["database"]["path"] = os.getenv("DATABASE_PATH")

    db_path = str(config["database"]["path"] or "").strip()
    # each request opens its own connection, so the database must be a file
    if not db_path or db_path == ":memory:":
        raise ConfigError(
            f"database.path must name a SQLite file, got {db_path!r}; "
            "in-memory databases are not shared between requests"
        )
    config["database"]["path"] = _project_path(db_path)

    log_file = config["logging"].get("file")
    if log_file:
        config["logging"]["file"] = _project_path(str(log_file))
    return config


def _project_path(path: str) -> str:
    """Resolve a relative path against the project root."""
    if os.path.isabs(path):
        return path
    return str(PROJECT_ROOT / path)


def setup_logging(config: dict[str, Any]) -> logging.Logger:
    """Attach file and console handlers to the ``streamtv`` logger."""
    log_config = config.get("logging", {})
    log_level = getattr(logging, str(log_config.get("level", "INFO")).upper())

    logger = logging.getLogger("streamtv")
    logger.setLevel(log_level)
    # create_app may run more than once per process (tests)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    log_file = log_config.get("file")
    if log_file:
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=log_config.get("max_bytes", 10485760),
            backupCount=log_config.get("backup_count", 5),
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    return logger
