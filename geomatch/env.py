import os
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv

DEFAULT_DB_PATH = "data/groups.db"
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_env() -> None:
    """Load .env from the working directory if present. Existing variables win."""
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def get_settings() -> Dict[str, Any]:
    """
    Runtime settings from the environment.

    GEOMATCH_DB          group store path (default: data/groups.db)
    GEOMATCH_LOG_LEVEL   DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
    GEOMATCH_LOG_DIR     directory for log files; console only when unset

    Raises:
        ValueError: GEOMATCH_LOG_LEVEL is not one of LOG_LEVELS
    """
    log_level = (os.getenv("GEOMATCH_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(
            f"Invalid GEOMATCH_LOG_LEVEL {log_level!r}, expected one of: {', '.join(LOG_LEVELS)}"
        )

    log_dir = os.getenv("GEOMATCH_LOG_DIR") or None
    return {
        "db_path": Path(os.getenv("GEOMATCH_DB") or DEFAULT_DB_PATH),
        "log_level": log_level,
        "log_dir": Path(log_dir) if log_dir else None,
    }
