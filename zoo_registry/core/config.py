"""
Centralized configuration module for application-wide settings.

Values come from environment variables; a local .env file is honoured
through python-dotenv when present. Tests and embedding code can build
a Settings instance directly instead.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

BACKEND_MEMORY = "memory"
BACKEND_SQL = "sql"
SUPPORTED_BACKENDS = (BACKEND_MEMORY, BACKEND_SQL)


def _env_flag(name: str, default: str = "false") -> bool:
    """Truthy values: "true", "1", "yes" (case-insensitive)."""
    return os.getenv(name, default).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///:memory:"
    repository_backend: str = BACKEND_MEMORY
    log_level: str = "INFO"
    log_json: bool = False
    log_to_file: bool = False
    seed_demo_data: bool = False

    def __post_init__(self):
        if self.repository_backend not in SUPPORTED_BACKENDS:
            raise ValueError(
                f"Unsupported repository backend '{self.repository_backend}'. "
                f"Use one of: {', '.join(SUPPORTED_BACKENDS)}"
            )


def get_settings(env_file: Optional[str] = None) -> Settings:
    """
    Build Settings from the environment.

    Environment Variables:
        DATABASE_URL: SQLAlchemy URL for the sql backend
            Default: 'sqlite:///:memory:'
        ZOO_REPOSITORY_BACKEND: 'memory' or 'sql' (default 'memory')
        LOG_LEVEL: logging level name (default 'INFO')
        LOG_JSON: emit JSON log lines (default false)
        LOG_TO_FILE: also write rotating log files (default false)
        ZOO_SEED_DEMO_DATA: populate the demo fixture on startup (default false)
    """
    # Variables already present in the environment win over the .env file
    load_dotenv(env_file, override=False)

    settings = Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///:memory:"),
        repository_backend=os.getenv("ZOO_REPOSITORY_BACKEND", BACKEND_MEMORY)
        .strip()
        .lower(),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        log_json=_env_flag("LOG_JSON"),
        log_to_file=_env_flag("LOG_TO_FILE"),
        seed_demo_data=_env_flag("ZOO_SEED_DEMO_DATA"),
    )
    return settings


def log_settings(settings: Settings) -> None:
    """Log the active configuration. Should be called during startup."""
    logger.info(
        "Configuration loaded",
        extra={
            "context": {
                "repository_backend": settings.repository_backend,
                "log_level": settings.log_level,
                "seed_demo_data": settings.seed_demo_data,
            }
        },
    )
