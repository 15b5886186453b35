from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "https://event-calendar-frontend.onrender.com",
]


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - DATABASE_URL: SQLite location, 'sqlite:///' prefix optional. Default 'sqlite:///./data/events.db'
    - DATABASE_USERNAME / DATABASE_PASSWORD: credentials for server databases (SQLite ignores them)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins
    - HOST / PORT: listen address for the bundled uvicorn runner
    - LOG_LEVEL: root logger level name
    - LOG_FILE: optional log file path; console only when unset
    """

    persistence_backend: str
    database_url: str
    database_username: Optional[str]
    database_password: Optional[str]
    cors_allow_origins: List[str]
    host: str
    port: int
    log_level: str
    log_file: Optional[str]

    @property
    def sqlite_db_path(self) -> str:
        prefix = "sqlite:///"
        if self.database_url.startswith(prefix):
            return self.database_url[len(prefix):]
        return self.database_url


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_port(value: str, default: int = 8080) -> int:
    try:
        port = int(value.strip())
    except ValueError:
        return default
    return port if 0 < port < 65536 else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env as a comma-separated list.

    Credentials are allowed, so a wildcard can never be echoed back; '*' or an
    empty list falls back to the default allow-list.
    """
    origins = [o.strip().rstrip("/") for o in origins_value.split(",") if o.strip()]
    if not origins or "*" in origins:
        return list(DEFAULT_CORS_ORIGINS)
    return origins


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite"}:
        # Fallback to memory if unsupported
        backend = "memory"

    return Settings(
        persistence_backend=backend,
        database_url=_get_env("DATABASE_URL", "sqlite:///./data/events.db").strip(),
        database_username=os.getenv("DATABASE_USERNAME") or None,
        database_password=os.getenv("DATABASE_PASSWORD") or None,
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", ",".join(DEFAULT_CORS_ORIGINS))),
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_port(_get_env("PORT", "8080")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        log_file=os.getenv("LOG_FILE") or None,
    )
