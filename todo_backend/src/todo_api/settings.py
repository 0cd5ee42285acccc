from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'mongo'
    - MONGO_URL: MongoDB connection string. Default 'mongodb://localhost:27017'
    - MONGO_DB: database name. Default 'todo_service'
    - JWT_SECRET: shared secret used to sign and verify tokens
    - BCRYPT_ROUNDS: bcrypt cost factor (4..31). Default 5
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: log level for the service loggers. Default 'INFO'
    """

    persistence_backend: str = "memory"
    mongo_url: str = "mongodb://localhost:27017"
    mongo_db: str = "todo_service"
    jwt_secret: str = "dev-secret-change-me"
    bcrypt_rounds: int = 5
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int, low: int, high: int) -> int:
    try:
        n = int(value.strip())
    except ValueError:
        return default
    return min(max(n, low), high)


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "mongo"}:
        # Fallback to memory if unsupported
        backend = "memory"

    return Settings(
        persistence_backend=backend,
        mongo_url=_get_env("MONGO_URL", "mongodb://localhost:27017").strip(),
        mongo_db=_get_env("MONGO_DB", "todo_service").strip(),
        jwt_secret=_get_env("JWT_SECRET", "dev-secret-change-me"),
        bcrypt_rounds=_parse_int(_get_env("BCRYPT_ROUNDS", "5"), 5, 4, 31),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
