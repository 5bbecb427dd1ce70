"""
Startup configuration for the clinic backend.

All environment variables are read here, exactly once, into a frozen
``ClinicConfig``.  ``clinic.settings`` derives Django settings from it;
no other module reads ``os.environ`` directly.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv  # type: ignore

INSECURE_SECRET_KEY = "replace-me-with-a-secure-secret-key"

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def _csv(value: str | None, default: str = "") -> list[str]:
    return [item.strip() for item in (value if value is not None else default).split(",") if item.strip()]


@dataclass(frozen=True)
class ClinicConfig:
    """Typed view of the process environment.

    Required in production: ``SECRET_KEY``.  Everything else has a
    development-friendly default.
    """
    env: str = "dev"
    debug: bool = False
    secret_key: str = INSECURE_SECRET_KEY
    # Defaults to ``secret_key`` when empty.
    jwt_signing_key: str = ""
    access_token_lifetime: timedelta = timedelta(days=1)
    refresh_token_lifetime: timedelta = timedelta(days=7)
    allowed_hosts: list[str] = field(default_factory=lambda: ["127.0.0.1", "localhost"])
    cors_allowed_origins: list[str] = field(default_factory=list)
    database_url: str = ""
    db_conn_max_age: int = 120
    redis_url: str = ""
    allow_open_registration: bool = False
    time_zone: str = "America/Sao_Paulo"
    log_level: str = "INFO"

    @property
    def is_prod(self) -> bool:
        return self.env == "prod"

    @property
    def signing_key(self) -> str:
        return self.jwt_signing_key or self.secret_key

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClinicConfig":
        env = os.environ if environ is None else environ
        return cls(
            env=env.get("ENV", "dev"),
            debug=_flag(env.get("DEBUG")),
            secret_key=env.get("SECRET_KEY") or INSECURE_SECRET_KEY,
            jwt_signing_key=env.get("JWT_SECRET", ""),
            access_token_lifetime=timedelta(minutes=int(env.get("JWT_ACCESS_MINUTES", "1440"))),
            refresh_token_lifetime=timedelta(days=int(env.get("JWT_REFRESH_DAYS", "7"))),
            allowed_hosts=_csv(env.get("ALLOWED_HOSTS"), "127.0.0.1,localhost"),
            cors_allowed_origins=_csv(env.get("CORS_ALLOWED_ORIGINS")),
            database_url=env.get("DATABASE_URL", "").strip(),
            db_conn_max_age=int(env.get("DB_CONN_MAX_AGE", "120")),
            redis_url=env.get("REDIS_URL", "").strip(),
            allow_open_registration=_flag(env.get("ALLOW_OPEN_REGISTRATION")),
            time_zone=env.get("TIME_ZONE", "America/Sao_Paulo"),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> "ClinicConfig":
        """Refuse to start production with development defaults."""
        if self.is_prod:
            if self.debug:
                raise RuntimeError("DEBUG must be 0 in prod")
            if "*" in self.allowed_hosts:
                raise RuntimeError("ALLOWED_HOSTS cannot contain * in prod")
            if self.secret_key == INSECURE_SECRET_KEY:
                raise RuntimeError("SECRET_KEY must be set securely in prod")
        return self


def load_config(base_dir: Path | None = None) -> ClinicConfig:
    """Load ``.env`` (if present) and build the validated configuration."""
    if base_dir is not None:
        env_path = base_dir / ".env"
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)
    return ClinicConfig.from_env().validate()
