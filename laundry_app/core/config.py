"""Environment-driven configuration objects for the web API."""
from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from laundry_app.core.exceptions import ConfigurationException

BACKEND_SUPABASE = "supabase"
BACKEND_MEMORY = "memory"


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass(slots=True, frozen=True)
class SupabaseConfig:
    url: str
    anon_key: str
    timeout: float = 10.0

    @property
    def rest_url(self) -> str:
        return f"{self.url.rstrip('/')}/rest/v1"

    @property
    def auth_url(self) -> str:
        return f"{self.url.rstrip('/')}/auth/v1"


@dataclass(slots=True, frozen=True)
class Settings:
    backend: str
    supabase: SupabaseConfig | None
    redis_url: str | None
    environment: str
    log_level: str
    port: int
    webapp_url: str | None
    cors_origins: list[str] = field(default_factory=list)
    sentry_dsn: str | None = None

    @property
    def is_dev(self) -> bool:
        return self.environment in ("development", "dev", "local", "test")


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    backend = os.getenv("BACKEND", BACKEND_SUPABASE).strip().lower()
    if backend not in (BACKEND_SUPABASE, BACKEND_MEMORY):
        raise ConfigurationException(f"Unknown BACKEND: {backend}")

    supabase: SupabaseConfig | None = None
    if backend == BACKEND_SUPABASE:
        url = os.getenv("SUPABASE_URL", "").strip()
        anon_key = os.getenv("SUPABASE_ANON_KEY", "").strip()
        if not url or not anon_key:
            raise ConfigurationException(
                "SUPABASE_URL and SUPABASE_ANON_KEY must be set (or use BACKEND=memory)"
            )
        supabase = SupabaseConfig(
            url=url,
            anon_key=anon_key,
            timeout=float(os.getenv("BACKEND_TIMEOUT", "10")),
        )

    return Settings(
        backend=backend,
        supabase=supabase,
        redis_url=os.getenv("REDIS_URL") or None,
        environment=os.getenv("ENVIRONMENT", "production").strip().lower(),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        port=int(os.getenv("PORT", "8000")),
        webapp_url=os.getenv("WEBAPP_URL") or None,
        cors_origins=_split_csv(os.getenv("CORS_ALLOWED_ORIGINS")),
        sentry_dsn=os.getenv("SENTRY_DSN") or None,
    )
