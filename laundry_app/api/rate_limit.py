"""Shared slowapi limiter for the JSON API."""
from __future__ import annotations

import os
from typing import Any

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

# sign-in/sign-up hit the auth provider, keep them tighter than the default
AUTH_RATE_LIMIT = os.getenv("RATE_LIMIT_AUTH", "10/minute")


def _rate_limit_disabled() -> bool:
    return os.getenv("RATE_LIMIT_DISABLED", "").strip().lower() in {"1", "true", "yes"}


def client_ip(request: Request) -> str:
    """Resolve client IP, honouring proxy headers."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = (request.headers.get("X-Real-IP") or "").strip()
    if real_ip:
        return real_ip

    return get_remote_address(request)


def build_limiter() -> Limiter:
    disabled = _rate_limit_disabled()
    options: dict[str, Any] = {
        "key_func": client_ip,
        "default_limits": [] if disabled else [os.getenv("RATE_LIMIT_DEFAULT", "100/minute")],
        "enabled": not disabled,
    }
    storage = os.getenv("RATE_LIMIT_REDIS_URL") or os.getenv("REDIS_URL")
    if storage:
        options["storage_uri"] = storage
    return Limiter(**options)


limiter = build_limiter()

__all__ = ["AUTH_RATE_LIMIT", "client_ip", "limiter"]
