"""Adapters for the external backend-as-a-service."""
from __future__ import annotations

from laundry_app.core.config import BACKEND_MEMORY, Settings
from laundry_app.core.exceptions import ConfigurationException

from .protocol import BackendProtocol


def create_backend(settings: Settings) -> BackendProtocol:
    """Build the backend adapter selected by ``settings.backend``."""
    if settings.backend == BACKEND_MEMORY:
        from .memory import InMemoryBackend

        return InMemoryBackend()

    from .supabase import SupabaseBackend

    if settings.supabase is None:
        raise ConfigurationException("Supabase settings are missing for BACKEND=supabase")
    return SupabaseBackend(settings.supabase)


__all__ = ["BackendProtocol", "create_backend"]
