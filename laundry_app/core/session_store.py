"""Session storage for carts and auth tokens with TTL and per-session lock."""
from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator

import redis

from laundry_app.core.cart import CartLedger

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """Everything one browsing session owns: identity tokens and its cart."""

    session_id: str
    access_token: str | None = None
    refresh_token: str | None = None
    user_id: str | None = None
    email: str | None = None
    cart: CartLedger = field(default_factory=CartLedger)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token and self.user_id)

    def sign_in(
        self,
        user_id: str,
        access_token: str,
        refresh_token: str | None = None,
        email: str | None = None,
    ) -> None:
        self.user_id = user_id
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.email = email

    def forget_identity(self) -> None:
        self.user_id = None
        self.access_token = None
        self.refresh_token = None
        self.email = None

    def sign_out(self) -> None:
        self.forget_identity()
        self.cart.clear()

    def to_dict(self) -> dict[str, Any]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "user_id": self.user_id,
            "email": self.email,
            "cart": self.cart.to_dict(),
        }

    @classmethod
    def from_dict(cls, session_id: str, data: dict[str, Any]) -> SessionContext:
        return cls(
            session_id=session_id,
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
            user_id=data.get("user_id"),
            email=data.get("email"),
            cart=CartLedger.from_dict(data.get("cart")),
        )


def new_session_id() -> str:
    return uuid.uuid4().hex


class SessionStore:
    """Session payloads persisted in Redis, or process memory when Redis is absent."""

    SESSION_EXPIRY_SECONDS = 24 * 60 * 60
    LOCK_TTL_SECONDS = 30
    LOCK_WAIT_SECONDS = 10.0

    def __init__(self, redis_url: str | None = None, client: Any = None):
        self._redis_url = redis_url
        self._client = client if client is not None else self._init_client()
        self._memory: dict[str, dict[str, Any]] = {}
        self._memory_last_access: dict[str, float] = {}
        self._local_locks: dict[str, asyncio.Lock] = {}
        self._local_lock_users: dict[str, int] = {}

    def _init_client(self):
        if not self._redis_url:
            logger.info("REDIS_URL is not set; sessions use in-memory storage")
            return None
        try:
            client = redis.from_url(
                self._redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            client.ping()
        except redis.RedisError as exc:
            logger.warning("Redis session init failed, fallback to in-memory: %s", exc)
            return None
        logger.info("Redis session storage enabled")
        return client

    @property
    def uses_redis(self) -> bool:
        return self._client is not None

    def _switch_to_memory_fallback(self, reason: Exception | str) -> None:
        logger.warning("Redis session fallback to memory mode: %s", reason)
        self._client = None

    @staticmethod
    def _session_key(session_id: str) -> str:
        return f"session:{session_id}"

    @staticmethod
    def _lock_key(session_id: str) -> str:
        return f"session_lock:{session_id}"

    def _cleanup_memory_expired(self) -> None:
        now = time.time()
        expired = [
            session_id
            for session_id, last_access in self._memory_last_access.items()
            if now - last_access > self.SESSION_EXPIRY_SECONDS
        ]
        for session_id in expired:
            self._memory.pop(session_id, None)
            self._memory_last_access.pop(session_id, None)

    def _load_payload(self, session_id: str) -> dict[str, Any]:
        if self._client:
            try:
                raw = self._client.get(self._session_key(session_id))
            except redis.RedisError as exc:
                self._switch_to_memory_fallback(exc)
            else:
                if not raw:
                    return {}
                try:
                    payload = json.loads(raw)
                except ValueError:
                    logger.warning("Dropping unreadable session payload %s", session_id)
                    return {}
                return payload if isinstance(payload, dict) else {}

        self._cleanup_memory_expired()
        payload = self._memory.get(session_id)
        if payload is None:
            return {}
        self._memory_last_access[session_id] = time.time()
        return json.loads(json.dumps(payload))

    def _save_payload(self, session_id: str, payload: dict[str, Any]) -> None:
        payload["updated_at"] = int(time.time())
        if self._client:
            serialized = json.dumps(payload, ensure_ascii=False)
            try:
                self._client.setex(
                    self._session_key(session_id), self.SESSION_EXPIRY_SECONDS, serialized
                )
                return
            except redis.RedisError as exc:
                self._switch_to_memory_fallback(exc)
        self._memory[session_id] = json.loads(json.dumps(payload))
        self._memory_last_access[session_id] = time.time()

    @asynccontextmanager
    async def _local_lock(self, session_id: str) -> AsyncIterator[None]:
        lock = self._local_locks.setdefault(session_id, asyncio.Lock())
        self._local_lock_users[session_id] = self._local_lock_users.get(session_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._local_lock_users[session_id] - 1
            if remaining:
                self._local_lock_users[session_id] = remaining
            else:
                self._local_lock_users.pop(session_id, None)
                self._local_locks.pop(session_id, None)

    @asynccontextmanager
    async def _redis_lock(self, session_id: str) -> AsyncIterator[None]:
        if not self._client:
            yield
            return

        lock_key = self._lock_key(session_id)
        token = uuid.uuid4().hex
        deadline = time.monotonic() + self.LOCK_WAIT_SECONDS
        acquired = False

        while time.monotonic() < deadline:
            try:
                acquired = bool(
                    self._client.set(lock_key, token, nx=True, ex=self.LOCK_TTL_SECONDS)
                )
            except redis.RedisError as exc:
                self._switch_to_memory_fallback(exc)
                break
            if acquired:
                break
            await asyncio.sleep(0.05)

        if not acquired:
            logger.warning("Session lock timeout for %s; proceeding without lock", session_id)
            yield
            return

        try:
            yield
        finally:
            unlock_lua = (
                "if redis.call('get', KEYS[1]) == ARGV[1] "
                "then return redis.call('del', KEYS[1]) else return 0 end"
            )
            try:
                self._client.eval(unlock_lua, 1, lock_key, token)
            except redis.RedisError as exc:
                logger.warning("Failed to release session lock %s: %s", session_id, exc)

    def load(self, session_id: str) -> SessionContext:
        return SessionContext.from_dict(session_id, self._load_payload(session_id))

    def save(self, session: SessionContext) -> None:
        self._save_payload(session.session_id, session.to_dict())

    def drop(self, session_id: str) -> None:
        if self._client:
            try:
                self._client.delete(self._session_key(session_id))
            except redis.RedisError as exc:
                self._switch_to_memory_fallback(exc)
        self._memory.pop(session_id, None)
        self._memory_last_access.pop(session_id, None)

    @asynccontextmanager
    async def open(self, session_id: str) -> AsyncIterator[SessionContext]:
        """
        Load a session, hand it out, and save it back on exit.

        The session id stays locked from load to save; overlapping requests on
        one id run in turn.
        """
        async with self._local_lock(session_id), self._redis_lock(session_id):
            session = self.load(session_id)
            try:
                yield session
            finally:
                self.save(session)
