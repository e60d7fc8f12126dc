"""Session registry: opaque tokens mapped to a user id and an expiry.

A registry is constructed once at process start and injected into the web
app. Expiry is checked lazily on ``resolve``; an expired entry is deleted
the first time it is seen so it can never be resurrected.

Two backends share one interface:

- ``MemorySessionRegistry`` keeps a process-local dict (single worker).
- ``RedisSessionRegistry`` stores ``session:<token>`` keys with a Redis TTL
  so several workers can share sessions.
"""

from __future__ import annotations

import json
import secrets
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import redis
import structlog

logger = structlog.get_logger(__name__)

DEFAULT_TTL = timedelta(hours=24)
TOKEN_BYTES = 32
KEY_PREFIX = "session:"

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


@dataclass(frozen=True, slots=True)
class SessionEntry:
    user_id: int
    expires_at: datetime


class SessionRegistry(ABC):
    """Abstract session registry."""

    def __init__(self, ttl: timedelta = DEFAULT_TTL, clock: Clock = utcnow):
        self.ttl = ttl
        self._clock = clock

    @abstractmethod
    def issue(self, user_id: int) -> str:
        """Create a session for ``user_id`` and return its token."""

    @abstractmethod
    def resolve(self, token: str | None) -> int | None:
        """Return the user id for a live token, or None."""

    @abstractmethod
    def revoke(self, token: str | None) -> None:
        """Forget a token. Unknown tokens are ignored."""

    @abstractmethod
    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""

    @abstractmethod
    def active_count(self) -> int:
        """Number of sessions not yet known to be expired."""


class MemorySessionRegistry(SessionRegistry):
    """Process-local registry."""

    def __init__(self, ttl: timedelta = DEFAULT_TTL, clock: Clock = utcnow):
        super().__init__(ttl, clock)
        self._lock = threading.RLock()
        self._entries: dict[str, SessionEntry] = {}

    def issue(self, user_id: int) -> str:
        with self._lock:
            token = new_token()
            while token in self._entries:
                token = new_token()
            self._entries[token] = SessionEntry(user_id, self._clock() + self.ttl)
            return token

    def resolve(self, token: str | None) -> int | None:
        if not token:
            return None
        with self._lock:
            entry = self._entries.get(token)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[token]
                return None
            return entry.user_id

    def revoke(self, token: str | None) -> None:
        if not token:
            return
        with self._lock:
            self._entries.pop(token, None)

    def purge_expired(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [t for t, e in self._entries.items() if e.expires_at <= now]
            for token in expired:
                del self._entries[token]
            if expired:
                logger.debug("sessions_purged", count=len(expired))
            return len(expired)

    def active_count(self) -> int:
        with self._lock:
            return len(self._entries)


class RedisSessionRegistry(SessionRegistry):
    """Redis-backed registry.

    Values are JSON ``{"userId": ..., "expiresAt": <iso>}``. Redis expires
    keys on its own; the stored ``expiresAt`` is still checked so an injected
    clock behaves the same as with the memory backend.
    """

    def __init__(
        self,
        client: redis.Redis,
        ttl: timedelta = DEFAULT_TTL,
        clock: Clock = utcnow,
    ):
        super().__init__(ttl, clock)
        self._redis = client

    @classmethod
    def from_url(cls, url: str, ttl: timedelta = DEFAULT_TTL) -> RedisSessionRegistry:
        return cls(redis.from_url(url, decode_responses=True), ttl=ttl)

    @staticmethod
    def _key(token: str) -> str:
        return f"{KEY_PREFIX}{token}"

    def issue(self, user_id: int) -> str:
        expires_at = self._clock() + self.ttl
        payload = json.dumps({"userId": user_id, "expiresAt": expires_at.isoformat()})
        ttl_seconds = max(int(self.ttl.total_seconds()), 1)
        while True:
            token = new_token()
            # NX: never overwrite a live session with the same token
            if self._redis.set(self._key(token), payload, ex=ttl_seconds, nx=True):
                return token

    def resolve(self, token: str | None) -> int | None:
        if not token:
            return None
        key = self._key(token)
        raw = self._redis.get(key)
        if not raw:
            return None
        try:
            data = json.loads(raw)
            user_id = int(data["userId"])
            expires_at = datetime.fromisoformat(data["expiresAt"])
        except (json.JSONDecodeError, KeyError, TypeError, ValueError):
            logger.warning("session_corrupt", key=key)
            self._redis.delete(key)
            return None
        if expires_at <= self._clock():
            self._redis.delete(key)
            return None
        return user_id

    def revoke(self, token: str | None) -> None:
        if token:
            self._redis.delete(self._key(token))

    def purge_expired(self) -> int:
        removed = 0
        for key in self._redis.scan_iter(match=f"{KEY_PREFIX}*"):
            token = key[len(KEY_PREFIX):]
            if self.resolve(token) is None:
                removed += 1
        return removed

    def active_count(self) -> int:
        return sum(1 for _ in self._redis.scan_iter(match=f"{KEY_PREFIX}*"))
