"""Unit tests for the session registries."""

from __future__ import annotations

import json
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from fieldflow.auth.sessions import MemorySessionRegistry, RedisSessionRegistry


class TestMemorySessionRegistry:
    def test_issue_and_resolve(self, sessions):
        token = sessions.issue(7)

        assert sessions.resolve(token) == 7
        assert len(token) >= 40

    def test_tokens_are_unique(self, sessions):
        tokens = {sessions.issue(1) for _ in range(50)}

        assert len(tokens) == 50

    def test_unknown_and_empty_tokens(self, sessions):
        assert sessions.resolve("nope") is None
        assert sessions.resolve("") is None
        assert sessions.resolve(None) is None

    def test_valid_until_expiry(self, sessions, clock):
        token = sessions.issue(7)

        clock.advance(hours=23, minutes=59)

        assert sessions.resolve(token) == 7

    def test_expired_session_is_purged(self, sessions, clock):
        """Once past expiry the session is gone for good."""
        token = sessions.issue(7)

        clock.advance(hours=24)

        assert sessions.resolve(token) is None
        assert sessions.active_count() == 0
        clock.now -= timedelta(hours=12)
        assert sessions.resolve(token) is None

    def test_revoke_is_idempotent(self, sessions):
        token = sessions.issue(7)

        sessions.revoke(token)
        sessions.revoke(token)
        sessions.revoke("never-issued")
        sessions.revoke(None)

        assert sessions.resolve(token) is None

    def test_purge_expired(self, clock):
        registry = MemorySessionRegistry(ttl=timedelta(hours=1), clock=clock)
        old = registry.issue(1)
        clock.advance(minutes=30)
        fresh = registry.issue(2)
        clock.advance(minutes=31)

        assert registry.purge_expired() == 1
        assert registry.resolve(old) is None
        assert registry.resolve(fresh) == 2


class TestRedisSessionRegistry:
    @pytest.fixture
    def redis_client(self):
        client = MagicMock()
        client.set.return_value = True
        return client

    @pytest.fixture
    def registry(self, redis_client, clock):
        return RedisSessionRegistry(redis_client, clock=clock)

    def test_issue_writes_nx_with_ttl(self, registry, redis_client, clock):
        token = registry.issue(7)

        key, payload = redis_client.set.call_args.args
        assert key == f"session:{token}"
        assert redis_client.set.call_args.kwargs == {"ex": 86400, "nx": True}
        data = json.loads(payload)
        assert data["userId"] == 7
        assert data["expiresAt"] == (clock() + timedelta(hours=24)).isoformat()

    def test_issue_retries_on_collision(self, registry, redis_client):
        redis_client.set.side_effect = [None, True]

        registry.issue(7)

        assert redis_client.set.call_count == 2

    def test_resolve_live_session(self, registry, redis_client, clock):
        expires = (clock() + timedelta(hours=1)).isoformat()
        redis_client.get.return_value = json.dumps({"userId": 9, "expiresAt": expires})

        assert registry.resolve("abc") == 9
        redis_client.get.assert_called_once_with("session:abc")

    def test_resolve_expired_session_deletes_key(self, registry, redis_client, clock):
        expires = (clock() - timedelta(seconds=1)).isoformat()
        redis_client.get.return_value = json.dumps({"userId": 9, "expiresAt": expires})

        assert registry.resolve("abc") is None
        redis_client.delete.assert_called_once_with("session:abc")

    def test_resolve_corrupt_entry(self, registry, redis_client):
        redis_client.get.return_value = "{not json"

        assert registry.resolve("abc") is None
        redis_client.delete.assert_called_once_with("session:abc")

    def test_resolve_missing(self, registry, redis_client):
        redis_client.get.return_value = None

        assert registry.resolve("abc") is None
        redis_client.delete.assert_not_called()

    def test_revoke(self, registry, redis_client):
        registry.revoke("abc")
        registry.revoke(None)

        redis_client.delete.assert_called_once_with("session:abc")
