# tests/test_cache.py

"""
Tests for the capability cache.
"""

from unittest.mock import patch

from core.cache import (
    SimpleCache,
    cache_get,
    cache_set,
    cache_delete,
    capability_cache_key,
    invalidate_capabilities,
)


def test_cache_set_and_get():
    cache_set("test_key", "test_value", ttl_seconds=60)
    assert cache_get("test_key") == "test_value"


def test_cache_expiration():
    cache = SimpleCache()

    with patch("core.cache.time.monotonic", return_value=1000.0):
        cache.set("expiring_key", "value", ttl_seconds=1)
        assert cache.get("expiring_key") == "value"

    with patch("core.cache.time.monotonic", return_value=1002.0):
        assert cache.get("expiring_key") is None


def test_non_positive_ttl_is_not_stored():
    cache = SimpleCache()
    cache.set("k", "v", ttl_seconds=0)
    assert cache.get("k") is None


def test_cache_delete():
    cache_set("delete_key", "delete_value")
    cache_delete("delete_key")
    assert cache_get("delete_key") is None


def test_invalidate_capabilities_keeps_other_namespaces():
    cache_set(capability_cache_key("team_member_admin:team_a-ravi"), frozenset({"chat"}))
    cache_set("other:key", "kept")

    assert invalidate_capabilities() == 1
    assert cache_get(capability_cache_key("team_member_admin:team_a-ravi")) is None
    assert cache_get("other:key") == "kept"


def test_stale_write_after_invalidation_is_dropped():
    cache = SimpleCache()
    generation = cache.generation()

    cache.delete_prefix("capabilities:")

    assert cache.set_if_generation("capabilities:x", frozenset({"chat"}), 60, generation) is False
    assert cache.get("capabilities:x") is None

    assert cache.set_if_generation("capabilities:x", frozenset(), 60, cache.generation()) is True
    assert cache.get("capabilities:x") == frozenset()
