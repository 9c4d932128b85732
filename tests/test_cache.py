"""Tests for the in-memory cache."""

import pytest

from storage import Cache


class TestCacheSetGet:
    """Tests for Cache.set() and Cache.get()."""

    def test_get_returns_stored_value(self) -> None:
        cache = Cache()
        payload = {"nested": [1, 2, 3]}

        cache.set("session", payload)

        assert cache.get("session") is payload

    def test_get_unknown_key_returns_none(self) -> None:
        cache = Cache()

        assert cache.get("missing") is None

    def test_get_unknown_key_returns_supplied_default(self) -> None:
        cache = Cache()
        marker = object()

        assert cache.get("missing", marker) is marker

    def test_set_overwrites_previous_value(self) -> None:
        cache = Cache()

        cache.set("key", "first")
        cache.set("key", "second")

        assert cache.get("key") == "second"
        assert len(cache) == 1

    def test_stored_none_is_distinguishable_with_has(self) -> None:
        cache = Cache()

        cache.set("key", None)

        assert cache.has("key")
        assert "key" in cache
        assert "other" not in cache

    def test_non_string_key_raises_typeerror(self) -> None:
        cache = Cache()

        with pytest.raises(TypeError, match="strings"):
            cache.set(42, "value")  # type: ignore[arg-type]

    @pytest.mark.parametrize("operation", ["get", "has", "delete", "__contains__"])
    def test_every_lookup_rejects_non_string_key(self, operation) -> None:
        cache = Cache()

        with pytest.raises(TypeError, match="strings"):
            getattr(cache, operation)(42)


class TestCacheClear:
    """Tests for Cache.clear() and Cache.delete()."""

    def test_clear_removes_every_entry(self) -> None:
        cache = Cache()
        for i in range(5):
            cache.set(f"key-{i}", i)

        cache.clear()

        assert len(cache) == 0
        assert all(cache.get(f"key-{i}") is None for i in range(5))

    def test_delete_reports_whether_value_was_removed(self) -> None:
        cache = Cache()
        cache.set("key", 0)

        assert cache.delete("key") is True
        assert cache.delete("key") is False
        assert cache.keys() == []


class TestCacheStats:
    """Tests for Cache.get_stats()."""

    def test_stats_count_hits_and_misses(self) -> None:
        cache = Cache()
        cache.set("a", 1)

        cache.get("a")
        cache.get("a")
        cache.get("b")

        assert cache.get_stats() == {"size": 1, "hits": 2, "misses": 1}
