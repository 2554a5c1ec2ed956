"""Tests for cache freshness and timed eviction."""

from manifest_resolver.models import ManifestType, MediaStream, ResolvedManifest
from manifest_resolver.utils.manifest_cache import ManifestCache


def _manifest(resolved_at: float, url: str = "https://cdn.example.com/a.m3u8") -> ResolvedManifest:
    return ResolvedManifest(
        type=ManifestType.HLS,
        original_url=url,
        streams=[MediaStream(url=url, bandwidth=1)],
        resolved_at=resolved_at,
    )


def test_fresh_entry_is_served(clock):
    cache = ManifestCache(clock)
    manifest = _manifest(clock.now())
    cache.put("u", manifest)

    clock.advance(299)
    assert cache.get("u") is manifest


def test_stale_entry_is_a_miss_and_discarded(clock):
    cache = ManifestCache(clock)
    cache.put("u", _manifest(clock.now()))

    clock.advance(300)
    assert cache.get("u") is None
    assert "u" not in cache
    assert clock.pending == []


def test_eviction_fires_without_reads(clock):
    cache = ManifestCache(clock, fresh_ttl=10_000)
    cache.put("u", _manifest(clock.now()))

    clock.advance(599)
    assert "u" in cache
    clock.advance(1)
    assert "u" not in cache
    assert len(cache) == 0


def test_reput_reschedules_eviction(clock):
    cache = ManifestCache(clock, fresh_ttl=10_000)
    cache.put("u", _manifest(clock.now()))
    clock.advance(400)
    replacement = _manifest(clock.now())
    cache.put("u", replacement)

    assert len(clock.pending) == 1
    clock.advance(300)
    assert cache.get("u") is replacement
    clock.advance(300)
    assert "u" not in cache


def test_clear_cancels_timers(clock):
    cache = ManifestCache(clock)
    cache.put("a", _manifest(clock.now()))
    cache.put("b", _manifest(clock.now()))

    cache.clear()
    assert len(cache) == 0
    assert clock.pending == []
