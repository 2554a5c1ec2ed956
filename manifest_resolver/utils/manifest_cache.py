"""In-memory TTL cache of resolved manifests keyed by manifest URL."""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Dict, Optional, Tuple

from ..models import ResolvedManifest
from .clock import Clock, TimerHandle

FRESH_TTL_SECONDS = 5 * 60
EVICTION_TTL_SECONDS = 10 * 60


class ManifestCache:
    """
    Keeps the last resolved manifest per URL.

    An entry is served while younger than ``fresh_ttl``; independently, every
    ``put`` schedules an unconditional eviction ``eviction_ttl`` seconds later so
    entries that are never read again do not pile up. Process memory only.
    """

    def __init__(
        self,
        clock: Clock,
        fresh_ttl: float = FRESH_TTL_SECONDS,
        eviction_ttl: float = EVICTION_TTL_SECONDS,
    ) -> None:
        self._clock = clock
        self.fresh_ttl = fresh_ttl
        self.eviction_ttl = eviction_ttl
        self._data: Dict[str, ResolvedManifest] = {}
        self._timers: Dict[str, Tuple[int, TimerHandle]] = {}
        self._generations = itertools.count()
        self._lock = threading.RLock()

    def get(self, url: str) -> Optional[ResolvedManifest]:
        with self._lock:
            manifest = self._data.get(url)
            if manifest is None:
                return None
            if self._clock.now() - manifest.resolved_at < self.fresh_ttl:
                return manifest
            logging.debug("Discarding stale manifest for %s", url)
            self._drop(url)
            return None

    def put(self, url: str, manifest: ResolvedManifest) -> None:
        with self._lock:
            self._cancel_timer(url)
            self._data[url] = manifest
            generation = next(self._generations)
            handle = self._clock.call_later(self.eviction_ttl, lambda: self._evict(url, generation))
            self._timers[url] = (generation, handle)

    def clear(self) -> None:
        """Drops every entry and cancels all pending eviction timers."""

        with self._lock:
            for _, handle in self._timers.values():
                handle.cancel()
            self._timers.clear()
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._data

    def _evict(self, url: str, generation: int) -> None:
        with self._lock:
            current = self._timers.get(url)
            # A re-put may have replaced this timer just as it fired.
            if current is not None and current[0] != generation:
                return
            logging.debug("Evicting cached manifest for %s", url)
            self._data.pop(url, None)
            self._timers.pop(url, None)

    def _drop(self, url: str) -> None:
        self._data.pop(url, None)
        self._cancel_timer(url)

    def _cancel_timer(self, url: str) -> None:
        entry = self._timers.pop(url, None)
        if entry is not None:
            entry[1].cancel()
