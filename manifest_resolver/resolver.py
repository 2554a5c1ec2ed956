"""Entry point that classifies, fetches, parses, and caches streaming manifests."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Protocol

from .models import AudioUrlInfo, DashResolution, HlsResolution, ManifestType, ResolvedManifest
from .parsers import DashManifestParser, HlsPlaylistParser, ManifestParseError, classify, is_manifest_url
from .selector import QualitySelector
from .utils.clock import Clock, SystemClock
from .utils.http_client import FetchError
from .utils.manifest_cache import ManifestCache

DEFAULT_TIMEOUT = 10.0


class TextFetcher(Protocol):
    async def fetch_text(self, url: str) -> str:
        ...


class ManifestResolver:
    """
    Resolves HLS/DASH manifest URLs into ``ResolvedManifest`` models.

    Failures (unknown type, HTTP/transport errors, timeouts, unparseable
    documents) are logged and reported as ``None``. Concurrent calls for the same
    URL share one fetch; fresh results are served from the cache.
    """

    def __init__(
        self,
        fetcher: TextFetcher,
        cache: Optional[ManifestCache] = None,
        clock: Optional[Clock] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._fetcher = fetcher
        self._clock = clock or SystemClock()
        self._cache = cache if cache is not None else ManifestCache(self._clock)
        self.timeout = timeout
        self._hls_parser = HlsPlaylistParser()
        self._dash_parser = DashManifestParser()
        self._selector = QualitySelector()
        self._in_flight: Dict[str, asyncio.Future] = {}

    @property
    def cache(self) -> ManifestCache:
        return self._cache

    async def resolve_manifest(self, manifest_url: str) -> Optional[ResolvedManifest]:
        cached = self._cache.get(manifest_url)
        if cached is not None:
            logging.debug("Manifest cache hit for %s", manifest_url)
            return cached

        manifest_type = classify(manifest_url)
        if manifest_type == ManifestType.UNKNOWN:
            logging.debug("Not a recognised manifest URL: %s", manifest_url)
            return None

        task = self._in_flight.get(manifest_url)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_parse(manifest_url, manifest_type))
            self._in_flight[manifest_url] = task
            task.add_done_callback(lambda done, key=manifest_url: self._forget_in_flight(key, done))
        else:
            logging.debug("Joining in-flight resolution of %s", manifest_url)
        # Shielded so one abandoned caller does not cancel the fetch for the others.
        return await asyncio.shield(task)

    async def resolve_hls_playlist(self, playlist_url: str) -> Optional[HlsResolution]:
        text = await self._fetch(playlist_url)
        if text is None:
            return None
        try:
            return self._hls_parser.parse_playlist(text, playlist_url)
        except ManifestParseError as exc:
            logging.error("HLS playlist parsing failed for %s: %s", playlist_url, exc)
            return None
        except Exception as exc:
            logging.exception("Unexpected error parsing HLS playlist %s: %s", playlist_url, exc)
            return None

    async def resolve_dash_manifest(self, manifest_url: str) -> Optional[DashResolution]:
        text = await self._fetch(manifest_url)
        if text is None:
            return None
        try:
            return self._dash_parser.parse_resolution(text, manifest_url)
        except ManifestParseError as exc:
            logging.error("DASH manifest parsing failed for %s: %s", manifest_url, exc)
            return None
        except Exception as exc:
            logging.exception("Unexpected error parsing DASH manifest %s: %s", manifest_url, exc)
            return None

    def is_manifest_url(self, url: str) -> bool:
        return is_manifest_url(url)

    def get_best_quality_url(self, manifest: ResolvedManifest) -> AudioUrlInfo:
        return self._selector.get_best_quality_url(manifest)

    def get_all_quality_urls(self, manifest: ResolvedManifest) -> List[AudioUrlInfo]:
        return self._selector.get_all_quality_urls(manifest)

    async def aclose(self) -> None:
        """Cancels pending resolutions, drops cached manifests, and closes the fetcher."""

        pending = list(self._in_flight.values())
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._in_flight.clear()
        self._cache.clear()
        close = getattr(self._fetcher, "aclose", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "ManifestResolver":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()

    async def _fetch_and_parse(self, manifest_url: str, manifest_type: ManifestType) -> Optional[ResolvedManifest]:
        text = await self._fetch(manifest_url)
        if text is None:
            return None

        resolved_at = self._clock.now()
        try:
            if manifest_type == ManifestType.HLS:
                manifest = self._hls_parser.parse_master(text, manifest_url, resolved_at)
            else:
                manifest = self._dash_parser.parse(text, manifest_url, resolved_at)
        except ManifestParseError as exc:
            logging.error("%s manifest parsing failed for %s: %s", manifest_type.value.upper(), manifest_url, exc)
            return None
        except Exception as exc:
            logging.exception("Unexpected error parsing manifest %s: %s", manifest_url, exc)
            return None

        self._cache.put(manifest_url, manifest)
        logging.info(
            "Resolved %s manifest %s with %s stream(s)",
            manifest_type.value.upper(),
            manifest_url,
            len(manifest.streams),
        )
        return manifest

    async def _fetch(self, url: str) -> Optional[str]:
        try:
            return await asyncio.wait_for(self._fetcher.fetch_text(url), timeout=self.timeout)
        except asyncio.TimeoutError:
            logging.warning("Manifest fetch timed out after %ss: %s", self.timeout, url)
        except FetchError as exc:
            logging.error("Manifest fetch failed: %s", exc)
        return None

    def _forget_in_flight(self, key: str, done: asyncio.Future) -> None:
        if self._in_flight.get(key) is done:
            del self._in_flight[key]
