"""Utility helpers for HTTP access, timing, and caching."""

from .clock import Clock, SystemClock
from .http_client import FetchError, ManifestFetcher
from .manifest_cache import ManifestCache

__all__ = ["Clock", "SystemClock", "FetchError", "ManifestFetcher", "ManifestCache"]
