"""URL heuristics that route candidate URLs to the HLS or DASH parser."""

from __future__ import annotations

import re

from ..models import ManifestType

MANIFEST_URL_PATTERNS = [
    re.compile(r"\.m3u8(\?.*)?$", re.IGNORECASE),
    re.compile(r"\.mpd(\?.*)?$", re.IGNORECASE),
    re.compile(r"/manifest(\([^)]*\))?(\?.*)?$", re.IGNORECASE),
    re.compile(r"/playlist\.m3u8", re.IGNORECASE),
    re.compile(r"/master\.m3u8", re.IGNORECASE),
]


def classify(url: str) -> ManifestType:
    """Guesses the manifest flavour from the URL text alone."""

    lowered = (url or "").lower()
    if ".m3u8" in lowered or "hls" in lowered:
        return ManifestType.HLS
    if ".mpd" in lowered or "dash" in lowered:
        return ManifestType.DASH
    if "manifest" in lowered and "stream" in lowered:
        return ManifestType.HLS
    return ManifestType.UNKNOWN


def is_manifest_url(url: str) -> bool:
    """True when ``url`` looks like an adaptive-streaming manifest rather than a plain file."""

    if not url:
        return False
    return any(pattern.search(url) for pattern in MANIFEST_URL_PATTERNS)
