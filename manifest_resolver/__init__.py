"""Resolve HLS and DASH streaming manifests into ranked, playable media URLs."""

from .models import AudioUrlInfo, ManifestType, MediaStream, ResolvedManifest
from .parsers import ManifestParseError, is_manifest_url
from .resolver import ManifestResolver
from .selector import QualitySelector, SelectionError
from .utils import FetchError, ManifestCache, ManifestFetcher, SystemClock

__all__ = [
    "ManifestResolver",
    "ManifestFetcher",
    "ManifestCache",
    "SystemClock",
    "QualitySelector",
    "is_manifest_url",
    "AudioUrlInfo",
    "ManifestType",
    "MediaStream",
    "ResolvedManifest",
    "FetchError",
    "ManifestParseError",
    "SelectionError",
]
