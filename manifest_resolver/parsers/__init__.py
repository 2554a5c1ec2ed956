"""Manifest classification and HLS/DASH parsers."""

from .classifier import classify, is_manifest_url
from .dash_parser import DashManifestParser, parse_iso_duration
from .errors import ManifestParseError
from .hls_parser import HlsPlaylistParser, resolve_url

__all__ = [
    "classify",
    "is_manifest_url",
    "HlsPlaylistParser",
    "DashManifestParser",
    "ManifestParseError",
    "parse_iso_duration",
    "resolve_url",
]
