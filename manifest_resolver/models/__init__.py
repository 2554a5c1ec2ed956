"""Data models for manifests, streams, segments, and selected media URLs."""

from .manifest_models import (
    DashAdaptationSet,
    DashRepresentation,
    DashResolution,
    HlsResolution,
    HlsSegment,
    ManifestType,
    MediaStream,
    ResolvedManifest,
)
from .media_models import AudioUrlInfo, AuthTokenInfo, MediaQuality

__all__ = [
    "ManifestType",
    "MediaStream",
    "ResolvedManifest",
    "HlsSegment",
    "HlsResolution",
    "DashRepresentation",
    "DashAdaptationSet",
    "DashResolution",
    "AudioUrlInfo",
    "AuthTokenInfo",
    "MediaQuality",
]
