"""Turns resolved manifests into playable ``AudioUrlInfo`` records."""

from __future__ import annotations

from typing import List
from urllib.parse import parse_qsl, urlparse

from .models import AudioUrlInfo, AuthTokenInfo, ManifestType, MediaQuality, MediaStream, ResolvedManifest

TOKEN_QUERY_PARAMS = ("token", "auth", "access_token", "bearer")


class SelectionError(LookupError):
    """Raised when the best stream is requested from a manifest without streams."""


def extract_query_tokens(url: str) -> List[AuthTokenInfo]:
    """Reports credentials already carried in the query string of ``url``."""

    try:
        query = dict(parse_qsl(urlparse(url).query))
    except ValueError:
        return []
    return [
        AuthTokenInfo(type="query_param", value=query[name], scope=name)
        for name in TOKEN_QUERY_PARAMS
        if query.get(name)
    ]


class QualitySelector:
    """Ranks streams by bandwidth and exposes best/all playable URLs."""

    def get_best_quality_url(self, manifest: ResolvedManifest) -> AudioUrlInfo:
        if not manifest.streams:
            raise SelectionError(f"No suitable stream found in manifest {manifest.original_url}")
        ranked = sorted(manifest.streams, key=lambda stream: stream.bandwidth or 0, reverse=True)
        return self._to_audio_url_info(manifest, ranked[0])

    def get_all_quality_urls(self, manifest: ResolvedManifest) -> List[AudioUrlInfo]:
        return [self._to_audio_url_info(manifest, stream) for stream in manifest.streams]

    @staticmethod
    def _to_audio_url_info(manifest: ResolvedManifest, stream: MediaStream) -> AudioUrlInfo:
        return AudioUrlInfo(
            url=stream.url,
            format="hls" if manifest.type == ManifestType.HLS else "dash",
            duration=manifest.duration,
            auth_tokens=extract_query_tokens(stream.url),
            quality=MediaQuality(
                audio_bitrate=stream.bandwidth,
                resolution=stream.resolution,
                codec=stream.codec,
            ),
        )
