"""Line-oriented parsing of m3u8 playlists into variants or segments."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple
from urllib.parse import urljoin, urlparse

from ..models import HlsResolution, HlsSegment, ManifestType, MediaStream, ResolvedManifest
from .errors import ManifestParseError

BANDWIDTH_RE = re.compile(r"(?<![A-Z-])BANDWIDTH=(\d+)")
RESOLUTION_RE = re.compile(r"RESOLUTION=(\d+x\d+)")
CODECS_RE = re.compile(r'CODECS="([^"]+)"')


def manifest_directory(url: str) -> str:
    """Returns ``url`` with its last path segment, query, and fragment removed."""

    parsed = urlparse(url)
    path = parsed.path.rsplit("/", 1)[0] + "/" if "/" in parsed.path else "/"
    return f"{parsed.scheme}://{parsed.netloc}{path}"


def resolve_url(candidate: str, base_url: str) -> Optional[str]:
    """Absolute URL for ``candidate``, or ``None`` when either URL is malformed."""

    try:
        if urlparse(candidate).scheme:
            return candidate
        return urljoin(manifest_directory(base_url), candidate)
    except ValueError as exc:
        logging.debug("Skipping malformed playlist URI %r: %s", candidate, exc)
        return None


def _playlist_lines(text: str) -> List[str]:
    lines = [raw_line.strip() for raw_line in (text or "").splitlines()]
    lines = [line for line in lines if line]
    if not lines or not lines[0].startswith("#EXTM3U"):
        raise ManifestParseError("Not a valid HLS playlist (missing #EXTM3U header)")
    return lines


def _parse_extinf(line: str) -> Tuple[Optional[float], Optional[str]]:
    duration_part, _, title = line[len("#EXTINF:"):].partition(",")
    try:
        duration = float(duration_part)
    except ValueError:
        logging.debug("Ignoring unparseable EXTINF duration: %s", line)
        duration = None
    return duration, title.strip() or None


def _parse_stream_inf(line: str) -> MediaStream:
    bandwidth = BANDWIDTH_RE.search(line)
    resolution = RESOLUTION_RE.search(line)
    codecs = CODECS_RE.search(line)
    # The URL is filled in once the following URI line is seen.
    return MediaStream(
        url="",
        bandwidth=int(bandwidth.group(1)) if bandwidth else None,
        resolution=resolution.group(1) if resolution else None,
        codec=codecs.group(1) if codecs else None,
    )


class HlsPlaylistParser:
    """Turns m3u8 text into a ranked-variant manifest or a segment listing."""

    def parse_master(self, text: str, base_url: str, resolved_at: float) -> ResolvedManifest:
        lines = _playlist_lines(text)
        streams: List[MediaStream] = []
        pending: Optional[MediaStream] = None
        target_duration: Optional[float] = None
        segment_total = 0.0
        saw_extinf = False

        for line in lines[1:]:
            if line.startswith("#EXT-X-TARGETDURATION:"):
                try:
                    target_duration = float(line.split(":", 1)[1])
                except ValueError:
                    logging.debug("Ignoring unparseable target duration: %s", line)
            elif line.startswith("#EXT-X-STREAM-INF:"):
                pending = _parse_stream_inf(line)
            elif line.startswith("#EXTINF:"):
                duration, _ = _parse_extinf(line)
                if duration is not None:
                    segment_total += duration
                    saw_extinf = True
            elif line.startswith("#"):
                continue
            else:
                url = resolve_url(line, base_url)
                if url is None:
                    pending = None
                elif pending is not None:
                    streams.append(pending.model_copy(update={"url": url}))
                    pending = None
                else:
                    streams.append(MediaStream(url=url))

        if pending is not None:
            logging.warning("Variant without URI at end of playlist %s", base_url)

        if saw_extinf:
            duration: Optional[float] = segment_total
        else:
            duration = target_duration

        return ResolvedManifest(
            type=ManifestType.HLS,
            original_url=base_url,
            streams=streams,
            duration=duration,
            resolved_at=resolved_at,
        )

    def parse_playlist(self, text: str, playlist_url: str) -> HlsResolution:
        lines = _playlist_lines(text)
        segments: List[HlsSegment] = []
        duration: Optional[float] = None
        title: Optional[str] = None

        for line in lines[1:]:
            if line.startswith("#EXTINF:"):
                duration, title = _parse_extinf(line)
            elif line.startswith("#"):
                continue
            else:
                url = resolve_url(line, playlist_url)
                if url is not None:
                    segments.append(HlsSegment(url=url, duration=duration or 0.0, title=title))
                duration, title = None, None

        if not segments:
            logging.warning("m3u8 at %s did not contain segments", playlist_url)
        return HlsResolution(
            playlist_url=playlist_url,
            segments=segments,
            total_duration=sum(segment.duration for segment in segments),
        )
