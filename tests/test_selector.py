"""Tests for best/all quality selection."""

import pytest

from manifest_resolver.models import ManifestType, MediaStream, ResolvedManifest
from manifest_resolver.parsers import HlsPlaylistParser
from manifest_resolver.selector import QualitySelector, SelectionError, extract_query_tokens

from conftest import MASTER_PLAYLIST, MASTER_URL

selector = QualitySelector()


def _manifest(streams, manifest_type=ManifestType.HLS, duration=None):
    return ResolvedManifest(
        type=manifest_type,
        original_url="https://cdn.example.com/m",
        streams=streams,
        duration=duration,
        resolved_at=0.0,
    )


def test_best_quality_picks_highest_bandwidth():
    manifest = HlsPlaylistParser().parse_master(MASTER_PLAYLIST, MASTER_URL, resolved_at=0.0)
    best = selector.get_best_quality_url(manifest)

    assert best.url == "https://cdn.example.com/videos/high.m3u8"
    assert best.format == "hls"
    assert best.quality.audio_bitrate == 2000000
    assert best.quality.resolution == "1280x720"
    assert best.accessibility == "unknown"
    assert best.size is None


def test_best_quality_does_not_reorder_manifest():
    streams = [MediaStream(url="a", bandwidth=1), MediaStream(url="b", bandwidth=5)]
    manifest = _manifest(streams)
    selector.get_best_quality_url(manifest)
    assert [s.url for s in manifest.streams] == ["a", "b"]


def test_missing_bandwidth_ranks_last():
    manifest = _manifest([MediaStream(url="none"), MediaStream(url="some", bandwidth=10)])
    assert selector.get_best_quality_url(manifest).url == "some"


def test_empty_manifest_raises_selection_error():
    with pytest.raises(SelectionError):
        selector.get_best_quality_url(_manifest([]))


def test_all_quality_urls_one_per_stream_in_stored_order():
    streams = [
        MediaStream(url="https://m/x.mpd", bandwidth=300),
        MediaStream(url="https://m/x.mpd", bandwidth=900, resolution="1920x1080", codec="avc1"),
    ]
    infos = selector.get_all_quality_urls(_manifest(streams, ManifestType.DASH, duration=12.5))

    assert len(infos) == 2
    assert all(info.format == "dash" for info in infos)
    assert [info.quality.audio_bitrate for info in infos] == [300, 900]
    assert infos[1].quality.codec == "avc1"
    assert all(info.duration == 12.5 for info in infos)


def test_all_quality_urls_empty():
    assert selector.get_all_quality_urls(_manifest([])) == []


def test_query_tokens_are_reported():
    tokens = extract_query_tokens("https://cdn/x.m3u8?token=abc&foo=1&access_token=xyz")
    assert [(t.type, t.scope, t.value) for t in tokens] == [
        ("query_param", "token", "abc"),
        ("query_param", "access_token", "xyz"),
    ]
    assert extract_query_tokens("https://cdn/x.m3u8") == []


def test_best_quality_carries_query_tokens():
    manifest = _manifest([MediaStream(url="https://cdn/v.m3u8?auth=s3cr3t", bandwidth=1)])
    best = selector.get_best_quality_url(manifest)
    assert best.auth_tokens[0].scope == "auth"
    assert best.auth_tokens[0].value == "s3cr3t"
