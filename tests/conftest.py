"""Shared fakes: a virtual clock and scripted fetchers."""

from __future__ import annotations

import asyncio
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from manifest_resolver.utils.http_client import FetchError


class VirtualTimer:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualClock:
    """Manually advanced clock; timers fire during ``advance``."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self._now = start
        self.timers: List[VirtualTimer] = []

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> VirtualTimer:
        timer = VirtualTimer(self._now + delay, callback)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        self._now += seconds
        due = [t for t in self.timers if not t.cancelled and t.due <= self._now]
        self.timers = [t for t in self.timers if t not in due]
        for timer in sorted(due, key=lambda t: t.due):
            timer.callback()

    @property
    def pending(self) -> List[VirtualTimer]:
        return [t for t in self.timers if not t.cancelled]


class FakeFetcher:
    """Serves canned bodies and records every requested URL."""

    def __init__(self, responses: Optional[Dict[str, str]] = None, delay: float = 0.0) -> None:
        self.responses = dict(responses or {})
        self.errors: Dict[str, Tuple[str, Optional[int]]] = {}
        self.delay = delay
        self.calls: List[str] = []
        self.closed = False

    def fail(self, url: str, message: str = "HTTP 404: Not Found", status: Optional[int] = 404) -> None:
        self.errors[url] = (message, status)

    async def fetch_text(self, url: str) -> str:
        self.calls.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        if url in self.errors:
            message, status = self.errors[url]
            raise FetchError(url, message, status=status)
        if url not in self.responses:
            raise FetchError(url, "HTTP 404: Not Found", status=404)
        return self.responses[url]

    async def aclose(self) -> None:
        self.closed = True


MASTER_URL = "https://cdn.example.com/videos/master.m3u8"

MASTER_PLAYLIST = """#EXTM3U
#EXT-X-VERSION:3
#EXT-X-STREAM-INF:BANDWIDTH=800000,RESOLUTION=640x360,CODECS="avc1.4d401e,mp4a.40.2"
low.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=2000000,RESOLUTION=1280x720,CODECS="avc1.4d401f,mp4a.40.2"
high.m3u8
"""

MEDIA_PLAYLIST = """#EXTM3U
#EXT-X-VERSION:3
#EXT-X-TARGETDURATION:10
#EXT-X-MEDIA-SEQUENCE:0
#EXTINF:9.009,Intro
segment0.ts
#EXTINF:9.009,
segment1.ts
#EXTINF:3.003,
https://other.example.com/segment2.ts
#EXT-X-ENDLIST
"""

DASH_URL = "https://media.example.com/recordings/meeting.mpd"

DASH_MANIFEST = """<?xml version="1.0" encoding="UTF-8"?>
<MPD xmlns="urn:mpeg:dash:schema:mpd:2011" type="static" mediaPresentationDuration="PT1H2M3S">
  <Period id="0">
    <AdaptationSet mimeType="video/mp4" segmentAlignment="true">
      <Representation id="v1" bandwidth="1500000" width="1280" height="720" codecs="avc1.64001f"/>
      <Representation id="v2" bandwidth="4000000" width="1920" height="1080" codecs="avc1.640028"/>
    </AdaptationSet>
    <AdaptationSet lang="en">
      <Representation id="a1" mimeType="audio/mp4" bandwidth="128000" codecs="mp4a.40.2"/>
    </AdaptationSet>
  </Period>
</MPD>
"""


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()
