"""Async HTTP access for manifest documents."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional

import aiohttp

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36 Edg/124.0.0.0"
)

MANIFEST_HEADERS: Dict[str, str] = {
    "user-agent": DEFAULT_USER_AGENT,
    "accept": "application/vnd.apple.mpegurl, application/dash+xml, */*",
    "accept-language": "en-US,en;q=0.9",
}


class FetchError(Exception):
    """Raised when a manifest cannot be retrieved (HTTP status, transport, or timeout)."""

    def __init__(self, url: str, message: str, status: Optional[int] = None) -> None:
        super().__init__(f"{message} ({url})")
        self.url = url
        self.status = status
        self.message = message


class ManifestFetcher:
    """GETs manifest text over a shared aiohttp session. No retries."""

    def __init__(self, timeout: float = 10, headers: Optional[Dict[str, str]] = None) -> None:
        self.timeout = timeout
        self._headers = MANIFEST_HEADERS.copy()
        if headers:
            self._headers.update(headers)

        self._session: Optional[aiohttp.ClientSession] = None
        self._session_lock: Optional[asyncio.Lock] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    async def fetch_text(self, url: str) -> str:
        """Fetch ``url`` and return the decoded body, raising ``FetchError`` on failure."""

        session = await self._get_session()
        try:
            async with session.get(url) as resp:
                if not 200 <= resp.status < 300:
                    raise FetchError(url, f"HTTP {resp.status}: {resp.reason}", status=resp.status)
                return await resp.text()
        except asyncio.TimeoutError as exc:
            raise FetchError(url, f"Timed out after {self.timeout}s") from exc
        except UnicodeDecodeError as exc:
            raise FetchError(url, f"Undecodable manifest body: {exc.reason}") from exc
        except aiohttp.ClientError as exc:
            logging.error("Manifest download failed from %s: %s", url, exc)
            raise FetchError(url, str(exc) or exc.__class__.__name__) from exc

    async def _get_session(self) -> aiohttp.ClientSession:
        current_loop = asyncio.get_running_loop()
        if self._session:
            if (
                self._session.closed
                or not self._loop
                or self._loop.is_closed()
                or self._loop is not current_loop
            ):
                await self._shutdown_session()

        if self._session_lock is None or self._loop is not current_loop:
            self._session_lock = asyncio.Lock()

        async with self._session_lock:
            if self._session and not self._session.closed:
                return self._session
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout, headers=self._headers.copy())
            self._loop = current_loop
        return self._session

    async def _shutdown_session(self) -> None:
        if self._session:
            try:
                await self._session.close()
            except RuntimeError as exc:
                logging.debug("Ignoring error while closing stale session: %s", exc)
        self._session = None
        self._loop = None

    async def aclose(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._loop = None

    async def __aenter__(self) -> "ManifestFetcher":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()
