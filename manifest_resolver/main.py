from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

from .models import ManifestType
from .parsers import classify
from .resolver import DEFAULT_TIMEOUT, ManifestResolver
from .selector import SelectionError
from .utils.http_client import ManifestFetcher

load_dotenv()


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value


def _env_float(name: str) -> float | None:
    value = _env_str(name)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _env_bool(name: str) -> bool:
    value = _env_str(name)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve an HLS/DASH manifest into playable media URLs.")
    parser.add_argument("url", nargs="?", default=_env_str("MANIFEST_URL"), help="Manifest URL (.m3u8 or .mpd)")
    parser.add_argument(
        "--all",
        action="store_true",
        default=_env_bool("LIST_ALL"),
        help="List every variant instead of only the best one",
    )
    parser.add_argument(
        "--segments",
        action="store_true",
        default=_env_bool("SEGMENTS"),
        help="List HLS segments or DASH representations instead of ranked variants",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=_env_float("RESOLVER_TIMEOUT") or DEFAULT_TIMEOUT,
        help="Seconds to wait for the manifest download",
    )
    parser.add_argument("--user-agent", default=_env_str("RESOLVER_USER_AGENT"), help="Override the User-Agent header")
    parser.add_argument("--verbose", action="store_true", default=_env_bool("VERBOSE"), help="Enable debug logging")
    return parser.parse_args(argv)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


async def _list_segments(resolver: ManifestResolver, url: str) -> bool:
    if classify(url) == ManifestType.DASH:
        dash = await resolver.resolve_dash_manifest(url)
        if dash is None:
            return False
        for adaptation_set in dash.adaptation_sets:
            logging.info("AdaptationSet %s", adaptation_set.mime_type or "(no mimeType)")
            for rep in adaptation_set.representations:
                logging.info("  %-12s %10s bps  %sx%s  %s", rep.id, rep.bandwidth, rep.width, rep.height, rep.codecs)
        return True

    playlist = await resolver.resolve_hls_playlist(url)
    if playlist is None:
        return False
    for index, segment in enumerate(playlist.segments, start=1):
        logging.info("%5s  %7.3fs  %s", index, segment.duration, segment.url)
    logging.info("%s segments, %.3fs total", len(playlist.segments), playlist.total_duration)
    return True


async def run(args: argparse.Namespace) -> int:
    headers = {"user-agent": args.user_agent} if args.user_agent else None
    fetcher = ManifestFetcher(timeout=args.timeout, headers=headers)
    async with ManifestResolver(fetcher, timeout=args.timeout) as resolver:
        if args.segments:
            return 0 if await _list_segments(resolver, args.url) else 1

        if not resolver.is_manifest_url(args.url):
            logging.warning("%s does not look like a manifest URL; trying anyway", args.url)

        manifest = await resolver.resolve_manifest(args.url)
        if manifest is None:
            logging.error("Could not resolve %s", args.url)
            return 1

        if manifest.duration is not None:
            logging.info("Duration: %.3fs", manifest.duration)

        if args.all:
            for info in resolver.get_all_quality_urls(manifest):
                quality = info.quality
                logging.info(
                    "%-4s %10s bps  %-10s %-24s %s",
                    info.format,
                    quality.audio_bitrate if quality else None,
                    quality.resolution if quality else None,
                    quality.codec if quality else None,
                    info.url,
                )
            return 0

        try:
            best = resolver.get_best_quality_url(manifest)
        except SelectionError as exc:
            logging.error("%s", exc)
            return 1
        logging.info("Best %s stream: %s", best.format, best.url)
        return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)
    if not args.url:
        logging.error("A manifest URL must be given as an argument or via MANIFEST_URL.")
        return 2
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
