"""MPD parsing: adaptation sets, representations, and presentation duration."""

from __future__ import annotations

import re
from typing import List, Optional

from lxml import etree

from ..models import (
    DashAdaptationSet,
    DashRepresentation,
    DashResolution,
    ManifestType,
    MediaStream,
    ResolvedManifest,
)
from .errors import ManifestParseError

ISO_DURATION_RE = re.compile(r"P(?:0+Y)?(?:0+M)?(?:0+W)?(?:0+D)?T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?")
LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def parse_iso_duration(value: Optional[str]) -> Optional[float]:
    """Converts ``PT#H#M#S`` (optionally with zero date parts) to seconds; anything else yields ``None``."""

    if not value:
        return None
    match = ISO_DURATION_RE.fullmatch(value.strip())
    if not match or not any(match.groups()):
        return None
    hours, minutes, seconds = match.groups()
    return int(hours or 0) * 3600 + int(minutes or 0) * 60 + float(seconds or 0)


def _int_attr(element: etree._Element, name: str) -> int:
    # Leading digits only, so "1e400" reads as 1 and "inf" as 0.
    match = LEADING_INT_RE.match(element.get(name) or "")
    return int(match.group(1)) if match else 0


def _local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


class DashManifestParser:
    """Reads an MPD document with lxml and maps representations to streams."""

    def __init__(self) -> None:
        self._xml_parser = etree.XMLParser(resolve_entities=False, no_network=True)

    def parse(self, xml_text: str, manifest_url: str, resolved_at: float) -> ResolvedManifest:
        root = self._load(xml_text)
        streams: List[MediaStream] = []
        for adaptation_set in root.iter("{*}AdaptationSet"):
            for representation in adaptation_set.iter("{*}Representation"):
                width = _int_attr(representation, "width")
                height = _int_attr(representation, "height")
                streams.append(
                    MediaStream(
                        # Segment templates are not expanded; callers get the MPD itself.
                        url=manifest_url,
                        bandwidth=_int_attr(representation, "bandwidth"),
                        resolution=f"{width}x{height}" if width and height else None,
                        codec=representation.get("codecs") or None,
                    )
                )

        return ResolvedManifest(
            type=ManifestType.DASH,
            original_url=manifest_url,
            streams=streams,
            duration=parse_iso_duration(root.get("mediaPresentationDuration")),
            resolved_at=resolved_at,
        )

    def parse_resolution(self, xml_text: str, manifest_url: str) -> DashResolution:
        root = self._load(xml_text)
        adaptation_sets: List[DashAdaptationSet] = []
        for adaptation_set in root.iter("{*}AdaptationSet"):
            representations = list(adaptation_set.iter("{*}Representation"))
            mime_type = adaptation_set.get("mimeType")
            if not mime_type and representations:
                mime_type = representations[0].get("mimeType")
            adaptation_sets.append(
                DashAdaptationSet(
                    mime_type=mime_type or "",
                    representations=[
                        DashRepresentation(
                            id=representation.get("id") or "",
                            bandwidth=_int_attr(representation, "bandwidth"),
                            width=_int_attr(representation, "width"),
                            height=_int_attr(representation, "height"),
                            codecs=representation.get("codecs") or "",
                        )
                        for representation in representations
                    ],
                )
            )
        return DashResolution(manifest_url=manifest_url, adaptation_sets=adaptation_sets)

    def _load(self, xml_text: str) -> etree._Element:
        if not xml_text or not xml_text.strip():
            raise ManifestParseError("Empty MPD document")
        try:
            root = etree.fromstring(xml_text.strip().encode("utf-8"), parser=self._xml_parser)
        except etree.XMLSyntaxError as exc:
            raise ManifestParseError(f"Invalid MPD XML: {exc}") from exc
        if root is None or _local_name(root) != "MPD":
            raise ManifestParseError("Document root is not an MPD element")
        return root
