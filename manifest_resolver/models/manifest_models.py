"""Pydantic models for resolved manifests, variant streams, and segment listings."""

from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict


class ManifestType(str, Enum):
    HLS = "hls"
    DASH = "dash"
    UNKNOWN = "unknown"


class MediaStream(BaseModel):
    """One selectable quality variant, or one plain entry of a media playlist."""

    model_config = ConfigDict(frozen=True)

    url: str
    bandwidth: Optional[int] = None
    resolution: Optional[str] = None
    codec: Optional[str] = None


class ResolvedManifest(BaseModel):
    """Normalized view of an HLS or DASH manifest."""

    model_config = ConfigDict(frozen=True)

    type: ManifestType
    original_url: str
    streams: List[MediaStream]
    duration: Optional[float] = None
    resolved_at: float


class HlsSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    duration: float
    title: Optional[str] = None


class HlsResolution(BaseModel):
    """Ordered segment listing of an HLS media playlist."""

    model_config = ConfigDict(frozen=True)

    type: Literal["hls"] = "hls"
    playlist_url: str
    segments: List[HlsSegment]
    total_duration: float


class DashRepresentation(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    bandwidth: int
    width: int
    height: int
    codecs: str


class DashAdaptationSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    mime_type: str
    representations: List[DashRepresentation]


class DashResolution(BaseModel):
    """Adaptation sets and representations declared by an MPD."""

    model_config = ConfigDict(frozen=True)

    type: Literal["dash"] = "dash"
    manifest_url: str
    adaptation_sets: List[DashAdaptationSet]
