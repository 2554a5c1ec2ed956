"""Output-facing records handed to the media scanner and auth-token layers."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict

AuthTokenType = Literal["bearer", "cookie", "query_param", "header"]
UrlAccessibility = Literal["accessible", "authentication_required", "permission_denied", "not_found", "unknown"]


class AuthTokenInfo(BaseModel):
    """A credential already present on a media URL."""

    model_config = ConfigDict(frozen=True)

    type: AuthTokenType
    value: str
    scope: Optional[str] = None
    expires_at: Optional[datetime] = None


class MediaQuality(BaseModel):
    model_config = ConfigDict(frozen=True)

    audio_bitrate: Optional[int] = None
    resolution: Optional[str] = None
    codec: Optional[str] = None


class AudioUrlInfo(BaseModel):
    """A playable media URL picked out of a resolved manifest."""

    model_config = ConfigDict(frozen=True)

    url: str
    format: str
    size: Optional[int] = None
    duration: Optional[float] = None
    auth_tokens: List[AuthTokenInfo] = []
    accessibility: UrlAccessibility = "unknown"
    quality: Optional[MediaQuality] = None
