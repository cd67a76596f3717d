"""
NaoLoad - Canonical Result
==========================

The normalized redirect / picker / error shape every backend produces.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from naoload.core.constants import FORMAT_BY_KIND


STATUS_REDIRECT = "redirect"
STATUS_PICKER = "picker"
STATUS_ERROR = "error"

PICKER_TYPES = frozenset({"video", "audio", "image"})


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class PickerItem:
    """One selectable media item of a multi-item result."""
    url: str
    type: str = "video"
    quality: Optional[str] = None
    thumbnail: Optional[str] = None

    def __post_init__(self):
        if self.type == "photo":
            self.type = "image"
        elif not isinstance(self.type, str) or self.type not in PICKER_TYPES:
            self.type = "video"

    def to_dict(self) -> Dict[str, Any]:
        data = {"url": self.url, "type": self.type}
        if self.quality:
            data["quality"] = self.quality
        if self.thumbnail:
            data["thumbnail"] = self.thumbnail
        return data


@dataclass
class MediaResult:
    """
    Result of a resolution.

    Exactly one of ``url``, a non-empty ``picker`` or ``error`` is set.
    Build instances with ``redirect()``, ``choices()`` or ``failure()``.
    """
    status: str
    url: Optional[str] = None
    filename: Optional[str] = None
    picker: List[PickerItem] = field(default_factory=list)
    error: Optional[Dict[str, str]] = None
    quality: Optional[str] = None
    title: Optional[str] = None
    thumbnail: Optional[str] = None
    platform: Optional[str] = None
    backend: Optional[str] = None
    # Upstream status to forward on failure; never serialized
    http_status: Optional[int] = None
    # Media actually delivered when it differs from the requested kind; never serialized
    media_kind: Optional[str] = None

    def __post_init__(self):
        has_url = bool(self.url)
        has_picker = bool(self.picker)
        has_error = self.error is not None
        if has_url + has_picker + has_error != 1:
            raise ValueError("MediaResult needs exactly one of url, picker or error")
        expected = STATUS_REDIRECT if has_url else STATUS_PICKER if has_picker else STATUS_ERROR
        if self.status != expected:
            raise ValueError(f"MediaResult status {self.status!r} does not match payload ({expected})")

    @classmethod
    def redirect(cls, url: str, filename: Optional[str] = None, **extra) -> "MediaResult":
        return cls(status=STATUS_REDIRECT, url=url, filename=filename, **extra)

    @classmethod
    def choices(cls, items: List[PickerItem], filename: Optional[str] = None, **extra) -> "MediaResult":
        if not items:
            raise ValueError("picker result needs at least one item")
        return cls(status=STATUS_PICKER, picker=list(items), filename=filename, **extra)

    @classmethod
    def failure(
        cls,
        code: str,
        message: Optional[str] = None,
        http_status: Optional[int] = None,
        **extra,
    ) -> "MediaResult":
        error = {"code": code}
        if message:
            error["message"] = message
        return cls(status=STATUS_ERROR, error=error, http_status=http_status, **extra)

    @property
    def ok(self) -> bool:
        return self.status != STATUS_ERROR

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the HTTP response, omitting unset fields."""
        data: Dict[str, Any] = {"status": self.status}
        if self.url:
            data["url"] = self.url
        if self.picker:
            data["picker"] = [item.to_dict() for item in self.picker]
        if self.error is not None:
            data["error"] = dict(self.error)
        for key in ("filename", "quality", "title", "thumbnail", "platform", "backend"):
            value = getattr(self, key)
            if value:
                data[key] = value
        return data


# =============================================================================
# Helper Functions
# =============================================================================

def build_filename(platform: str, kind: str, now: Optional[float] = None) -> str:
    """Suggested filename: naoload_<platform>_<millis>.<mp4|mp3>."""
    millis = int((now if now is not None else time.time()) * 1000)
    ext = FORMAT_BY_KIND.get(kind, "mp4")
    return f"naoload_{platform}_{millis}.{ext}"


__all__ = [
    "MediaResult",
    "PickerItem",
    "STATUS_REDIRECT",
    "STATUS_PICKER",
    "STATUS_ERROR",
    "build_filename",
]
