"""
NaoLoad - Platform Detection
============================

Platform tags, URL classification, and identifier extraction.
"""

import re
from enum import Enum
from typing import Optional


# =============================================================================
# Platforms
# =============================================================================

class Platform(str, Enum):
    """Source platform of a media URL."""

    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    YOUTUBE = "youtube"
    YOUTUBE_MUSIC = "youtube_music"
    TWITTER = "twitter"
    UNKNOWN = "unknown"


KNOWN_PLATFORMS = frozenset(p for p in Platform if p is not Platform.UNKNOWN)


# =============================================================================
# Detection Table
# =============================================================================

# Ordered (substring, platform) pairs; first match wins.
# music.youtube.com must come before youtube.com. Bare x.com is anchored
# to a host boundary so hosts like netflix.com do not match.
PLATFORM_DOMAINS = (
    ("vm.tiktok.com", Platform.TIKTOK),
    ("vt.tiktok.com", Platform.TIKTOK),
    ("tiktok.com", Platform.TIKTOK),
    ("instagram.com", Platform.INSTAGRAM),
    ("instagr.am", Platform.INSTAGRAM),
    ("facebook.com", Platform.FACEBOOK),
    ("fb.watch", Platform.FACEBOOK),
    ("music.youtube.com", Platform.YOUTUBE_MUSIC),
    ("youtube.com", Platform.YOUTUBE),
    ("youtu.be", Platform.YOUTUBE),
    ("twitter.com", Platform.TWITTER),
    ("//x.com/", Platform.TWITTER),
    (".x.com/", Platform.TWITTER),
)

SCHEME_PREFIX = re.compile(r"^(?:[a-z][a-z0-9+.-]*:)?//")
HOST_PART = re.compile(r"^([^/]*//[^/?#]*)/?")

# Overall URL shape accepted from clients
SUPPORTED_URL = re.compile(
    r"^(?:https?://)?(?:[\w-]+\.)*"
    r"(?:tiktok\.com|instagram\.com|instagr\.am|facebook\.com|fb\.watch"
    r"|youtube\.com|youtu\.be|twitter\.com|x\.com)/.+$",
    re.IGNORECASE,
)


# =============================================================================
# Identifier Patterns
# =============================================================================

_YOUTUBE_ID = r"([A-Za-z0-9_-]{11})"

_YOUTUBE_PATTERNS = [
    re.compile(r"youtu\.be/" + _YOUTUBE_ID, re.IGNORECASE),
    re.compile(r"[?&]v=" + _YOUTUBE_ID),
    re.compile(r"/shorts/" + _YOUTUBE_ID, re.IGNORECASE),
    re.compile(r"/embed/" + _YOUTUBE_ID, re.IGNORECASE),
    re.compile(r"/live/" + _YOUTUBE_ID, re.IGNORECASE),
]

# Pre-compiled patterns per platform, tried in order
IDENTIFIER_PATTERNS = {
    Platform.YOUTUBE: _YOUTUBE_PATTERNS,
    Platform.YOUTUBE_MUSIC: _YOUTUBE_PATTERNS,
    Platform.INSTAGRAM: [
        re.compile(r"instagram\.com/(?:[\w.]+/)?(?:p|reel|reels|tv)/([\w-]+)", re.IGNORECASE),
        re.compile(r"instagr\.am/(?:p|reel)/([\w-]+)", re.IGNORECASE),
    ],
    Platform.TIKTOK: [
        re.compile(r"tiktok\.com/@[\w.-]+/video/(\d+)", re.IGNORECASE),
        re.compile(r"(?:vm|vt)\.tiktok\.com/([\w-]+)", re.IGNORECASE),
        re.compile(r"tiktok\.com/t/([\w-]+)", re.IGNORECASE),
    ],
    Platform.FACEBOOK: [
        re.compile(r"facebook\.com/.+/videos/(?:[\w.-]+/)?(\d+)", re.IGNORECASE),
        re.compile(r"facebook\.com/watch/?\?(?:.*&)?v=(\d+)", re.IGNORECASE),
        re.compile(r"facebook\.com/reel/(\d+)", re.IGNORECASE),
        re.compile(r"fb\.watch/([\w-]+)", re.IGNORECASE),
    ],
    Platform.TWITTER: [
        re.compile(r"(?:twitter|x)\.com/[\w]+/status(?:es)?/(\d+)", re.IGNORECASE),
    ],
}


# =============================================================================
# Helper Functions
# =============================================================================

def detect_platform(url: str) -> Platform:
    """Detect which platform a URL belongs to."""
    lowered = (url or "").strip().lower()
    if not SCHEME_PREFIX.match(lowered):
        lowered = "//" + lowered
    # Host always ends in "/" so needles can anchor on it
    lowered = HOST_PART.sub(r"\1/", lowered, count=1)
    for needle, platform in PLATFORM_DOMAINS:
        if needle in lowered:
            return platform
    return Platform.UNKNOWN


def extract_identifier(url: str, platform: Platform) -> Optional[str]:
    """Pull the platform-specific media id out of a URL, if present."""
    for pattern in IDENTIFIER_PATTERNS.get(platform, []):
        match = pattern.search(url or "")
        if match:
            return match.group(1)
    return None


def is_supported_url(url: str) -> bool:
    """Check that a URL looks like a link to one of the supported hosts."""
    return bool(SUPPORTED_URL.match((url or "").strip()))


__all__ = [
    "Platform",
    "KNOWN_PLATFORMS",
    "PLATFORM_DOMAINS",
    "detect_platform",
    "extract_identifier",
    "is_supported_url",
]
