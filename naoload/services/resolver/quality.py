"""
NaoLoad - Quality Selection
===========================

Pick the best rendition when an upstream offers several.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence


# Higher is better; anything not listed ranks lowest
QUALITY_RANKS = {
    "2160p": 8,
    "1440p": 7,
    "1080p": 6,
    "hd": 5,
    "720p": 5,
    "480p": 4,
    "sd": 3,
    "360p": 3,
    "240p": 2,
    "144p": 1,
}

_HEIGHT = re.compile(r"(\d{3,4})p", re.IGNORECASE)


@dataclass
class Rendition:
    """One downloadable variant of a media item."""
    url: str
    quality: Optional[str] = None
    has_video: bool = True
    has_audio: bool = True
    extension: Optional[str] = None


def quality_rank(quality: Optional[str]) -> int:
    """Rank a quality label such as '1080p', 'HD' or 'mp4 (720p)'."""
    if not quality:
        return 0
    label = quality.strip().lower()
    if label in QUALITY_RANKS:
        return QUALITY_RANKS[label]
    match = _HEIGHT.search(label)
    if match:
        return QUALITY_RANKS.get(f"{match.group(1)}p", 0)
    return 0


def select_best_rendition(candidates: Sequence[Rendition]) -> Optional[Rendition]:
    """
    Choose the preferred rendition.

    Audio+video beats video-only; among equals the higher quality rank wins;
    ties keep input order.
    """
    best: Optional[Rendition] = None
    best_key = None
    for candidate in candidates:
        key = (candidate.has_video and candidate.has_audio, quality_rank(candidate.quality))
        if best_key is None or key > best_key:
            best, best_key = candidate, key
    return best


def rendition_from_dict(item: Dict[str, Any]) -> Optional[Rendition]:
    """Build a Rendition from a loosely-shaped upstream format entry."""
    url = item.get("url") or item.get("link") or item.get("download_url")
    if not isinstance(url, str) or not url:
        return None

    quality = item.get("quality") or item.get("qualityLabel") or item.get("format_note")
    if not quality and item.get("height"):
        quality = f"{item['height']}p"

    has_video = _flag(item, ("hasVideo", "has_video", "videoAvailable"), default=True)
    has_audio = _flag(item, ("hasAudio", "has_audio", "audioAvailable"), default=True)

    # yt-dlp style codec markers
    if item.get("vcodec") == "none":
        has_video = False
    if item.get("acodec") == "none":
        has_audio = False

    media_type = str(item.get("type") or "").lower()
    if media_type == "audio":
        has_video = False
    elif media_type == "video_only":
        has_audio = False

    return Rendition(
        url=url,
        quality=str(quality) if quality else None,
        has_video=has_video,
        has_audio=has_audio,
        extension=item.get("ext") or item.get("extension"),
    )


def _flag(item: Dict[str, Any], keys, default: bool) -> bool:
    for key in keys:
        if key in item:
            return bool(item[key])
    return default


def renditions_from_list(items: List[Any]) -> List[Rendition]:
    """Convert an upstream format list, dropping entries without a URL."""
    renditions = []
    for item in items:
        if isinstance(item, dict):
            rendition = rendition_from_dict(item)
            if rendition:
                renditions.append(rendition)
    return renditions


__all__ = [
    "QUALITY_RANKS",
    "Rendition",
    "quality_rank",
    "select_best_rendition",
    "rendition_from_dict",
    "renditions_from_list",
]
