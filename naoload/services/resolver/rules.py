"""
NaoLoad - Extraction Rules
==========================

Ordered rules that pull a media URL out of an untyped upstream payload.

Keyless endpoints are unversioned and change shape without notice, so each
known shape is one rule. Rules are tried in order and the first match wins.
Support a new shape by adding a rule to ``EXTRACTION_RULES``.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from .quality import renditions_from_list, select_best_rendition
from .result import MediaResult, PickerItem


# Envelopes that commonly wrap the useful part of a response
ENVELOPE_KEYS = ("data", "result", "response")

VIDEO_URL_KEYS = ("download_url", "hdplay", "play", "video_url", "video", "nowm", "url", "link")
AUDIO_URL_KEYS = ("audio_url", "music", "audio", "mp3")

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".heic")


@dataclass(frozen=True)
class ExtractionRule:
    """A named payload shape and the function that reads it."""
    name: str
    extract: Callable[[Dict[str, Any], str, str], Optional[MediaResult]]


# =============================================================================
# Helpers
# =============================================================================

def _http_url(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.startswith(("http://", "https://")):
        return value
    return None


def _item_url(item: Any) -> Optional[str]:
    if isinstance(item, str):
        return _http_url(item)
    if isinstance(item, dict):
        for key in ("url", "link", "download_url", "video_url", "image_url", "src"):
            url = _http_url(item.get(key))
            if url:
                return url
    return None


def _item_type(item: Any, url: str, default: str = "video") -> str:
    if isinstance(item, dict):
        declared = str(item.get("type") or item.get("media_type") or "").lower()
        if declared in ("video", "audio", "image"):
            return declared
        if declared in ("photo", "picture"):
            return "image"
        if item.get("video_url"):
            return "video"
    if url.split("?", 1)[0].lower().endswith(IMAGE_EXTENSIONS):
        return "image"
    return default


def _picker_items(items: Iterable[Any], default_type: str = "video") -> List[PickerItem]:
    picked = []
    for item in items:
        url = _item_url(item)
        if not url:
            continue
        item_type = _item_type(item, url, default_type)
        quality = item.get("quality") if isinstance(item, dict) else None
        thumbnail = None
        if isinstance(item, dict):
            thumbnail = _http_url(item.get("thumbnail") or item.get("thumb") or item.get("cover"))
        picked.append(PickerItem(
            url=url,
            type=item_type,
            quality=str(quality) if quality else None,
            thumbnail=thumbnail,
        ))
    return picked


def _list_at(doc: Dict[str, Any], keys: Iterable[str]) -> Optional[List[Any]]:
    for key in keys:
        value = doc.get(key)
        if isinstance(value, list) and value:
            return value
    return None


def envelopes(payload: Any) -> List[Dict[str, Any]]:
    """The payload itself followed by any dict envelopes it carries."""
    if not isinstance(payload, dict):
        return []
    found = [payload]
    for key in ENVELOPE_KEYS:
        inner = payload.get(key)
        if isinstance(inner, dict):
            found.append(inner)
    return found


# =============================================================================
# Rules
# =============================================================================

def _direct(doc: Dict[str, Any], kind: str, source_url: str) -> Optional[MediaResult]:
    keys = AUDIO_URL_KEYS + VIDEO_URL_KEYS if kind == "audio" else VIDEO_URL_KEYS
    for key in keys:
        url = _http_url(doc.get(key))
        # Some endpoints echo the requested URL back under "url"
        if url and url != source_url:
            return MediaResult.redirect(
                url,
                title=doc.get("title") if isinstance(doc.get("title"), str) else None,
                thumbnail=_http_url(doc.get("thumbnail") or doc.get("cover")),
            )
    return None


def _links(doc: Dict[str, Any], kind: str, source_url: str) -> Optional[MediaResult]:
    links = _list_at(doc, ("links",))
    if not links:
        return None
    renditions = renditions_from_list(links)
    if renditions:
        best = _choose(renditions, kind)
        return MediaResult.redirect(best.url, quality=best.quality)
    for link in links:
        url = _http_url(link)
        if url:
            return MediaResult.redirect(url)
    return None


def _formats(doc: Dict[str, Any], kind: str, source_url: str) -> Optional[MediaResult]:
    formats = _list_at(doc, ("formats",))
    if not formats:
        return None
    renditions = renditions_from_list(formats)
    if not renditions:
        return None
    best = _choose(renditions, kind)
    return MediaResult.redirect(best.url, quality=best.quality)


def _medias(doc: Dict[str, Any], kind: str, source_url: str) -> Optional[MediaResult]:
    medias = _list_at(doc, ("medias", "media"))
    if not medias:
        return None

    # Quality-labelled video/audio entries are renditions of one item
    dicts = [m for m in medias if isinstance(m, dict)]
    if dicts and len(dicts) == len(medias) and all(
        m.get("quality") and str(m.get("type") or "video").lower() in ("video", "audio")
        for m in dicts
    ):
        renditions = renditions_from_list(dicts)
        if renditions:
            best = _choose(renditions, kind)
            return MediaResult.redirect(best.url, quality=best.quality)

    items = _picker_items(medias)
    if not items:
        return None
    if len(items) == 1:
        return MediaResult.redirect(items[0].url, quality=items[0].quality, thumbnail=items[0].thumbnail)
    return MediaResult.choices(items)


def _carousel(doc: Dict[str, Any], kind: str, source_url: str) -> Optional[MediaResult]:
    slides = _list_at(doc, ("images", "carousel_media", "items", "slides"))
    if not slides:
        return None
    items = _picker_items(slides, default_type="image")
    if not items:
        return None
    return MediaResult.choices(items)


def _choose(renditions, kind: str):
    if kind == "audio":
        for rendition in renditions:
            if rendition.has_audio and not rendition.has_video:
                return rendition
    return select_best_rendition(renditions)


EXTRACTION_RULES = (
    ExtractionRule("direct", _direct),
    ExtractionRule("links", _links),
    ExtractionRule("formats", _formats),
    ExtractionRule("medias", _medias),
    ExtractionRule("carousel", _carousel),
)


def apply_rules(
    payload: Any,
    kind: str,
    source_url: str = "",
    rules: Iterable[ExtractionRule] = EXTRACTION_RULES,
) -> Optional[MediaResult]:
    """Return the result of the first rule that matches, else None."""
    docs = envelopes(payload)
    for rule in rules:
        for doc in docs:
            result = rule.extract(doc, kind, source_url)
            if result is not None:
                return result
    return None


__all__ = ["ExtractionRule", "EXTRACTION_RULES", "apply_rules", "envelopes"]
