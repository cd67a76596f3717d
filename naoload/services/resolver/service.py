"""
NaoLoad - Resolver Service
==========================

Main coordinator for resolving social-media URLs.
Detects the platform, then walks the configured backend chain until one
returns a usable result.
"""

from typing import List, Optional, Sequence

from naoload.core.constants import MEDIA_KINDS
from naoload.core.logger import logger
from .backends import Backend, supports
from .errors import BackendError, InvalidInput, UnsupportedPlatform
from .platforms import Platform, detect_platform, extract_identifier, is_supported_url
from .result import MediaResult, build_filename


class ResolverService:
    """Service for turning page URLs into direct media links."""

    def __init__(self, backends: Sequence[Backend]):
        self.backends: List[Backend] = list(backends)
        logger.tree("Resolver Service Initialized", [
            ("Backends", ", ".join(b.name for b in self.backends) or "None"),
        ], emoji="📥")

    @property
    def backend_names(self) -> List[str]:
        return [backend.name for backend in self.backends]

    @property
    def accepts_unknown(self) -> bool:
        """Whether any configured backend handles unrecognized URLs."""
        return any(backend.generic for backend in self.backends)

    def get_platform(self, url: str) -> Platform:
        """Detect which platform a URL belongs to."""
        platform = detect_platform(url)
        if platform is Platform.UNKNOWN:
            logger.tree("URL Platform Not Detected", [
                ("URL", url[:60]),
                ("Supported", "TikTok, Instagram, Facebook, YouTube, Twitter"),
            ], emoji="⚠️")
        return platform

    async def handle(self, url: Optional[str], kind: str = "video") -> MediaResult:
        """
        Resolve a URL into a redirect, picker or error result.

        Raises InvalidInput for an empty URL or unknown kind and
        UnsupportedPlatform when no backend takes the URL. Backend failures
        never escape; they come back as an error result.
        """
        url = (url or "").strip()
        if not url:
            raise InvalidInput("Missing URL")
        if kind not in MEDIA_KINDS:
            raise InvalidInput(f"Unsupported type: {kind}")

        platform = self.get_platform(url)
        if platform is Platform.UNKNOWN and not self.accepts_unknown:
            logger.tree("Resolve Rejected", [
                ("Reason", "Unsupported URL"),
                ("URL", url[:60]),
            ], emoji="❌")
            raise UnsupportedPlatform("Unsupported URL. Supported: TikTok, Instagram, Facebook, YouTube, Twitter.")

        if platform is not Platform.UNKNOWN and not is_supported_url(url):
            logger.tree("Unusual URL Shape", [
                ("Platform", platform.value),
                ("URL", url[:60]),
            ], emoji="⚠️")

        if not self.backends:
            return MediaResult.failure("NO_BACKEND_CONFIGURED", "No download backend is configured", http_status=500)

        identifier = extract_identifier(url, platform)
        logger.tree("Resolve Started", [
            ("Platform", platform.value.title()),
            ("Type", kind),
            ("Identifier", identifier or "None"),
            ("URL", url[:60] + "..." if len(url) > 60 else url),
        ], emoji="📥")

        last_failure: Optional[MediaResult] = None
        tried = 0
        for backend in self.backends:
            if not supports(backend, platform, kind):
                continue
            tried += 1

            try:
                result = await backend.resolve(url, identifier, kind, platform)
            except BackendError as e:
                logger.tree("Backend Failed", [
                    ("Backend", backend.name),
                    ("Code", e.code),
                    ("Error", e.message[:80] if e.message else "Unknown"),
                ], emoji="🔄")
                last_failure = MediaResult.failure(e.code, e.message, http_status=e.http_status, backend=backend.name)
                continue
            except Exception as e:
                logger.error_tree("Backend Crashed", e, [
                    ("Backend", backend.name),
                    ("Platform", platform.value),
                ])
                last_failure = MediaResult.failure(
                    "BACKEND_ERROR", f"{backend.name} returned an unusable response", backend=backend.name,
                )
                continue

            if not result.ok:
                logger.tree("Backend Returned Error", [
                    ("Backend", backend.name),
                    ("Code", result.error.get("code", "unknown")),
                ], emoji="🔄")
                result.backend = backend.name
                last_failure = result
                continue

            result.platform = platform.value
            result.backend = backend.name
            if not result.filename:
                result.filename = build_filename(platform.value, result.media_kind or kind)

            logger.tree("Resolve Success", [
                ("Platform", platform.value.title()),
                ("Backend", backend.name),
                ("Status", result.status),
                ("Items", str(len(result.picker)) if result.picker else "1"),
            ], emoji="✅")
            return result

        if last_failure is None:
            # Backends exist but none takes this platform/kind combination
            raise UnsupportedPlatform(f"No backend supports {kind} downloads from {platform.value}")

        logger.tree("Resolve Failed (All Backends)", [
            ("Platform", platform.value.title()),
            ("Tried", str(tried)),
            ("Error", (last_failure.error or {}).get("message", "")[:80]),
        ], emoji="❌")
        last_failure.platform = platform.value
        return last_failure


__all__ = ["ResolverService"]
