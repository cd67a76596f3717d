"""
NaoLoad - Shared Constants
==========================

Centralized constants for the entire codebase.
Import from here instead of defining locally.
"""


# =============================================================================
# Media Kinds
# =============================================================================

MEDIA_KINDS = ("video", "audio")

# Log format recorded per media kind
FORMAT_BY_KIND = {
    "video": "mp4",
    "audio": "mp3",
}

VALID_FORMATS = frozenset(FORMAT_BY_KIND.values())


# =============================================================================
# HTTP
# =============================================================================

USER_AGENT = "NaoLoad/1.0"

# Characters of a raw upstream payload kept in error messages
RAW_PAYLOAD_PREVIEW = 500


# =============================================================================
# Admin Dashboard
# =============================================================================

RECENT_LOGS_LIMIT = 50
NO_TOP_PLATFORM = "N/A"
