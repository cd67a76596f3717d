"""
NaoLoad - Download Models
=========================

Request schemas for the download and usage-log endpoints.

Fields are optional at the schema level so a missing value reaches the
route and comes back as INVALID_INPUT with a specific message.
"""

from typing import Optional

from pydantic import BaseModel, Field


class DownloadRequest(BaseModel):
    """Body of POST /download."""

    url: Optional[str] = Field(default=None, description="Social-media page URL")
    type: Optional[str] = Field(default=None, description="video (default) or audio")


class LogDownloadRequest(BaseModel):
    """Body of POST /log-download."""

    platform: Optional[str] = None
    format: Optional[str] = Field(default=None, description="mp4 or mp3")


__all__ = ["DownloadRequest", "LogDownloadRequest"]
