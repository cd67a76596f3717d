"""
NaoLoad
=======

Resolve social-media URLs (TikTok, Instagram, Facebook, YouTube, Twitter/X)
into direct download links through pluggable third-party backends.
"""

__version__ = "1.0.0"
