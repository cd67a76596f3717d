"""
NaoLoad - Core Package
======================

Framework essentials: config, constants, and logging.
"""

from naoload.core.config import Config, get_config
from naoload.core.logger import logger

__all__ = ["Config", "get_config", "logger"]
