"""
NaoLoad - Entry Point
=====================

Main entry point for the API server.
"""

import os
import sys

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dotenv import load_dotenv

load_dotenv()

import uvicorn

from naoload.api.config import get_api_config
from naoload.core.config import get_config
from naoload.core.logger import log


def main():
    """Main entry point."""
    api_config = get_api_config()
    config = get_config()

    if not config.RAPIDAPI_KEY and any(name in ("allinone", "audio") for name in config.BACKENDS):
        log.warning("RAPIDAPI_KEY not set; RapidAPI backends will fail", [
            ("Backends", ", ".join(config.BACKENDS)),
        ])

    log.tree("NaoLoad Starting", [
        ("Host", api_config.host),
        ("Port", str(api_config.port)),
        ("Backends", ", ".join(config.BACKENDS) or "None"),
        ("Store", config.DATABASE_PATH or "Disabled"),
    ], emoji="🌐")

    uvicorn.run(
        "naoload.api.app:app",
        host=api_config.host,
        port=api_config.port,
        log_level="warning",  # Reduce uvicorn logging
        access_log=False,  # We have our own logging middleware
    )


if __name__ == "__main__":
    main()
