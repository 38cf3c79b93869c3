"""Logging configuration"""

import logging

from app.config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure the root logger once for the API process and scripts."""
    level = getattr(logging, settings.log_level, logging.INFO)
    # force=True: uvicorn configures the root logger first
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    # APScheduler logs every job run at INFO
    logging.getLogger("apscheduler").setLevel(max(level, logging.WARNING))
