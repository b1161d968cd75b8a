"""Logging configuration"""
import logging
import sys

from config.settings import get_settings


def setup_logging(level=None):
    """Configure application logging"""
    if level is None:
        level = get_settings().LOG_LEVEL

    logging.basicConfig(
        level=getattr(logging, level) if isinstance(level, str) else level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )
