"""
Conversion settings - environment driven configuration and logging setup
"""

import logging
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

LOG_LEVEL = os.environ.get('UNIT_CONVERTER_LOG_LEVEL', DEFAULT_LOG_LEVEL)
LOG_FORMAT = os.environ.get('UNIT_CONVERTER_LOG_FORMAT', DEFAULT_LOG_FORMAT)


def resolve_log_level(level: Optional[str] = None) -> int:
    """
    Resolve a level name to a logging level.
    Unknown names fall back to DEFAULT_LOG_LEVEL.
    """
    level_name = (level or LOG_LEVEL or DEFAULT_LOG_LEVEL).upper().strip()
    resolved = logging.getLevelName(level_name)
    if not isinstance(resolved, int):
        return logging.getLevelName(DEFAULT_LOG_LEVEL)
    return resolved


def configure_logging(level: Optional[str] = None) -> int:
    """Configure root logging for command line entry points."""
    resolved = resolve_log_level(level)
    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT
    )
    logging.getLogger().setLevel(resolved)
    return resolved
