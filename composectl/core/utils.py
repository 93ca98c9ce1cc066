"""Utility functions for composectl."""
import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_FILENAME = 'composectl.log'


def get_config_dir() -> Path:
    """Return the per-user composectl directory."""
    return Path.home() / '.composectl'


def default_config_path() -> Path:
    return get_config_dir() / 'projects.yml'


def setup_logging(debug: bool = False, log_dir: Optional[Path] = None) -> Path:
    """Set up logging for the composectl logger hierarchy.

    Everything goes to a log file; console output is only added in debug
    mode so regular command output stays clean. Returns the log file path.
    """
    log_level = logging.DEBUG if debug else logging.INFO
    log_dir = Path(log_dir) if log_dir else get_config_dir() / 'logs'
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILENAME

    logger = logging.getLogger('composectl')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if debug:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    logger.setLevel(log_level)
    return log_file


def get_log_file() -> Optional[Path]:
    """Return the file the composectl logger currently writes to, if any."""
    logger = logging.getLogger('composectl')
    handler = next((h for h in logger.handlers if isinstance(h, logging.FileHandler)), None)
    return Path(handler.baseFilename) if handler else None
