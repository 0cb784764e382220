"""
Logging utilities for desksetup
"""

import logging
from pathlib import Path


def setup_logging(debug_mode=False, log_file=None):
    """Setup logging configuration"""
    level = logging.DEBUG if debug_mode else logging.INFO

    handlers = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_path))
        except OSError as e:
            # Console logging still works without the file
            print(f"⚠️ Cannot open log file {log_path}: {e}", flush=True)

    logging.basicConfig(
        level=level,
        format='[%(asctime)s] %(levelname)s: %(message)s',
        datefmt='%H:%M:%S',
        handlers=handlers,
        force=True
    )

    return logging.getLogger(__name__)


def log_banner(title, logger=None, width=60):
    """Log a section banner"""
    logger = logger or logging.getLogger(__name__)
    logger.info("=" * width)
    logger.info(title)
    logger.info("=" * width)
