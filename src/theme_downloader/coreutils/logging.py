import logging
import os
from datetime import datetime
from typing import Optional

from .env import env_get


def setup_logging(level: Optional[int] = None, log_dir: Optional[str] = None):
    """Setup basic logging configuration

    Args:
        level: Logging level, defaults to LOG_LEVEL from the environment
        log_dir: Directory for the dated log file; empty disables file logging

    Returns:
        logging.Logger: Logger for this module
    """
    if level is None:
        level_name = (env_get("LOG_LEVEL", "INFO") or "INFO").upper()
        level = getattr(logging, level_name, logging.INFO)

    if log_dir is None:
        log_dir = env_get("LOG_DIR", "") or ""

    handlers = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            logging.FileHandler(
                os.path.join(
                    log_dir,
                    f"theme_download_{datetime.now().strftime('%Y-%m-%d')}.log",
                )
            )
        )

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=handlers,
        force=True,
    )
    return logging.getLogger(__name__)
