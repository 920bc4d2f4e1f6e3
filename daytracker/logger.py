"""
Logging configuration for daytracker.
Provides centralized logging setup.
"""

import logging
import sys

from .config import LOG_LEVEL, LOG_FORMAT, LOG_DIR

LOG_FILE = LOG_DIR / "daytracker.log"


def setup_logger(name: str) -> logging.Logger:
    """
    Set up a logger with both file and console handlers.
    
    Args:
        name: Name of the logger (typically __name__)
        
    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    
    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()
    
    # File handler - detailed logs
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(LOG_FILE)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)
    
    # Console handler - INFO and above
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)
    
    return logger


def log_day_stats(activities, logger: logging.Logger, name: str = "Day"):
    """Log statistics about a day's activity set."""
    if not activities:
        logger.debug(f"{name}: no activities")
        return
    
    total = sum(a.duration for a in activities)
    logger.debug(f"{name}: {len(activities)} activities, {total} minutes logged")
