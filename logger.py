#!/usr/bin/env python3
"""
Logging utilities for Media Organizer
Provides colored console logging and optional file logging.
"""

import copy
import logging
from pathlib import Path
from typing import Optional, Union


LOGGER_NAME = 'MediaOrganizer'


# ANSI color codes for terminal output
class Colors:
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name of console records"""
    COLORS = {
        'DEBUG': Colors.BLUE,
        'INFO': Colors.GREEN,
        'WARNING': Colors.YELLOW,
        'ERROR': Colors.RED,
        'CRITICAL': Colors.RED + Colors.BOLD
    }

    def format(self, record):
        # Work on a copy so the file handler never sees escape codes
        record = copy.copy(record)
        color = self.COLORS.get(record.levelname, Colors.RESET)
        record.levelname = f"{color}{record.levelname}{Colors.RESET}"
        return super().format(record)


def setup_logging(log_file: Optional[Union[str, Path]] = None, verbose: bool = False) -> logging.Logger:
    """
    Setup colored console logging with an optional file handler

    Args:
        log_file: Path to the log file, None for console only
        verbose: If True, enable DEBUG level logging

    Returns:
        The 'MediaOrganizer' logger
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Clear existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredFormatter('%(levelname)s: %(message)s'))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    return logger
