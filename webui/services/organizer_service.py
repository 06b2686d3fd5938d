"""MediaOrganizer dependency for the API routes"""

import logging
import threading

from fastapi import Request

from config import Config, load_config
from logger import LOGGER_NAME
from organizer import MediaOrganizer


_lock = threading.Lock()


def build_organizer(config_path=None) -> MediaOrganizer:
    """Create an organizer from config.yaml, or from defaults when there is none yet"""
    logger = logging.getLogger(LOGGER_NAME)
    try:
        config = load_config(config_path)
    except FileNotFoundError as e:
        logger.warning(f"{e}; starting with an empty configuration")
        config = Config()
    return MediaOrganizer(config, logger=logger)


def get_organizer(request: Request) -> MediaOrganizer:
    """FastAPI dependency returning the app's MediaOrganizer, created on first use"""
    state = request.app.state
    with _lock:
        if getattr(state, 'organizer', None) is None:
            state.organizer = build_organizer(getattr(state, 'config_path', None))
        return state.organizer
