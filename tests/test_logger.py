#!/usr/bin/env python3
"""
Logging setup tests.
"""

import logging
import sys
from pathlib import Path

# Add parent directory to path to import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from logger import LOGGER_NAME, ColoredFormatter, Colors, setup_logging


class TestLogging:

    def test_file_log_has_no_color_codes(self, tmp_path):
        log_file = tmp_path / "organizer.log"
        logger = setup_logging(log_file, verbose=True)
        try:
            logger.warning("Source not found: /tmp/x.mkv")
            for handler in logger.handlers:
                handler.flush()
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

        text = log_file.read_text(encoding='utf-8')
        assert "WARNING" in text
        assert "Source not found: /tmp/x.mkv" in text
        assert '\033[' not in text

    def test_console_only_by_default(self):
        logger = setup_logging()
        try:
            assert logger.name == LOGGER_NAME
            assert logger.level == logging.INFO
            assert len(logger.handlers) == 1
        finally:
            logger.handlers.clear()

    def test_colored_level_name(self):
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "boom", None, None)
        output = ColoredFormatter('%(levelname)s: %(message)s').format(record)
        assert output == f"{Colors.RED}ERROR{Colors.RESET}: boom"
        assert record.levelname == "ERROR"
