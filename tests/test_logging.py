"""
Tests for the package logging setup.
"""

import logging

import numpy as np
import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from structural_change.analysis.engine import StructuralChange
from structural_change.divergence import EuclideanDivergence
from structural_change.utils.logging import LOGGER_NAME, get_logger, setup_logging


@pytest.fixture
def restore_package_logger():
    """Put the package logger back the way the library import left it."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


class TestLibraryDefaults:
    """Tests for logging when no script has configured it."""

    def test_null_handler_installed(self):
        handlers = logging.getLogger(LOGGER_NAME).handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)

    def test_child_loggers(self):
        assert get_logger() is logging.getLogger(LOGGER_NAME)
        assert get_logger("engine") is logging.getLogger(f"{LOGGER_NAME}.engine")
        assert get_logger(f"{LOGGER_NAME}.engine") is get_logger("engine")


class TestSetupLogging:
    """Tests for script logging setup."""

    def test_file_log(self, tmp_path, restore_package_logger):
        log_file = tmp_path / "logs" / "run.log"
        logger = setup_logging(level="debug", log_file=log_file)

        assert logger.level == logging.DEBUG
        assert not any(isinstance(h, logging.NullHandler) for h in logger.handlers)

        StructuralChange(1).calculate(np.array([[1.0], [1.0], [5.0], [5.0]]), EuclideanDivergence())
        for handler in logger.handlers:
            handler.flush()

        text = log_file.read_text()
        assert f"{LOGGER_NAME}.engine" in text
        assert "timescale 0 (w=1)" in text

    def test_repeated_setup_does_not_stack_handlers(self, restore_package_logger):
        setup_logging()
        logger = setup_logging()

        assert len(logger.handlers) == 1

    def test_unknown_level_name(self, restore_package_logger):
        with pytest.raises(ValueError):
            setup_logging(level="chatty")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
