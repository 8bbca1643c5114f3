"""Tests for logging setup."""

from __future__ import annotations

import logging
import os
from unittest.mock import patch

import structlog

from cube_makefile.core.logging import setup_logging


class TestSetupLogging:
    def test_explicit_level(self):
        setup_logging("debug")
        assert logging.getLogger("cube_makefile").level == logging.DEBUG

    def test_level_from_environment(self):
        with patch.dict(os.environ, {"CUBE_MAKEFILE_LOG_LEVEL": "info"}):
            setup_logging()
        assert logging.getLogger("cube_makefile").level == logging.INFO

    def test_default_level(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("CUBE_MAKEFILE_LOG_LEVEL", None)
            setup_logging()
        assert logging.getLogger("cube_makefile").level == logging.WARNING

    def test_json_format(self):
        with patch.dict(os.environ, {"CUBE_MAKEFILE_LOG_FORMAT": "json"}):
            setup_logging("warning")
        assert any(
            isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)
            for handler in logging.getLogger().handlers
        )
