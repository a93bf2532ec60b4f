"""Tests for the gitboot.logging module."""

from __future__ import annotations

import json
import logging
import os
from unittest.mock import patch

import pytest
import structlog

from gitboot.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    def test_default_level_is_warning(self) -> None:
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("GITBOOT_LOG_LEVEL", None)
            configure_logging()

        assert logging.getLogger().level == logging.WARNING

    def test_custom_level(self) -> None:
        configure_logging(level=logging.DEBUG)

        assert logging.getLogger().level == logging.DEBUG

    def test_level_from_env(self) -> None:
        with patch.dict(os.environ, {"GITBOOT_LOG_LEVEL": "info"}):
            configure_logging()

        assert logging.getLogger().level == logging.INFO

    def test_repeated_calls_keep_one_handler(self) -> None:
        configure_logging()
        configure_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(force_json=True, level=logging.INFO)

        get_logger("gitboot.test").info("git_located", path="/usr/bin/git")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "git_located"
        assert event["path"] == "/usr/bin/git"
        assert event["level"] == "info"


class TestContext:
    def test_bind_and_clear(self) -> None:
        clear_context()
        bind_context(session="abc")
        assert structlog.contextvars.get_contextvars() == {"session": "abc"}

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}
