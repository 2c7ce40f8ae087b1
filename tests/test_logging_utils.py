"""Tests for installer logging setup."""

import logging
from pathlib import Path

from authoring_installer.logging_utils import FALLBACK_LOG_NAME, configure_logging


def test_writes_to_the_requested_file(tmp_path):
    path = tmp_path / "logs" / "install.log"

    actual = configure_logging(log_path=str(path), also_console=False)
    logging.getLogger("authoring_installer.test").info("hello from the test")

    assert actual == str(path)
    assert "hello from the test" in path.read_text(encoding="utf-8")


def test_second_call_keeps_the_first_handlers(tmp_path):
    first = configure_logging(log_path=str(tmp_path / "a.log"), also_console=False)
    count = len(logging.getLogger().handlers)

    second = configure_logging(log_path=str(tmp_path / "b.log"))

    assert second == first
    assert len(logging.getLogger().handlers) == count


def test_unwritable_path_falls_back_to_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    actual = configure_logging(log_path=str(blocker / "install.log"), also_console=False)

    assert Path(actual).resolve() == (tmp_path / FALLBACK_LOG_NAME).resolve()
    assert "logging to" in (tmp_path / FALLBACK_LOG_NAME).read_text(encoding="utf-8")
