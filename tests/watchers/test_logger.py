import importlib
import logging
from pathlib import Path

import pytest

from dam_agent.watchers.logger import (
    LOG_FILE_NAME,
    configure_logging,
    default_log_dir,
    logger,
    read_log_tail,
)


@pytest.fixture
def clean_logger(monkeypatch):
    """Detach handlers around each test; the package logger is global."""
    monkeypatch.delenv("DAM_LOG_CONSOLE", raising=False)
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    logger.handlers.clear()
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)


class TestConfigureLogging:
    def test_writes_rotating_file(self, clean_logger, tmp_path):
        configure_logging(tmp_path, "debug")
        logging.getLogger("dam_agent.monitoring").info("tick analyzed")
        for handler in clean_logger.handlers:
            handler.flush()

        assert clean_logger.level == logging.DEBUG
        assert (tmp_path / LOG_FILE_NAME).exists()
        tail = read_log_tail(log_dir=tmp_path)
        assert "[INFO] dam_agent.monitoring: tick analyzed" in tail[-1]

    @pytest.mark.parametrize(
        "module",
        [
            "dam_agent.watchers.scheduler",
            "dam_agent.watchers.ocr",
            "dam_agent.watchers.screen_capture",
            "dam_agent.ui.notifications",
        ],
    )
    def test_module_loggers_reach_package_file(self, clean_logger, tmp_path, module):
        """Watcher and UI modules log under their own names"""
        configure_logging(tmp_path, "info")
        source = importlib.import_module(module)

        source.logger.info("hello")
        for handler in clean_logger.handlers:
            handler.flush()

        assert source.logger.name == module
        assert f"[INFO] {module}: hello" in read_log_tail(log_dir=tmp_path)[-1]

    def test_configures_handlers_once(self, clean_logger, tmp_path):
        configure_logging(tmp_path)
        configure_logging(tmp_path)
        assert len(clean_logger.handlers) == 1

    def test_console_handler_on_request(self, clean_logger, tmp_path, monkeypatch):
        monkeypatch.setenv("DAM_LOG_CONSOLE", "1")
        configure_logging(tmp_path)
        assert len(clean_logger.handlers) == 2


class TestLogLocation:
    def test_explicit_log_dir(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DAM_LOG_DIR", str(tmp_path))
        assert default_log_dir() == tmp_path

    def test_under_config_dir(self, monkeypatch, tmp_path):
        monkeypatch.delenv("DAM_LOG_DIR", raising=False)
        monkeypatch.setenv("DAM_CONFIG_DIR", str(tmp_path))
        assert default_log_dir() == Path(tmp_path) / "log"

    def test_tail_of_missing_file(self, tmp_path):
        assert read_log_tail(log_dir=tmp_path) == []

    def test_tail_limits_lines(self, tmp_path):
        (tmp_path / LOG_FILE_NAME).write_text("\n".join(f"line {i}" for i in range(10)) + "\n")
        assert read_log_tail(3, log_dir=tmp_path) == ["line 7", "line 8", "line 9"]
