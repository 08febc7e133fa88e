import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

__all__ = ["configure_logging", "default_log_dir", "logger", "read_log_tail"]

LOG_FILE_NAME = "dam-agent.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Every dam_agent.* module logger propagates here.
logger = logging.getLogger("dam_agent")


def default_log_dir() -> Path:
    if os.environ.get("DAM_LOG_DIR"):
        return Path(os.environ["DAM_LOG_DIR"])
    config_dir = os.environ.get("DAM_CONFIG_DIR", Path.home() / ".dam-agent")
    return Path(config_dir).expanduser() / "log"


def configure_logging(
    log_dir: str | Path | None = None, level: str | None = None
) -> logging.Logger:
    """Attach the rotating file handler to the package logger once."""
    level_name = (level or os.environ.get("DAM_LOG_LEVEL", "INFO")).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    if logger.handlers:
        return logger

    directory = Path(log_dir) if log_dir else default_log_dir()
    directory.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    _fh = RotatingFileHandler(
        directory / LOG_FILE_NAME,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    _fh.setFormatter(formatter)
    logger.addHandler(_fh)

    if os.environ.get("DAM_LOG_CONSOLE"):
        _sh = logging.StreamHandler()
        _sh.setFormatter(formatter)
        logger.addHandler(_sh)

    logger.info("Logging to %s", directory / LOG_FILE_NAME)
    return logger


def read_log_tail(lines: int = 50, log_dir: str | Path | None = None) -> list[str]:
    """Last ``lines`` lines of the current log file, empty if none exists."""
    path = (Path(log_dir) if log_dir else default_log_dir()) / LOG_FILE_NAME
    if not path.exists():
        return []
    with path.open(encoding="utf-8", errors="replace") as f:
        return [line.rstrip("\n") for line in f.readlines()[-lines:]]
