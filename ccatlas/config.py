from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
from logging.handlers import RotatingFileHandler
import os

from .errors import ConfigMissingError

LOG_FILE_NAME = "latest.log"
EXPORTS_DIR_NAME = "cc-atlas-exports"


@dataclass
class Settings:
    include_tools: bool = True
    include_timestamps: bool = True
    include_thinking: bool = False
    max_tool_files: int = 5
    output_dir: Path | None = None


def get_home() -> Path:
    home = os.environ.get("HOME")
    if not home:
        raise ConfigMissingError("HOME is not set; cannot locate the session log store")
    return Path(home)


def get_claude_home() -> Path:
    env = os.environ.get("CLAUDE_CONFIG_DIR")
    if env:
        return Path(env).expanduser()
    return get_home() / ".claude"


def get_projects_root() -> Path:
    return get_claude_home() / "projects"


def get_exports_dir() -> Path:
    env = os.environ.get("CC_ATLAS_EXPORTS_DIR")
    if env:
        return Path(env).expanduser()
    return get_home() / "Desktop" / EXPORTS_DIR_NAME


def get_app_home() -> Path:
    env = os.environ.get("CC_ATLAS_HOME")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".cc-atlas"


def get_log_dir() -> Path:
    return get_app_home() / "logs"


def configure_logging() -> logging.Logger:
    logger = logging.getLogger("ccatlas")
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    try:
        log_dir = get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
    except (OSError, RuntimeError):
        # Fall back to stderr only if log directory fails.
        logging.basicConfig(level=logging.INFO)
        return logger

    log_path = log_dir / LOG_FILE_NAME
    handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=5)
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
