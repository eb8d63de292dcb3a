"""Environment configuration, database DSN construction and logger setup."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

_log = logging.getLogger(__name__)

_DSN_KEYWORDS = ("host", "port", "user", "password", "dbname")


def load_env(path: str | os.PathLike = ".env", required: bool = True) -> bool:
    """Load variables from a dotenv file into the process environment.

    Variables already set in the environment are kept. When the file is
    missing, ``FileNotFoundError`` is raised if ``required`` is true;
    otherwise a notice is logged and ``False`` is returned.
    """
    env_file = Path(path)
    if not env_file.is_file():
        if required:
            raise FileNotFoundError(f"Error loading {env_file} file")
        _log.info("No %s file found. Using system environment variables", env_file)
        return False
    load_dotenv(env_file, override=False)
    return True


def get_env(key: str) -> str:
    """Return the value of an environment variable, or an empty string."""
    return os.environ.get(key, "")


def _env_name(keyword: str) -> str:
    return "DB_NAME" if keyword == "dbname" else f"DB_{keyword.upper()}"


def postgres_dsn() -> str:
    """Build a libpq keyword DSN from the DB_* environment variables."""
    parts = [f"{keyword}={get_env(_env_name(keyword))}" for keyword in _DSN_KEYWORDS]
    parts.append("sslmode=disable")
    return " ".join(parts)


def _configure(name: str, prefix: str, stream) -> logging.Logger:
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        logging.Formatter(
            f"{prefix}%(asctime)s %(filename)s:%(lineno)d: %(message)s",
            datefmt="%Y/%m/%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


def init_logger() -> tuple[logging.Logger, logging.Logger]:
    """Set up and return the (info, error) loggers writing to stdout and stderr."""
    info = _configure("storefront.info", "INFO: ", sys.stdout)
    error = _configure("storefront.error", "ERROR: ", sys.stderr)
    return info, error