"""Shared helpers: random strings, object hashing, hostname, version and logging."""

from __future__ import annotations

import dataclasses
import hashlib
import json
import logging
import os
import platform
import secrets
import socket
import string
import sys
from datetime import datetime, timedelta, timezone
from typing import Any

VERSION = "0.1.0"
LOG_ENV = "LAND_LOG"
LOGGER_NAME = "landkit"

_ALPHANUMERIC = string.ascii_letters + string.digits
_LOG_OFFSET = timezone(timedelta(hours=8))


def rand_string(size: int) -> str:
    """Return a random alphanumeric string of ``size`` characters."""
    return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(size))


def _json_default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def obj_hash(value: Any) -> str:
    """Serialize ``value`` to compact JSON and return its MD5 hex digest."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)
    content = json.dumps(
        value, default=_json_default, separators=(",", ":"), ensure_ascii=False
    )
    return hashlib.md5(content.encode("utf-8")).hexdigest()


def get_hostname() -> str:
    """Return the HOSTNAME environment variable, or the system hostname."""
    name = os.environ.get("HOSTNAME", "")
    if not name:
        name = socket.gethostname()
    return name


def short_version() -> str:
    """Return the short version string."""
    return VERSION


def _long_version() -> str:
    return (
        f"{VERSION}\n"
        f"python version: {platform.python_version()}\n"
        f"implementation: {platform.python_implementation()}"
    )


def print_version(binary: str, verbose: bool) -> None:
    """Print the version of ``binary``, with build details when verbose."""
    text = _long_version() if verbose else short_version()
    print(f"{binary} {text}")


class _OffsetFormatter(logging.Formatter):
    """Formats times as ``MM-DD HH:MM:SS.cc`` in UTC+8."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        moment = datetime.fromtimestamp(record.created, _LOG_OFFSET)
        return moment.strftime("%m-%d %H:%M:%S") + f".{moment.microsecond // 10000:02d}"


def init_logging(verbose: bool) -> logging.Logger:
    """Configure the package logger; the LAND_LOG variable overrides the level."""
    level_name = os.environ.get(LOG_ENV) or ("debug" if verbose else "info")
    level = logging.getLevelName(level_name.strip().upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_OffsetFormatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger