"""Logging for the scorebook server.

structlog events and stdlib records (uvicorn, httpx) are rendered by the
same stdlib handlers, so both end up in one stream with one format. Output
is chosen by environment:

- LOG_FORMAT: "json" for log shipping, "console" (default) for people.
- LOG_LEVEL: root level name, INFO by default.
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Literal

import structlog
from pydantic import field_validator
from pydantic_settings import BaseSettings

LOG_FILE_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"

# Loggers that emit one line per narrator call or API request at INFO.
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")

# Fields added to every record, whether it came from structlog or stdlib.
_RECORD_FIELDS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


class LoggingSettings(BaseSettings):
    model_config = {"env_prefix": "LOG_"}

    format: Literal["json", "console"] = "console"
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("format", mode="before")
    @classmethod
    def _normalize_format(cls, value: str) -> str:
        return value.strip().lower() or "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def level_number(self) -> int:
        return logging.getLevelNamesMapping()[self.level]


def _running_under_pytest() -> bool:
    return "pytest" in sys.modules


def configure_structlog() -> None:
    """Hand structlog events to stdlib logging (and so to caplog in tests)."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_RECORD_FIELDS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def _handler(handler: logging.Handler, *, json_output: bool, colors: bool = False) -> logging.Handler:
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=colors)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_RECORD_FIELDS,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                renderer,
            ],
        ),
    )
    return handler


def setup_logging(log_dir: Path | str | None = None, settings: LoggingSettings | None = None) -> Path | None:
    """Install stdout (and optionally file) handlers on the root logger.

    Returns the log file path when log_dir is given outside the test suite.
    """
    if settings is None:
        settings = LoggingSettings()
    json_output = settings.format == "json"

    configure_structlog()

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(settings.level_number)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.addHandler(_handler(logging.StreamHandler(sys.stdout), json_output=json_output, colors=sys.stdout.isatty()))

    if log_dir is None or _running_under_pytest():
        return None
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / f"scorebook-{datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)}.log"
    root.addHandler(_handler(logging.FileHandler(log_path), json_output=json_output))
    return log_path
