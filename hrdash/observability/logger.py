"""structlog setup shared by the CLI and services.

Events are rendered by stdlib handlers through ``ProcessorFormatter``: the
terminal gets the configured format on stderr (stdout is reserved for CLI
tables), and an optional log file always receives JSON lines.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from structlog.types import EventDict, Processor

__version__ = "0.3.0"

LOG_FORMATS = ("json", "console")


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["app"] = "hrdash"
    event_dict["version"] = __version__
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]


def _formatter(log_format: str, colors: bool = False) -> structlog.stdlib.ProcessorFormatter:
    if log_format == "console":
        tail: list[Processor] = [structlog.dev.ConsoleRenderer(colors=colors)]
    else:
        tail = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *tail],
    )


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: str | Path | None = None,
) -> None:
    """Configure structlog and the root logger.

    Calling again replaces the previous handlers, so the CLI can reconfigure
    once the config file has been read.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "json" or "console" for stderr output
        log_file: Optional path that receives JSON lines
    """
    if log_format not in LOG_FORMATS:
        log_format = "json"
    level = getattr(logging, str(log_level).upper(), logging.INFO)

    structlog.configure(
        processors=_shared_processors() + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(_formatter(log_format, colors=sys.stderr.isatty()))
    handlers: list[logging.Handler] = [stderr_handler]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(_formatter("json"))
        handlers.append(file_handler)

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def setup_logging_from_config(config: dict[str, Any]) -> None:
    """Apply the ``logging`` section of a loaded config."""
    section = config.get("logging") or {}
    setup_logging(
        log_level=section.get("level") or "INFO",
        log_format=section.get("format") or "json",
        log_file=section.get("file"),
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# Usable defaults until the CLI applies the loaded config
setup_logging()
