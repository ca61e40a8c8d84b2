"""Structured logging setup for the CLI tools, using structlog.

Two renderers share one processor chain: a coloured ConsoleRenderer when a
tool is run by hand, and a JSONRenderer in CI (``APP_ENV=production``) or
whenever a tool is given ``--json-logs``.  Log lines always go to stderr;
stdout is reserved for the reports the tools print, so
``validate --json > issues.json`` stays machine-readable.

httpx logs every request at INFO through the standard library.  That is
one line per setlist.fm search, so the ``httpx`` logger is held at WARNING
unless the tool runs at DEBUG.
"""

import logging
import os
import sys

import structlog

from concert_archive.utils.errors import ConfigurationError

_NOISY_LIBRARIES = ("httpx", "httpcore")


def _resolve_level(log_level: str) -> int:
    level = logging.getLevelName(str(log_level).upper())
    if not isinstance(level, int):
        raise ConfigurationError(
            message=f"Unknown log level {log_level!r}",
            provider_name="logging",
        )
    return level


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL (case-insensitive).
        json_output: Force JSON lines.  Otherwise JSON is used only when
            ``APP_ENV`` is ``"production"``.

    Returns:
        A configured structlog BoundLogger.

    Raises:
        ConfigurationError: If *log_level* is not a known level name.
    """
    level = _resolve_level(log_level)
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *shared_processors,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    library_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in _NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(library_level)

    return structlog.get_logger()


def bind_tool_context(tool: str, **context: object) -> None:
    """Attach the running tool's name (and any extra fields) to every log line."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(tool=tool, **context)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a named structlog logger, configuring defaults on first use."""
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)
