import logging

import structlog

LOGGER_NAME = "namespace-backup-webhook"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def json_formatter() -> logging.Formatter:
    """Render stdlib log records as one JSON object per line, `extra=` fields included."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.ExtraAdder(),
            structlog.processors.TimeStamper(fmt="iso"),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(default=str),
        ],
    )


def parse_level(log_level: str | None) -> int | None:
    level = logging.getLevelName((log_level or "info").upper())
    return level if isinstance(level, int) else None


def configure_logging(log_format: str = "text", log_level: str = "info") -> logging.Logger:
    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(json_formatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    level = parse_level(log_level)
    logging.basicConfig(level=level or logging.INFO, handlers=[handler])

    log = logging.getLogger(LOGGER_NAME)
    if level is None:
        log.error("Failed to parse log level %r; using info", log_level)
    return log
