import json
import logging
from logging.config import dictConfig

# Fields of the per-call payload emitted by the services, in output order.
OPERATION_FIELDS: tuple[str, ...] = (
    "operation",
    "bucket",
    "object",
    "outcome",
    "duration_ms",
)


def setup_logging(level: str = "INFO", *, backend_level: str | None = None) -> None:
    """Configure JSON logs for the gateway.

    ``backend_level`` sets the ``gateway.backend`` logger separately, so the
    per-call DEBUG lines can be enabled without turning on DEBUG everywhere.
    """
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": JsonFormatter,
                },
                "plain": {
                    "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                },
                "startup_console": {
                    "class": "logging.StreamHandler",
                    "formatter": "plain",
                },
            },
            "root": {
                "level": level,
                "handlers": ["console"],
            },
            "loggers": {
                "gateway.startup": {
                    "handlers": ["startup_console"],
                    "level": "INFO",
                    "propagate": False,
                },
                "gateway.backend": {
                    "level": backend_level or level,
                },
            },
        }
    )


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Operation fields from ``extra={"extra": {...}}`` are emitted in a fixed
    order right after the message; any other extra keys follow them.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            for field in OPERATION_FIELDS:
                if field in extra:
                    payload[field] = extra[field] if extra[field] != "" else None
            for key, value in extra.items():
                if key not in OPERATION_FIELDS:
                    payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)
