import json
import logging
import logging.config
from datetime import datetime, timezone

from .settings import settings

_MODULE_LEVELS = {
    "treasury_risk.polymarket.client": logging.WARNING,
    "treasury_risk.http": logging.INFO,
    "treasury_risk.risk.fetcher": logging.WARNING,
    "treasury_risk.risk.calculator": logging.INFO,
    "treasury_risk.services.risk_service": logging.INFO,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}

# Third-party loggers stay quiet even when the service runs at DEBUG.
_ALWAYS_QUIET = {"httpx", "httpcore"}

_STANDARD_ATTRS = set(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        try:
            message = record.getMessage()
        except TypeError:
            # Mismatched printf-style arguments; fall back to the raw message.
            message = str(record.msg)
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": message,
        }
        extra = _extract_extra(record)
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging() -> None:
    root_level = _coerce_log_level(settings.LOG_LEVEL, default=logging.INFO)
    if settings.ENV.lower() == "prod" and root_level < logging.INFO:
        root_level = logging.INFO

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": "treasury_risk.logging.JsonFormatter"},
                "plain": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"},
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "json" if settings.LOG_JSON else "plain",
                },
            },
            "root": {"level": root_level, "handlers": ["default"]},
            "loggers": {
                name: {"level": level}
                for name, level in _build_logger_levels(root_level).items()
            },
        }
    )


def _build_logger_levels(root_level: int) -> dict[str, int]:
    levels = {}
    for name, level in _MODULE_LEVELS.items():
        if root_level <= logging.DEBUG and name not in _ALWAYS_QUIET:
            level = logging.DEBUG
        levels[name] = max(level, root_level)
    return levels


def _extract_extra(record: logging.LogRecord) -> dict:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


def _coerce_log_level(value: str, default: int) -> int:
    if not value:
        return default
    level = logging.getLevelName(str(value).upper())
    return level if isinstance(level, int) else default
