# logging_setup.py
from __future__ import annotations

import logging
import logging.config

LOGGER_NAME = "schoology_export"

_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)

# attributes LogRecord sets itself; extra keys with these names would raise
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class DefaultContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "course_id"):
            record.course_id = "-"
        if not hasattr(record, "artifact"):
            record.artifact = "-"
        return True


def setup_logging(verbosity: int = 1) -> None:
    """0 = WARNING, 1 = INFO, 2+ = DEBUG."""
    level = _LEVELS[min(max(verbosity, 0), 2)]

    fmt = (
        "%(asctime)s %(levelname)s "
        "course=%(course_id)s artifact=%(artifact)s "
        "%(message)s"
    )

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"std": {"format": fmt}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "std",
                "level": level,
                "filters": ["default_context"]
            }
        },
        "loggers": {
            LOGGER_NAME: {"handlers": ["console"], "level": level, "propagate": False},
            # transport retries/fetches log on module loggers; propagation stays on
            "utils": {"handlers": ["console"], "level": level},
        },
        "filters": {
            "default_context": {
                "()": "logging_setup.DefaultContextFilter"
            }
        },
    })


class _Adapter(logging.LoggerAdapter):
    """Merges per-call extras under the bound context, prefixing clashes with meta_."""

    def process(self, msg: str, kwargs):
        extra = dict(self.extra)
        user_extra = kwargs.get("extra") or {}
        for k, v in user_extra.items():
            key = k if k not in _RECORD_ATTRS else f"meta_{k}"
            if key not in extra:  # don't clobber adapter defaults
                extra[key] = v
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(*, artifact: str, course_id: str | int = "-") -> logging.LoggerAdapter:
    """Project logger bound to an artifact name and, inside a course, its id."""
    base = logging.getLogger(LOGGER_NAME)
    return _Adapter(base, extra={"artifact": artifact, "course_id": course_id})
