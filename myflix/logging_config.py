"""
Logging setup for the myFlix API.

Two things differ from a plain dictConfig:

- Probe traffic on ``/health`` and ``/healthz`` is dropped from the uvicorn
  access log.
- Token rejections are logged by the auth module and the auth middleware with
  their precise cause (bad signature, expired, deleted user). Clients only
  ever see "Unauthorized", so those loggers get their own level, settable
  with ``AUTH_LOG_LEVEL``, to trace auth problems without turning the whole
  application up to DEBUG.
"""

import logging
import logging.config
from typing import Any, Dict, Optional

QUIET_PATHS = frozenset({"/health", "/healthz"})

AUTH_LOGGERS = ("myflix.modules.auth", "myflix.modules.middleware")


class HealthCheckFilter(logging.Filter):
    """Filter to suppress health check endpoint logs."""

    def __init__(self, paths=QUIET_PATHS):
        super().__init__()
        self.paths = frozenset(paths)

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True

        # uvicorn passes (client, method, path, http_version, status)
        args = record.args
        if isinstance(args, tuple) and len(args) >= 3:
            method, path = args[1], str(args[2])
            return not (method == "GET" and path.split("?", 1)[0] in self.paths)
        return True


def get_logging_config(level: str = "INFO", auth_level: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the dictConfig for uvicorn and the application.

    Args:
        level: Level of the ``myflix`` logger
        auth_level: Level of the authentication loggers; defaults to ``level``
    """
    handler = {"handlers": ["default"], "propagate": False}
    loggers: Dict[str, Any] = {
        "uvicorn": dict(handler, level="INFO"),
        "uvicorn.error": dict(handler, level="INFO"),
        "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
        "myflix": dict(handler, level=level),
    }
    for name in AUTH_LOGGERS:
        loggers[name] = dict(handler, level=auth_level or level)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "health_check_filter": {"()": HealthCheckFilter},
        },
        "formatters": {
            "default": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
            "access": {"format": "%(message)s"},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["health_check_filter"],
            },
        },
        "loggers": loggers,
        "root": {"level": "INFO", "handlers": ["default"]},
    }


def configure_logging(level: str = "INFO", auth_level: Optional[str] = None) -> None:
    """Apply the logging configuration process-wide."""
    logging.config.dictConfig(get_logging_config(level, auth_level))
