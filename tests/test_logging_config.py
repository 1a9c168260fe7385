"""
Tests for logging configuration.
"""

import logging

import pytest

from myflix.logging_config import AUTH_LOGGERS, HealthCheckFilter, get_logging_config


def access_record(method, path, status=200):
    """Build a record the way uvicorn's access logger does."""
    return logging.LogRecord(
        "uvicorn.access", logging.INFO, __file__, 1,
        '%s - "%s %s HTTP/%s" %d', ("127.0.0.1:5000", method, path, "1.1", status), None,
    )


@pytest.mark.parametrize("path", ["/health", "/healthz", "/healthz?probe=1"])
def test_health_probes_suppressed(path):
    assert HealthCheckFilter().filter(access_record("GET", path)) is False


@pytest.mark.parametrize("method,path", [
    ("GET", "/movies"),
    ("GET", "/movies/health"),
    ("GET", "/users/healthy1"),
    ("POST", "/health"),
])
def test_other_access_logs_kept(method, path):
    assert HealthCheckFilter().filter(access_record(method, path)) is True


def test_application_logs_kept():
    record = logging.LogRecord("myflix.main", logging.ERROR, __file__, 1, "GET /health failed", None, None)

    assert HealthCheckFilter().filter(record) is True


def test_app_logger_level():
    config = get_logging_config("DEBUG")

    assert config["loggers"]["myflix"]["level"] == "DEBUG"
    for name in AUTH_LOGGERS:
        assert config["loggers"][name]["level"] == "DEBUG"


def test_auth_loggers_have_their_own_level():
    config = get_logging_config("WARNING", auth_level="DEBUG")

    assert config["loggers"]["myflix"]["level"] == "WARNING"
    assert config["loggers"]["myflix.modules.auth"]["level"] == "DEBUG"
    assert config["loggers"]["myflix.modules.middleware"]["level"] == "DEBUG"
