"""
Unit tests for environment configuration.
"""

import os
from unittest.mock import patch

import pytest

from myflix.config import EnvConfigProvider, StaticConfigProvider
from myflix.config.provider import AuthConfig, DEFAULT_TOKEN_TTL_SECONDS


def test_missing_jwt_secret_fails():
    with patch.dict(os.environ, {}, clear=True):
        with pytest.raises(ValueError, match="JWT_SECRET"):
            EnvConfigProvider().get_auth_config()


def test_auth_config_from_env():
    env = {"JWT_SECRET": "s3cret", "TOKEN_TTL_SECONDS": "60"}
    with patch.dict(os.environ, env, clear=True):
        config = EnvConfigProvider().get_auth_config()

    assert config.jwt_secret == "s3cret"
    assert config.jwt_algorithm == "HS256"
    assert config.token_ttl_seconds == 60


def test_default_token_lifetime_is_seven_days():
    assert AuthConfig(jwt_secret="x").token_ttl_seconds == DEFAULT_TOKEN_TTL_SECONDS == 604800


def test_storage_defaults():
    with patch.dict(os.environ, {}, clear=True):
        config = EnvConfigProvider().get_storage_config()

    assert config.url == "redis://localhost:6379/0"
    assert config.password is None


def test_storage_port_in_tcp_form():
    env = {"REDIS_HOST": "redis", "REDIS_PORT": "tcp://10.0.0.5:6380", "REDIS_PASSWORD": "pw"}
    with patch.dict(os.environ, env, clear=True):
        config = EnvConfigProvider().get_storage_config()

    assert config.port == 6380
    assert config.url == "redis://redis:6380/0"
    assert config.password == "pw"


def test_api_config_cors_origins():
    env = {"CORS_ORIGINS": "https://a.example, https://b.example,", "LOG_LEVEL": "debug"}
    with patch.dict(os.environ, env, clear=True):
        config = EnvConfigProvider().get_api_config()

    assert config.cors_origins == ["https://a.example", "https://b.example"]
    assert config.log_level == "DEBUG"
    assert config.port == 8080


def test_api_config_default_origins():
    with patch.dict(os.environ, {}, clear=True):
        config = EnvConfigProvider().get_api_config()

    assert config.cors_origins == ["http://localhost:8080", "http://testsite.com"]


def test_static_provider():
    auth = AuthConfig(jwt_secret="x")
    provider = StaticConfigProvider(auth)

    assert provider.get_auth_config() is auth
    assert provider.get_storage_config().port == 6379
    assert provider.get_api_config().debug is False


def test_auth_log_level_from_env():
    with patch.dict(os.environ, {"AUTH_LOG_LEVEL": "debug"}, clear=True):
        assert EnvConfigProvider().get_api_config().auth_log_level == "DEBUG"

    with patch.dict(os.environ, {}, clear=True):
        assert EnvConfigProvider().get_api_config().auth_log_level is None
