"""Configuration providers for the myFlix API."""

from .provider import (
    APIConfig,
    AuthConfig,
    ConfigProvider,
    EnvConfigProvider,
    StaticConfigProvider,
    StorageConfig,
)

__all__ = [
    "APIConfig",
    "AuthConfig",
    "ConfigProvider",
    "EnvConfigProvider",
    "StaticConfigProvider",
    "StorageConfig",
]
