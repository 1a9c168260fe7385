"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import List, Optional, Protocol

DEFAULT_TOKEN_TTL_SECONDS = 7 * 24 * 60 * 60
DEFAULT_CORS_ORIGINS = "http://localhost:8080,http://testsite.com"


@dataclass
class StorageConfig:
    """Redis connection configuration."""
    host: str
    port: int
    db: int
    password: Optional[str] = None

    @property
    def url(self) -> str:
        """Redis URL without password (password is passed separately)."""
        return f"redis://{self.host}:{self.port}/{self.db}"


@dataclass
class APIConfig:
    """API configuration."""
    port: int
    host: str
    debug: bool
    log_level: str
    cors_origins: List[str]
    auth_log_level: Optional[str] = None


@dataclass
class AuthConfig:
    """Token signing configuration."""
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_storage_config(self) -> StorageConfig:
        """Get storage configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_storage_config(self) -> StorageConfig:
        """Get Redis configuration from environment variables."""
        # Port might be in tcp://host:port format when injected by Kubernetes
        redis_port_env = os.getenv("REDIS_PORT", "6379")
        if redis_port_env.startswith("tcp://"):
            redis_port = int(redis_port_env.split(":")[-1])
        else:
            redis_port = int(redis_port_env)

        return StorageConfig(
            host=os.getenv("REDIS_HOST", "localhost"),
            port=redis_port,
            db=int(os.getenv("REDIS_DB", "0")),
            password=os.getenv("REDIS_PASSWORD") or None,
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        origins = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
        return APIConfig(
            port=int(os.getenv("API_PORT", "8080")),
            host=os.getenv("API_HOST", "0.0.0.0"),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            auth_log_level=(os.getenv("AUTH_LOG_LEVEL") or "").upper() or None,
        )

    def get_auth_config(self) -> AuthConfig:
        """Get token signing configuration from environment variables."""
        # Signing secret is required - no default for security
        secret = os.getenv("JWT_SECRET")
        if not secret:
            raise ValueError(
                "JWT_SECRET environment variable is required. "
                "Generate one with: python -c 'import secrets; print(secrets.token_hex(32))'"
            )

        return AuthConfig(
            jwt_secret=secret,
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            token_ttl_seconds=int(os.getenv("TOKEN_TTL_SECONDS", str(DEFAULT_TOKEN_TTL_SECONDS))),
        )


class StaticConfigProvider:
    """Provider returning fixed configuration objects (tests, embedding)."""

    def __init__(
        self,
        auth: AuthConfig,
        api: Optional[APIConfig] = None,
        storage: Optional[StorageConfig] = None,
    ):
        self._auth = auth
        self._api = api or APIConfig(
            port=8080,
            host="127.0.0.1",
            debug=False,
            log_level="INFO",
            cors_origins=DEFAULT_CORS_ORIGINS.split(","),
        )
        self._storage = storage or StorageConfig(host="localhost", port=6379, db=0)

    def get_storage_config(self) -> StorageConfig:
        return self._storage

    def get_api_config(self) -> APIConfig:
        return self._api

    def get_auth_config(self) -> AuthConfig:
        return self._auth
