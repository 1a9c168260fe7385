"""
Composition root for the myFlix API.

Builds every module once, at startup, from a config provider and a Redis
client, and hands them out as a single explicit object. Route handlers get
it through FastAPI dependency injection instead of module-level globals.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from myflix.config.provider import ConfigProvider
from myflix.modules.auth import AuthenticationService, AuthFactory
from myflix.modules.auth.interfaces import Clock
from myflix.modules.movies import MovieCatalog
from myflix.modules.users import CredentialStore, FavoritesMutator
from myflix.modules.users.store import DEFAULT_BCRYPT_ROUNDS

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything a request handler may call into."""
    redis: object
    users: CredentialStore
    favorites: FavoritesMutator
    movies: MovieCatalog
    auth: AuthenticationService


def build_services(
    config_provider: ConfigProvider,
    redis_client,
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
    clock: Optional[Clock] = None,
) -> Services:
    """
    Wire the modules together.

    Args:
        config_provider: Source of auth configuration
        redis_client: Connected async Redis client
        bcrypt_rounds: bcrypt cost factor for new password hashes
        clock: Optional clock for token issue/verify

    Returns:
        Services holding one instance of each module
    """
    users = CredentialStore(redis_client, bcrypt_rounds=bcrypt_rounds)
    movies = MovieCatalog(redis_client)
    favorites = FavoritesMutator(redis_client, users, movie_lookup=movies)
    auth = AuthFactory.build(config_provider.get_auth_config(), users, clock=clock)

    logger.info("Services initialized")
    return Services(
        redis=redis_client,
        users=users,
        favorites=favorites,
        movies=movies,
        auth=auth,
    )
