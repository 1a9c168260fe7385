"""Command line entry point: run the API or seed the movie catalog."""

import asyncio
import json
import logging

import click
import uvicorn
from dotenv import load_dotenv
from pydantic import ValidationError as PydanticValidationError

from myflix.config.provider import EnvConfigProvider
from myflix.logging_config import configure_logging, get_logging_config
from myflix.modules.api.models import MovieDocument
from myflix.modules.movies import MovieCatalog
from myflix.modules.storage import StorageModule

logger = logging.getLogger(__name__)

load_dotenv()


@click.group()
def main():
    """myFlix API administration."""


@main.command()
@click.option("--host", "host", default=None, help="Bind address (default: API_HOST)")
@click.option("--port", "port", default=None, type=int, help="Port (default: API_PORT)")
def serve(host, port):
    """Run the API server."""
    api = EnvConfigProvider().get_api_config()
    configure_logging(api.log_level, api.auth_log_level)
    uvicorn.run(
        "myflix.main:create_app",
        factory=True,
        host=host or api.host,
        port=port or api.port,
        log_level=api.log_level.lower(),
        reload=api.debug,
        log_config=get_logging_config(api.log_level, api.auth_log_level),
    )


def read_movie_file(path: str):
    """
    Load and validate a JSON array of movie documents.

    Raises:
        click.ClickException: File is not a JSON array of valid movies
    """
    with open(path, encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise click.ClickException(f"{path} is not valid JSON: {e}")

    if not isinstance(raw, list):
        raise click.ClickException(f"{path} must contain a JSON array of movies")

    documents = []
    for index, item in enumerate(raw):
        try:
            movie = MovieDocument.model_validate(item)
        except PydanticValidationError as e:
            raise click.ClickException(f"Movie #{index} is invalid: {e}")
        documents.append(movie.model_dump(by_alias=True, exclude_none=True))
    return documents


async def _seed(documents) -> int:
    storage = StorageModule(EnvConfigProvider().get_storage_config())
    client = await storage.connect()
    try:
        return await MovieCatalog(client).load_movies(documents)
    finally:
        await storage.disconnect()


@main.command("seed-movies")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def seed_movies(path):
    """Load movies from a JSON file into the catalog."""
    api = EnvConfigProvider().get_api_config()
    configure_logging(api.log_level, api.auth_log_level)
    documents = read_movie_file(path)
    count = asyncio.run(_seed(documents))
    click.echo(f"Loaded {count} movies")


if __name__ == "__main__":
    main()
