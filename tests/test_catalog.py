"""
Unit tests for the movie catalog.
"""

import pytest
import pytest_asyncio

from myflix.modules.errors import NotFound
from myflix.modules.movies.catalog import MOVIE_INDEX, TITLE_INDEX

from conftest import SAMPLE_MOVIES


@pytest_asyncio.fixture
async def seeded(catalog):
    await catalog.load_movies(SAMPLE_MOVIES)
    return catalog


@pytest.mark.asyncio
async def test_empty_catalog(catalog):
    assert await catalog.list_movies() == []


@pytest.mark.asyncio
async def test_list_movies_sorted_by_title(seeded):
    movies = await seeded.list_movies()

    assert [m["Title"] for m in movies] == ["Alien", "Silence of the Lambs"]
    assert movies[1] == SAMPLE_MOVIES[0]


@pytest.mark.asyncio
async def test_get_movie_by_title(seeded):
    movie = await seeded.get_movie_by_title("Alien")

    assert movie["_id"] == "m7"
    assert movie["Director"]["Name"] == "Ridley Scott"


@pytest.mark.asyncio
async def test_title_lookup_is_exact(seeded):
    with pytest.raises(NotFound) as exc_info:
        await seeded.get_movie_by_title("alien")

    assert str(exc_info.value) == "alien was not found"


@pytest.mark.asyncio
async def test_get_genre(seeded):
    genre = await seeded.get_genre("Thriller")

    assert genre == {"Name": "Thriller", "Description": "Suspense and tension."}


@pytest.mark.asyncio
async def test_get_director(seeded):
    director = await seeded.get_director("Jonathan Demme")

    assert director["Birth"] == "1944"


@pytest.mark.asyncio
@pytest.mark.parametrize("lookup,name", [("get_genre", "Comedy"), ("get_director", "Nobody")])
async def test_unknown_genre_or_director(seeded, lookup, name):
    with pytest.raises(NotFound):
        await getattr(seeded, lookup)(name)


@pytest.mark.asyncio
async def test_movie_exists(seeded):
    assert await seeded.movie_exists("m42") is True
    assert await seeded.movie_exists("m999") is False


@pytest.mark.asyncio
async def test_get_movie_unknown_id(seeded):
    with pytest.raises(NotFound) as exc_info:
        await seeded.get_movie("m999")

    assert str(exc_info.value) == "Movie m999 was not found"


@pytest.mark.asyncio
async def test_load_same_title_replaces_movie(seeded, fake_redis):
    """Test reloading a title keeps its id and overwrites the document."""
    count = await seeded.load_movies([{"Title": "Alien", "Description": "Director's cut."}])

    assert count == 1
    movie = await seeded.get_movie_by_title("Alien")
    assert movie["_id"] == "m7"
    assert movie["Description"] == "Director's cut."
    assert await fake_redis.scard(MOVIE_INDEX) == 2


@pytest.mark.asyncio
async def test_load_generates_missing_ids(catalog, fake_redis):
    await catalog.load_movies([{"Title": "Heat"}])

    movie_id = await fake_redis.hget(TITLE_INDEX, "Heat")
    assert movie_id
    assert (await catalog.get_movie(movie_id))["Title"] == "Heat"


@pytest.mark.asyncio
async def test_load_requires_title(catalog):
    with pytest.raises(ValueError):
        await catalog.load_movies([{"_id": "m1", "Description": "untitled"}])
