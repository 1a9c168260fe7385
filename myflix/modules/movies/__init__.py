"""
Movies Module - Black Box Interface

Purpose: Serve the read-only movie catalog
Interface: MovieCatalog (list_movies, get_movie_by_title, get_genre,
           get_director, movie_exists, load_movies)
Hidden: Document encoding, title index
"""

from .catalog import MovieCatalog

__all__ = ["MovieCatalog"]
