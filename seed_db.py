"""
seed_db.py: create the movie schema and load a handful of reference movies.

Usage:
  python seed_db.py            # add any reference movies that are missing
  python seed_db.py --reset    # delete the database file first

The database location comes from MOVIE_API_DB_PATH (see movie_service/config.py).
"""

import argparse
import logging
import sys
import time

from movie_service.config import settings
from movie_service.models import MovieCreate
from movie_service.services.database import MovieRepository, PersistenceError
from movie_service.services.movies import MovieService
from movie_service.services.results import Failure

logger = logging.getLogger("seed_db")

REFERENCE_MOVIES = [
    {
        "title": "The Shawshank Redemption",
        "director": "Frank Darabont",
        "genre": "Drama",
        "release_year": 1994,
        "rating": 9.3,
        "description": (
            "Two imprisoned men bond over a number of years, finding solace and "
            "eventual redemption through acts of common decency."
        ),
    },
    {
        "title": "The Godfather",
        "director": "Francis Ford Coppola",
        "genre": "Crime",
        "release_year": 1972,
        "rating": 9.2,
        "description": (
            "The aging patriarch of an organized crime dynasty transfers control "
            "of his clandestine empire to his reluctant son."
        ),
    },
    {
        "title": "The Dark Knight",
        "director": "Christopher Nolan",
        "genre": "Action",
        "release_year": 2008,
        "rating": 9.0,
        "description": (
            "When the menace known as the Joker wreaks havoc and chaos on the "
            "people of Gotham, Batman must accept one of the greatest "
            "psychological and physical tests."
        ),
    },
    {
        "title": "Inception",
        "director": "Christopher Nolan",
        "genre": "Sci-Fi",
        "release_year": 2010,
        "rating": 8.8,
        "description": (
            "A thief who steals corporate secrets through the use of "
            "dream-sharing technology is given the inverse task of planting an idea."
        ),
    },
    {
        "title": "Pulp Fiction",
        "director": "Quentin Tarantino",
        "genre": "Crime",
        "release_year": 1994,
        "rating": 8.9,
        "description": (
            "The lives of two mob hitmen, a boxer, a gangster and his wife "
            "intertwine in four tales of violence and redemption."
        ),
    },
]


def seed(service: MovieService) -> int:
    """Insert every reference movie whose title is not taken yet. Returns the number inserted."""
    inserted = 0
    for data in REFERENCE_MOVIES:
        result = service.create_movie(MovieCreate(**data))
        if isinstance(result, Failure):
            logger.info("  skipped %s (%s)", data["title"], result.code.name)
            continue
        inserted += 1
    return inserted


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the movie database.")
    parser.add_argument("--reset", action="store_true", help="remove the existing database first")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(message)s")
    db_path = settings.db_path

    if args.reset and db_path.exists():
        db_path.unlink()
        logger.info("Removed existing %s", db_path.name)

    t0 = time.perf_counter()
    try:
        with MovieRepository(db_path, case_sensitive_titles=settings.title_case_sensitive) as repo:
            logger.info("Seeding %s...", db_path)
            inserted = seed(MovieService(repo))
    except PersistenceError as exc:
        logger.error("ERROR: %s", exc)
        return 1

    elapsed = time.perf_counter() - t0
    logger.info("Done. Inserted %d movie(s) into %s  (%.1fs)", inserted, db_path, elapsed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
