"""Tests for the seeding script."""

from movie_service.config import settings
from movie_service.services.database import MoviePredicate, MovieRepository
from movie_service.services.movies import MovieService
from seed_db import REFERENCE_MOVIES, main, seed


def test_seed_is_idempotent(tmp_path):
    with MovieRepository(tmp_path / "movies.db") as repo:
        service = MovieService(repo)
        assert seed(service) == len(REFERENCE_MOVIES)
        assert seed(service) == 0
        assert repo.count(MoviePredicate()) == len(REFERENCE_MOVIES)


def test_main_reset_recreates_database(tmp_path, monkeypatch):
    path = tmp_path / "movies.db"
    monkeypatch.setattr(settings, "db_path", path)

    assert main([]) == 0
    with MovieRepository(path) as repo:
        repo.create({
            "title": "Extra", "director": "X", "genre": "Y", "release_year": 2001,
        })

    assert main(["--reset"]) == 0
    with MovieRepository(path) as repo:
        assert repo.count(MoviePredicate()) == len(REFERENCE_MOVIES)
        assert repo.find_one(MoviePredicate(title="Extra")) is None
