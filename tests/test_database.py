"""Tests for the SQLite movie repository against a throwaway database file."""

import pytest

from movie_service.services.database import (
    MoviePredicate,
    MovieRepository,
    PersistenceError,
    RecordNotFoundError,
    UniqueViolationError,
)


def _fields(title, **overrides):
    data = {
        "title": title,
        "director": "Christopher Nolan",
        "genre": "Sci-Fi",
        "release_year": 2010,
        "rating": 8.8,
        "description": None,
    }
    data.update(overrides)
    return data


@pytest.fixture()
def repo(tmp_path):
    with MovieRepository(tmp_path / "movies.db") as r:
        yield r


class TestLifecycle:
    def test_use_before_open_raises(self, tmp_path):
        r = MovieRepository(tmp_path / "movies.db")
        with pytest.raises(PersistenceError):
            r.count(MoviePredicate())

    def test_use_after_close_raises(self, tmp_path):
        r = MovieRepository(tmp_path / "movies.db").open()
        r.close()
        with pytest.raises(PersistenceError):
            r.find_by_id(1)

    def test_reopen_keeps_rows(self, tmp_path):
        path = tmp_path / "movies.db"
        with MovieRepository(path) as r:
            r.create(_fields("Inception"))
        with MovieRepository(path) as r:
            assert r.count(MoviePredicate()) == 1

    def test_health_check(self, repo, tmp_path):
        assert repo.health_check() is True
        closed = MovieRepository(tmp_path / "other.db")
        assert closed.health_check() is False


class TestCreate:
    def test_create_assigns_id_and_timestamps(self, repo):
        movie = repo.create(_fields("Inception"))
        assert movie["id"] >= 1
        assert movie["title"] == "Inception"
        assert movie["created_at"] == movie["updated_at"]

    def test_duplicate_title_violates_unique_index(self, repo):
        repo.create(_fields("Inception"))
        with pytest.raises(UniqueViolationError):
            repo.create(_fields("Inception"))
        assert repo.count(MoviePredicate()) == 1

    def test_case_variant_allowed_when_case_sensitive(self, repo):
        repo.create(_fields("Inception"))
        repo.create(_fields("INCEPTION"))
        assert repo.count(MoviePredicate()) == 2

    def test_case_variant_rejected_when_case_insensitive(self, tmp_path):
        with MovieRepository(tmp_path / "nocase.db", case_sensitive_titles=False) as r:
            r.create(_fields("Inception"))
            with pytest.raises(UniqueViolationError):
                r.create(_fields("INCEPTION"))

    def test_unknown_column_rejected(self, repo):
        with pytest.raises(ValueError):
            repo.create({**_fields("Inception"), "id": 99})

    def test_not_null_violation_is_persistence_error(self, repo):
        with pytest.raises(PersistenceError) as excinfo:
            repo.create(_fields("Inception", director=None))
        assert not isinstance(excinfo.value, UniqueViolationError)


class TestQueries:
    @pytest.fixture(autouse=True)
    def _movies(self, repo):
        repo.create(_fields("The Shawshank Redemption", director="Frank Darabont",
                            genre="Drama", release_year=1994, rating=9.3))
        repo.create(_fields("The Dark Knight", genre="Action", release_year=2008, rating=9.0))
        repo.create(_fields("Inception", release_year=2010, rating=8.8))
        repo.create(_fields("100% Unrated", director="Nobody", genre="Doc_umentary",
                            release_year=2020, rating=None))

    def test_find_one_by_exact_title(self, repo):
        assert repo.find_one(MoviePredicate(title="Inception"))["title"] == "Inception"
        assert repo.find_one(MoviePredicate(title="inception")) is None

    def test_find_one_excluding_id(self, repo):
        movie = repo.find_one(MoviePredicate(title="Inception"))
        assert repo.find_one(MoviePredicate(title="Inception", exclude_id=movie["id"])) is None

    def test_genre_substring_is_case_insensitive(self, repo):
        rows = repo.find_many(MoviePredicate(genre="dram"))
        assert [r["title"] for r in rows] == ["The Shawshank Redemption"]

    def test_director_substring(self, repo):
        assert repo.count(MoviePredicate(director="nolan")) == 2

    def test_like_wildcards_are_literal(self, repo):
        assert repo.count(MoviePredicate(genre="_")) == 1
        assert repo.count(MoviePredicate(director="%")) == 0

    def test_year_bounds_are_inclusive(self, repo):
        rows = repo.find_many(MoviePredicate(min_year=2008, max_year=2010))
        assert {r["title"] for r in rows} == {"The Dark Knight", "Inception"}

    def test_min_rating_excludes_unrated(self, repo):
        assert repo.count(MoviePredicate(min_rating=0)) == 3

    def test_find_many_newest_first_with_skip_and_limit(self, repo):
        rows = repo.find_many(MoviePredicate(), skip=1, limit=2)
        assert [r["title"] for r in rows] == ["Inception", "The Dark Knight"]

    def test_find_page_matches_find_many_and_count(self, repo):
        predicate = MoviePredicate(director="nolan")
        rows, total = repo.find_page(predicate, skip=0, limit=1)
        assert rows == repo.find_many(predicate, skip=0, limit=1)
        assert total == repo.count(predicate) == 2

    def test_find_page_past_the_end(self, repo):
        rows, total = repo.find_page(MoviePredicate(), skip=50, limit=10)
        assert rows == []
        assert total == 4


class TestUpdateDelete:
    def test_update_changes_fields_and_timestamp(self, repo):
        movie = repo.create(_fields("Inception"))
        updated = repo.update(movie["id"], {"rating": 9.1})
        assert updated["rating"] == 9.1
        assert updated["title"] == "Inception"
        assert updated["updated_at"] >= movie["updated_at"]
        assert updated["created_at"] == movie["created_at"]

    def test_update_missing_raises_not_found(self, repo):
        with pytest.raises(RecordNotFoundError):
            repo.update(42, {"rating": 1.0})

    def test_empty_update_of_missing_raises_not_found(self, repo):
        with pytest.raises(RecordNotFoundError):
            repo.update(42, {})

    def test_update_to_taken_title_raises_unique_violation(self, repo):
        repo.create(_fields("Inception"))
        other = repo.create(_fields("Tenet"))
        with pytest.raises(UniqueViolationError):
            repo.update(other["id"], {"title": "Inception"})
        assert repo.find_by_id(other["id"])["title"] == "Tenet"

    def test_delete_returns_row(self, repo):
        movie = repo.create(_fields("Inception"))
        assert repo.delete(movie["id"]) == movie
        assert repo.find_by_id(movie["id"]) is None

    def test_delete_missing_raises_not_found(self, repo):
        with pytest.raises(RecordNotFoundError):
            repo.delete(42)
