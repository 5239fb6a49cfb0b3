"""Tests for the SQLAlchemy-backed DatabaseService and the demo seed."""

import pytest

from movie_catalog.models import MovieCreate, MovieUpdate
from movie_catalog.services.database import DatabaseService, UnknownDirectorError
from movie_catalog.services.seed import MOVIES, seed_catalog


@pytest.fixture()
def db(tmp_path):
    service = DatabaseService(f"sqlite:///{tmp_path / 'db.sqlite'}")
    service.create_schema()
    yield service
    service.dispose()


class TestSeed:
    def test_seed_populates_empty_db(self, db):
        assert seed_catalog(db) == len(MOVIES)
        assert db.count_movies() == len(MOVIES)

    def test_seed_is_noop_when_populated(self, db):
        seed_catalog(db)
        assert seed_catalog(db) == 0
        assert db.count_movies() == len(MOVIES)


class TestMovieQueries:
    def test_find_by_id_missing(self, db):
        assert db.find_by_id(1) is None

    def test_create_and_find(self, db):
        created = db.create_movie(MovieCreate(title="Heat", year=1995, rating=4.0))
        assert db.find_by_id(created.id) == created

    def test_title_filter_case_insensitive(self, db):
        db.create_movie(MovieCreate(title="The Thing"))
        db.create_movie(MovieCreate(title="Thief"))
        db.create_movie(MovieCreate(title="Alien"))
        assert [m.title for m in db.list_movies(title="th")] == ["The Thing", "Thief"]

    def test_update_replaces_fields(self, db):
        created = db.create_movie(MovieCreate(title="Heat", year=1995, rating=4.0))
        updated = db.update_movie(created.id, MovieUpdate(title="Heat (1995)"))
        assert updated.title == "Heat (1995)"
        assert updated.year is None
        assert updated.rating is None

    def test_update_missing(self, db):
        assert db.update_movie(5, MovieUpdate(title="Nothing")) is None

    def test_delete(self, db):
        created = db.create_movie(MovieCreate(title="Heat"))
        assert db.delete_movie(created.id) is True
        assert db.delete_movie(created.id) is False

    def test_unknown_director(self, db):
        with pytest.raises(UnknownDirectorError) as info:
            db.create_movie(MovieCreate(title="Heat", director_ids=[3, 1]))
        assert info.value.director_ids == [1, 3]
        assert db.count_movies() == 0

    def test_directors_of_movie(self, db):
        mann = db.add_director("Michael", "Mann")
        created = db.create_movie(MovieCreate(title="Heat", director_ids=[mann.id]))
        assert db.get_directors(created.id) == [mann]
        assert db.get_directors(created.id + 1) is None

    def test_health_check(self, db):
        assert db.health_check() is True
