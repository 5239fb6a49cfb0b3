"""SQLAlchemy database service which manages sessions and catalog queries."""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from movie_catalog.models import DirectorOut, MovieCreate, MovieOut, MovieUpdate
from movie_catalog.services.tables import Base, Director, Movie

logger = logging.getLogger(__name__)


class UnknownDirectorError(LookupError):
    def __init__(self, director_ids: list[int]):
        self.director_ids = director_ids
        super().__init__(f"Unknown director id(s): {', '.join(map(str, director_ids))}")


class DatabaseService:
    def __init__(self, database_url: str):
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self._engine = create_engine(
            database_url, connect_args=connect_args, pool_pre_ping=True
        )
        self._session_factory = sessionmaker(
            bind=self._engine, autoflush=False, expire_on_commit=False
        )
        logger.info("DatabaseService initialized with %s", self._engine.url)

    @contextmanager
    def _session(self):
        session: Session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise
        finally:
            session.close()

    def create_schema(self) -> None:
        Base.metadata.create_all(bind=self._engine)

    def drop_schema(self) -> None:
        Base.metadata.drop_all(bind=self._engine)

    def dispose(self) -> None:
        self._engine.dispose()

    def health_check(self) -> bool:
        try:
            with self._session() as session:
                session.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.exception("Database health check failed")
            return False

    def find_by_id(self, movie_id: int) -> MovieOut | None:
        """Read-only fetch of a single movie; connection errors propagate."""
        with self._session() as session:
            movie = session.get(Movie, movie_id)
            return MovieOut.model_validate(movie) if movie is not None else None

    def count_movies(self) -> int:
        with self._session() as session:
            return session.scalar(select(func.count()).select_from(Movie))

    def list_movies(
        self,
        title: str | None = None,
        offset: int = 0,
        limit: int = 100,
    ) -> list[MovieOut]:
        stmt = select(Movie)
        if title:
            stmt = stmt.where(func.lower(Movie.title).contains(title.lower()))
        stmt = stmt.order_by(Movie.id).offset(offset).limit(limit)

        with self._session() as session:
            rows = session.scalars(stmt).all()
            return [MovieOut.model_validate(m) for m in rows]

    def create_movie(self, payload: MovieCreate) -> MovieOut:
        with self._session() as session:
            movie = Movie(title=payload.title, year=payload.year, rating=payload.rating)
            if payload.director_ids:
                wanted = set(payload.director_ids)
                directors = session.scalars(
                    select(Director).where(Director.id.in_(wanted))
                ).all()
                missing = sorted(wanted - {d.id for d in directors})
                if missing:
                    raise UnknownDirectorError(missing)
                movie.directors = list(directors)
            session.add(movie)
            session.flush()
            logger.info("Created movie id=%d title=%r", movie.id, movie.title)
            return MovieOut.model_validate(movie)

    def update_movie(self, movie_id: int, payload: MovieUpdate) -> MovieOut | None:
        with self._session() as session:
            movie = session.get(Movie, movie_id)
            if movie is None:
                return None
            movie.title = payload.title
            movie.year = payload.year
            movie.rating = payload.rating
            session.flush()
            logger.info("Updated movie id=%d", movie_id)
            return MovieOut.model_validate(movie)

    def delete_movie(self, movie_id: int) -> bool:
        with self._session() as session:
            movie = session.get(Movie, movie_id)
            if movie is None:
                return False
            session.delete(movie)
        logger.info("Deleted movie id=%d", movie_id)
        return True

    def get_directors(self, movie_id: int) -> list[DirectorOut] | None:
        with self._session() as session:
            movie = session.get(Movie, movie_id)
            if movie is None:
                return None
            return [DirectorOut.model_validate(d) for d in movie.directors]

    def add_director(self, name: str, last_name: str | None = None) -> DirectorOut:
        with self._session() as session:
            director = Director(name=name, last_name=last_name)
            session.add(director)
            session.flush()
            return DirectorOut.model_validate(director)
