"""SQLAlchemy ORM tables for movies and their directors."""

from sqlalchemy import Column, Float, ForeignKey, Integer, String, Table
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

movie_directors = Table(
    "movie_directors",
    Base.metadata,
    Column("movie_id", Integer, ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True),
    Column("director_id", Integer, ForeignKey("directors.id", ondelete="CASCADE"), primary_key=True),
)


class Movie(Base):
    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    year = Column(Integer)
    rating = Column(Float)

    directors = relationship(
        "Director", secondary=movie_directors, back_populates="movies", order_by="Director.id"
    )

    def __repr__(self) -> str:
        return f"<Movie id={self.id} title={self.title!r} rating={self.rating}>"


class Director(Base):
    __tablename__ = "directors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    last_name = Column(String(100))

    movies = relationship("Movie", secondary=movie_directors, back_populates="directors")
