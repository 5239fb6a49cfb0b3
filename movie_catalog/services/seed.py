"""Demo catalog used by setup_db.py and the optional startup seeding."""

import logging

from movie_catalog.models import MovieCreate
from movie_catalog.services.database import DatabaseService

logger = logging.getLogger(__name__)

DIRECTORS = [
    ("Ridley", "Scott"),
    ("Christopher", "Nolan"),
    ("Lana", "Wachowski"),
    ("Lilly", "Wachowski"),
    ("Ed", "Wood"),
]

# (title, year, rating, director positions in DIRECTORS)
MOVIES = [
    ("Blade Runner", 1982, 5.0, [0]),
    ("Inception", 2010, 4.5, [1]),
    ("The Matrix", 1999, 4.0, [2, 3]),
    ("Plan 9 from Outer Space", 1957, 2.0, [4]),
    ("Alien", 1979, 3.5, [0]),
]


def seed_catalog(db: DatabaseService) -> int:
    """Insert the demo catalog into an empty database. Returns movies inserted."""
    if db.count_movies():
        logger.info("Catalog already populated, skipping seed")
        return 0

    director_ids = [db.add_director(name, last).id for name, last in DIRECTORS]
    for title, year, rating, positions in MOVIES:
        db.create_movie(MovieCreate(
            title=title,
            year=year,
            rating=rating,
            director_ids=[director_ids[p] for p in positions],
        ))

    logger.info("Seeded %d movies and %d directors", len(MOVIES), len(DIRECTORS))
    return len(MOVIES)
