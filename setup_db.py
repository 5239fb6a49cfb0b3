"""
setup_db.py — Recreate the catalog database and load the demo movies.

Uses MOVIE_CATALOG_DATABASE_URL when set, otherwise movies.db next to this file.
"""

import os
import time
from pathlib import Path

from movie_catalog.config import settings
from movie_catalog.services.database import DatabaseService
from movie_catalog.services.seed import seed_catalog


def print_summary(db: DatabaseService) -> None:
    movies = db.list_movies(limit=500)
    print("\n=== Database Summary ===")
    print(f"  {'movies':20s}: {len(movies):>8,} rows")

    print("\n=== Movies ===")
    for movie in movies:
        names = ", ".join(
            f"{d.name} {d.last_name or ''}".strip() for d in db.get_directors(movie.id) or []
        )
        print(f"  #{movie.id} {movie.title} ({movie.year}) — {movie.rating} | Director(s): {names}")


def main() -> None:
    url = settings.database_url
    if url.startswith("sqlite:///"):
        path = Path(url.removeprefix("sqlite:///"))
        if path.exists():
            os.remove(path)
            print(f"Removed existing {path.name}")

    t0 = time.perf_counter()
    db = DatabaseService(url)

    print("Creating schema...")
    db.create_schema()

    print("Loading demo catalog...")
    n_movies = seed_catalog(db)
    print(f"  Loaded {n_movies} movies")

    print_summary(db)
    db.dispose()

    elapsed = time.perf_counter() - t0
    print(f"\nDone. Database written to {url}  ({elapsed:.1f}s)")


if __name__ == "__main__":
    main()
