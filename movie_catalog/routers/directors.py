"""Directors of a movie."""

from fastapi import APIRouter, HTTPException

from movie_catalog.models import DirectorOut, ErrorResponse
from movie_catalog.services.database import DatabaseService

router = APIRouter(prefix="/movies/{movie_id}/directors", tags=["directors"])

_db: DatabaseService | None = None


def init_router(db: DatabaseService) -> None:
    global _db
    _db = db


def _get_db() -> DatabaseService:
    assert _db is not None, "directors router not initialized"
    return _db


@router.get("", response_model=list[DirectorOut], responses={404: {"model": ErrorResponse}})
def list_directors(movie_id: int):
    """List the directors credited on a movie."""
    directors = _get_db().get_directors(movie_id)
    if directors is None:
        raise HTTPException(status_code=404, detail=f"Movie {movie_id} not found")
    return directors
