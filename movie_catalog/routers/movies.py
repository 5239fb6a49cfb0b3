"""Movie CRUD endpoints."""

import logging

from fastapi import APIRouter, Header, HTTPException, Query, Request, Response, status

from movie_catalog.models import ErrorResponse, LockedResponse, MovieCreate, MovieOut, MovieUpdate
from movie_catalog.pipeline import PipelineRoute
from movie_catalog.services.database import DatabaseService, UnknownDirectorError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/movies", tags=["movies"], route_class=PipelineRoute)

_db: DatabaseService | None = None

_LOCKED = {423: {"model": LockedResponse, "description": "Movie is locked"}}
_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Movie not found"}}


def init_router(db: DatabaseService) -> None:
    global _db
    _db = db


def _get_db() -> DatabaseService:
    assert _db is not None, "movies router not initialized"
    return _db


def _not_found(movie_id: int) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Movie {movie_id} not found")


@router.get(
    "",
    response_model=list[MovieOut],
    responses={204: {"description": "No movie matches the filter"}},
)
def list_movies(
    title: str | None = Query(None, description="Search by title (partial, case-insensitive)"),
    movie_name: str | None = Header(None, alias="movieName", description="Same as `title`"),
    offset: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(100, ge=1, le=500, description="Results per page"),
):
    """List movies, optionally filtered by title."""
    movies = _get_db().list_movies(title=title or movie_name, offset=offset, limit=limit)
    if not movies:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return movies


@router.post(
    "",
    response_model=MovieOut,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
def create_movie(payload: MovieCreate, request: Request, response: Response):
    """Create a movie and optionally link it to existing directors."""
    try:
        movie = _get_db().create_movie(payload)
    except UnknownDirectorError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    response.headers["Location"] = str(request.url_for("get_movie", movie_id=movie.id))
    return movie


@router.get("/{movie_id}", response_model=MovieOut, responses=_NOT_FOUND)
def get_movie(movie_id: int):
    movie = _get_db().find_by_id(movie_id)
    if movie is None:
        raise _not_found(movie_id)
    return movie


@router.put("/{movie_id}", response_model=MovieOut, responses={**_NOT_FOUND, **_LOCKED})
def update_movie(movie_id: int, payload: MovieUpdate):
    """Replace the title, year and rating of a movie. Locked movies are refused."""
    movie = _get_db().update_movie(movie_id, payload)
    if movie is None:
        raise _not_found(movie_id)
    return movie


@router.delete(
    "/{movie_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_NOT_FOUND, **_LOCKED},
)
def delete_movie(movie_id: int):
    if not _get_db().delete_movie(movie_id):
        raise _not_found(movie_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
