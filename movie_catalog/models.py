"""Pydantic request/response schemas for the Movie Catalog API."""

from pydantic import BaseModel, ConfigDict, Field


# Shared sub-models

class DirectorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    last_name: str | None = None


class MovieOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    year: int | None = None
    rating: float | None = None


# Request bodies

class MovieUpdate(BaseModel):
    title: str = Field(..., min_length=3, max_length=100, examples=["Blade Runner"])
    year: int | None = Field(None, ge=1870, le=2100)
    rating: float | None = Field(None, ge=0, le=10)


class MovieCreate(MovieUpdate):
    director_ids: list[int] = Field(default_factory=list)


# Responses

class LockedResponse(BaseModel):
    detail: str
    code: str = "locked"
    attribute: str
    threshold: float
    reason: str


class ErrorResponse(BaseModel):
    detail: str
    code: str | None = None


class HealthResponse(BaseModel):
    status: str
    database: bool
