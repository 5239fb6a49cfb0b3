"""
Mutation guards: pre-handler checks that refuse to modify locked movies,
plus post-handler observers that watch the outcome without touching it.

A guard reads the current movie through a `MovieReader`, evaluates its
`LockPredicate` and returns a `GuardDecision`. Unknown ids are allowed
through so the handler can report the 404 itself.
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


class MovieReader(Protocol):
    def find_by_id(self, movie_id: int) -> object | None: ...


class DependencyUnavailableError(RuntimeError):
    """The persistence layer could not be reached while checking a guard."""

    def __init__(self, resource_id: int, cause: Exception):
        self.resource_id = resource_id
        self.cause = cause
        super().__init__(f"Could not load resource {resource_id}: {cause}")


@dataclass(frozen=True)
class GuardDecision:
    allowed: bool
    code: str | None = None
    attribute: str | None = None
    threshold: float | None = None

    @classmethod
    def allow(cls) -> "GuardDecision":
        return cls(allowed=True)

    @classmethod
    def reject(cls, attribute: str, threshold: float) -> "GuardDecision":
        return cls(allowed=False, code="locked", attribute=attribute, threshold=threshold)


@dataclass(frozen=True)
class LockPredicate:
    """Locks a resource whose `attribute` equals any of `thresholds`."""

    thresholds: tuple[float, ...]
    attribute: str = "rating"

    def __post_init__(self):
        # accept any iterable, store a hashable tuple
        object.__setattr__(self, "thresholds", tuple(self.thresholds))

    def matched_threshold(self, resource: object) -> float | None:
        value = getattr(resource, self.attribute, None)
        if value is None:
            return None
        for threshold in self.thresholds:
            if value == threshold:
                return threshold
        return None

    def __call__(self, resource: object) -> bool:
        return self.matched_threshold(resource) is not None


@dataclass
class MutationGuard:
    reader: MovieReader
    predicate: LockPredicate
    name: str = field(default="lock")

    def check(self, resource_id: int) -> GuardDecision:
        try:
            resource = self.reader.find_by_id(resource_id)
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Guard %s could not load resource %d", self.name, resource_id, exc_info=True)
            raise DependencyUnavailableError(resource_id, exc) from exc

        if resource is None:
            return GuardDecision.allow()

        threshold = self.predicate.matched_threshold(resource)
        if threshold is None:
            return GuardDecision.allow()

        logger.info(
            "Guard %s locked resource %d: %s == %s",
            self.name, resource_id, self.predicate.attribute, threshold,
        )
        return GuardDecision.reject(self.predicate.attribute, threshold)


class NotFoundLogger:
    """Observer that logs 404 outcomes of the handler."""

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger

    def observe(self, request: Request, response: Response) -> None:
        if response.status_code != 404:
            return
        self._log.warning(
            "Resource not found: %s %s (id=%s)",
            request.method, request.url.path, request.path_params.get("movie_id"),
        )
