"""Per-endpoint guard/observer pipeline attached to a FastAPI app at startup."""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Protocol

from fastapi import FastAPI
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import Response

from movie_catalog.models import LockedResponse
from movie_catalog.services.guards import GuardDecision

logger = logging.getLogger(__name__)

Handler = Callable[[Request], Awaitable[Response]]


class Guard(Protocol):
    def check(self, resource_id: int) -> GuardDecision: ...


class Observer(Protocol):
    def observe(self, request: Request, response: Response) -> None: ...


@dataclass
class RoutePipeline:
    guards: list[Guard] = field(default_factory=list)
    observers: list[Observer] = field(default_factory=list)
    id_param: str = "movie_id"
    rejection_status: int = 423

    def resource_id(self, request: Request) -> int | None:
        raw = request.path_params.get(self.id_param)
        try:
            return int(raw)
        except (TypeError, ValueError):
            return None

    async def run(self, request: Request, handler: Handler) -> Response:
        resource_id = self.resource_id(request)
        if resource_id is not None:
            for guard in self.guards:
                decision = await run_in_threadpool(guard.check, resource_id)
                if not decision.allowed:
                    return self.reject(resource_id, decision)

        try:
            response = await handler(request)
        except HTTPException as exc:
            # handlers report 404 and friends by raising; observers need the response
            response = await http_exception_handler(request, exc)

        for observer in self.observers:
            observer.observe(request, response)
        return response

    def reject(self, resource_id: int, decision: GuardDecision) -> JSONResponse:
        body = LockedResponse(
            detail=f"Movie {resource_id} is locked: {decision.attribute} is {decision.threshold:g}",
            code=decision.code or "locked",
            attribute=decision.attribute,
            threshold=decision.threshold,
            reason=f"{decision.threshold:g}",
        )
        return JSONResponse(status_code=self.rejection_status, content=body.model_dump())


def pipelines_for(app: FastAPI) -> dict[Callable, RoutePipeline]:
    if not hasattr(app.state, "pipelines"):
        app.state.pipelines = {}
    return app.state.pipelines


class PipelineRoute(APIRoute):
    """APIRoute that runs the pipeline registered on the app for its endpoint."""

    def get_route_handler(self) -> Handler:
        handler = super().get_route_handler()
        endpoint = self.endpoint

        async def pipeline_handler(request: Request) -> Response:
            pipeline = pipelines_for(request.app).get(endpoint)
            if pipeline is None:
                return await handler(request)
            return await pipeline.run(request, handler)

        return pipeline_handler


def attach_pipeline(app: FastAPI, endpoint: Callable, pipeline: RoutePipeline) -> None:
    """Run `pipeline` around every request `app` routes to `endpoint`."""
    pipelines_for(app)[endpoint] = pipeline
    logger.debug(
        "Attached %d guard(s) and %d observer(s) to %s",
        len(pipeline.guards), len(pipeline.observers), endpoint.__name__,
    )
