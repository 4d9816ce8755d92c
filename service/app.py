"""
Tag-affinity ranking service: FastAPI app factory.

Use: uvicorn service.app:app
Or:  from service import app
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ranking.errors import EngineFailure, NotFoundError, ValidationError

from .routes import register_routes
from .state import get_state

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Map engine errors to HTTP status codes with a {"detail": ...} body."""

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(EngineFailure)
    async def engine_failure(request: Request, exc: EngineFailure):
        logger.error("[app] %s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Build FastAPI app with CORS, routes, error handlers, and startup."""
    app = FastAPI(
        title="Tag-Affinity Ranking API",
        description="Personalized post feeds, listing activity tracking and marketplace ranking",
        version="1.0.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    register_routes(app)

    @app.on_event("startup")
    def init_state():
        state = get_state()
        logger.info("[startup] %s", state.describe())

    return app


app = create_app()
