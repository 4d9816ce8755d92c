"""Register all route modules on the FastAPI app."""

from fastapi import FastAPI

from .activities import router as activities_router
from .feed import router as feed_router
from .interactions import posts_router
from .interactions import router as interactions_router
from .listings import router as listings_router
from .root import router as root_router
from .stats import router as stats_router


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the app."""
    app.include_router(root_router)
    app.include_router(activities_router, prefix="/api/activities", tags=["activities"])
    app.include_router(listings_router, prefix="/api/listings", tags=["listings"])
    app.include_router(feed_router, prefix="/api/feed", tags=["feed"])
    app.include_router(interactions_router, prefix="/api/interactions", tags=["interactions"])
    app.include_router(posts_router, prefix="/api/posts", tags=["posts"])
    app.include_router(stats_router, prefix="/api", tags=["stats"])
