"""
Kinship API Routes Package.

This package contains all FastAPI route handlers organized by domain.
Use this module to import routers for registration with the FastAPI app.

Example:
    from api.routes import people_router, analytics_router

    app.include_router(people_router)
    app.include_router(analytics_router)
"""

from api.routes.people import router as people_router
from api.routes.interactions import router as interactions_router
from api.routes.analytics import router as analytics_router
from api.routes.notifications import router as notifications_router
from api.routes.journal import router as journal_router

__all__ = [
    "people_router",
    "interactions_router",
    "analytics_router",
    "notifications_router",
    "journal_router",
]
