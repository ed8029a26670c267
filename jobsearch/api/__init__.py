"""
API module - FastAPI routers and endpoint definitions.

Usage:
    from jobsearch.api import api_router
    app.include_router(api_router)
"""

from jobsearch.api.routes import api_router

__all__ = ["api_router"]
