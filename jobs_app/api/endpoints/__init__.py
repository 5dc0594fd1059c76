"""API endpoint routers."""

from api.endpoints import geocode_router, health_router, jobs_router, sync_router

__all__ = ["health_router", "jobs_router", "sync_router", "geocode_router"]
