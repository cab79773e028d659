"""
Top‑level API router.

Aggregates the domain routers.  Only the service listing exists
today; it is mounted at ``/services``.
"""

from fastapi import APIRouter

from .endpoints import services

router = APIRouter()

router.include_router(services.router, prefix="/services", tags=["services"])
