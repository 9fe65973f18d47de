"""
API v1 router configuration.
"""

from fastapi import APIRouter

from floodwatch.api.v1.endpoints import readings, summaries, system

api_router = APIRouter()

api_router.include_router(readings.router, prefix="/readings", tags=["readings"])
api_router.include_router(summaries.router, tags=["summaries"])
api_router.include_router(system.router, prefix="/system", tags=["system"])
