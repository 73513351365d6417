"""
Main API router for v1 endpoints.
"""

from fastapi import APIRouter

from budgetvault.api.v1.endpoints import data_transfer, health

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(data_transfer.router, prefix="/data", tags=["data-transfer"])
