"""
API v1 routes.
"""

from fastapi import APIRouter

from .endpoints import analytics, customers, devices, health, tickets

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(devices.router, prefix="/devices", tags=["devices"])

api_router.include_router(tickets.router, prefix="/tickets", tags=["tickets"])

api_router.include_router(
    customers.router, prefix="/customers", tags=["customers"]
)

api_router.include_router(
    analytics.router, prefix="/analytics", tags=["analytics"]
)

api_router.include_router(health.router, prefix="/health", tags=["health"])
