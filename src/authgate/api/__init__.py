"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Only /api/auth/me is protected, and it protects itself through
Depends(get_current_user) on the handler. New protected routers can be
mounted with dependencies=[Depends(get_current_user)] the same way.
"""

from fastapi import APIRouter

from authgate.api.auth import router as auth_router
from authgate.api.health import router as health_router

api_router = APIRouter()

# Open routes — service info, health, docs
api_router.include_router(health_router, tags=["health"])

# Auth routes — register/login open, /me requires a bearer token
api_router.include_router(auth_router, prefix="/api", tags=["auth"])
