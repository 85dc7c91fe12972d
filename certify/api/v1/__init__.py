"""
API Router

Aggregates all endpoint routers. Mounted under /api, the prefix the admin
portal and the public verification page call.
"""

from fastapi import APIRouter

from certify.api.v1.endpoints import admin, public

router = APIRouter()

# Include admin routes
router.include_router(admin.router)

# Include public verification routes
router.include_router(public.router)
