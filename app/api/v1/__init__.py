"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import admin, auth, health, journal, public, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(public.router, prefix="/public", tags=["public"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(admin.router, prefix="/admin/users", tags=["admin"])
router.include_router(journal.router, prefix="/journal", tags=["journal"])
