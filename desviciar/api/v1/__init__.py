"""API v1 routes"""
from fastapi import APIRouter
from desviciar.api.v1 import progress, triggers, dashboard, notifications

api_router = APIRouter()

api_router.include_router(progress.router)
api_router.include_router(triggers.router)
api_router.include_router(dashboard.router)
api_router.include_router(notifications.router)
