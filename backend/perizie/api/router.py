"""Main API router aggregator."""
from fastapi import APIRouter

from perizie.core import settings as app_settings
from .routes import computi

api_router = APIRouter(prefix=app_settings.api_v1_prefix)
api_router.include_router(computi.router, prefix="/computi", tags=["computi"])

__all__ = ["api_router"]
