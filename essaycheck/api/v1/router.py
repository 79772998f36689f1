from fastapi import APIRouter

from .endpoints import health, essay_endpoint

api_router = APIRouter()

api_router.include_router(essay_endpoint.router, prefix="/essay", tags=["essay"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
