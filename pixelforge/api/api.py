from fastapi import APIRouter

from pixelforge.api.endpoints import convert, health

# Routes are mounted at the root; browser clients call /convert directly.
api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(convert.router, tags=["conversion"])
