from fastapi import APIRouter

from .routes import health, risk

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(risk.router)
