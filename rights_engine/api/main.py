from fastapi import APIRouter

from rights_engine.api.routes import extractions, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="", tags=["Health"])
api_router.include_router(extractions.router, prefix="/extractions", tags=["Extractions"])
