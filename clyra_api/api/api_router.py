from fastapi import APIRouter
from clyra_api.api.endpoints import admin, health, submissions

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(submissions.router, tags=["Submissions"])
api_router.include_router(admin.router, tags=["Admin"])
