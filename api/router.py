from fastapi import APIRouter
from api.endpoints.forms import router as forms_router
from api.endpoints.submissions import router as submissions_router
from api.endpoints.health import router as health_router

api_router = APIRouter()
api_router.include_router(forms_router, tags=["forms"])
api_router.include_router(submissions_router, tags=["submissions"])
api_router.include_router(health_router, tags=["health"])
