"""Main API routers."""

from fastapi import APIRouter

from edusync.api.educators import router as educators_router
from edusync.api.functions import router as functions_router

api_router = APIRouter(prefix="/api")
api_router.include_router(educators_router, prefix="/educators", tags=["educators"])

function_router = APIRouter(prefix="/functions", tags=["functions"])
function_router.include_router(functions_router)
