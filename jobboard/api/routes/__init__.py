"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from jobboard.api.routes.user_routes import router as user_router
from jobboard.api.routes.company_routes import router as company_router
from jobboard.api.routes.category_routes import router as category_router
from jobboard.api.routes.job_routes import router as job_router
from jobboard.api.routes.application_routes import router as application_router

# Main API router
api_router = APIRouter()

# /job/category/* must be registered ahead of /job/{job_id}
api_router.include_router(user_router)
api_router.include_router(company_router)
api_router.include_router(category_router)
api_router.include_router(job_router)
api_router.include_router(application_router)
