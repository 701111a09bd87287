"""
Job Board API - Main Application

FastAPI backend with:
- MongoDB for every entity (users, companies, categories, jobs, applications)
- JWT authentication via http-only cookie
- Cloudinary for profile images and resumes

Run: uvicorn jobboard.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from jobboard import __version__
from jobboard.api import api_router
from jobboard.core.config import get_settings
from jobboard.core.errors import register_exception_handlers
from jobboard.db.mongodb import init_mongo_indexes, test_mongo_connection

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create MongoDB indexes on startup.

    Uniqueness of emails, names and applications rests on these indexes,
    so a failure here aborts startup instead of serving without them.
    """
    try:
        init_mongo_indexes()
    except PyMongoError:
        logger.critical("MongoDB index initialization failed, refusing to start", exc_info=True)
        raise
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="""
    Job board backend.

    ## Features
    - **Users**: Registration, cookie login, profile with resume/image upload
    - **Companies**: Company records owned by recruiters
    - **Job Categories**: Categories that group job postings
    - **Jobs**: Post, search and manage job postings
    - **Applications**: Apply to jobs and track application status
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Single trusted frontend origin; cookies require credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.cors_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "mongodb": "connected" if test_mongo_connection() else "disconnected",
        "storage": "configured" if settings.storage_configured else "not configured",
    }


def run():
    """Console entry point: `jobboard`."""
    uvicorn.run(
        "jobboard.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
