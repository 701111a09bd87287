"""
Schemas module - Request/Response schemas for API endpoints.

Request bodies are camelCase on the wire (see CamelModel); every
response is wrapped by success_response().
"""

from jobboard.schemas.schemas import (
    ApplicationCreate,
    ApplicationStatus,
    ApplicationStatusUpdate,
    CompanyCreate,
    CompanyUpdate,
    JobCategoryCreate,
    JobCategoryUpdate,
    JobCreate,
    JobUpdate,
    LoginRequest,
    Profile,
    UserCreate,
    UserRole,
    success_response,
)

__all__ = [
    "ApplicationCreate",
    "ApplicationStatus",
    "ApplicationStatusUpdate",
    "CompanyCreate",
    "CompanyUpdate",
    "JobCategoryCreate",
    "JobCategoryUpdate",
    "JobCreate",
    "JobUpdate",
    "LoginRequest",
    "Profile",
    "UserCreate",
    "UserRole",
    "success_response",
]
