"""
Application Routes

POST /application/apply/{job_id} - Apply to a job
PUT /application/status/{application_id}/update - Change application status
GET /application/{job_id}/applicants - Applications to a job
GET /application/{user_id} - Own applications
"""

from fastapi import APIRouter, Depends

from jobboard.core.auth import CurrentUser, get_current_user
from jobboard.core.errors import ForbiddenError
from jobboard.schemas.schemas import ApplicationCreate, ApplicationStatusUpdate, success_response
from jobboard.services.application_service import ApplicationService

router = APIRouter(prefix="/application", tags=["Applications"])


@router.post("/apply/{job_id}", status_code=201)
async def apply_to_job(job_id: str, application: ApplicationCreate, user: CurrentUser = Depends(get_current_user)):
    """Apply to a job. Cannot apply twice to same job."""
    created = ApplicationService().apply(
        user.user_id, job_id, application.resume, application.cover_letter
    )
    return success_response("Application submitted successfully.", created)


@router.put("/status/{application_id}/update")
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    user: CurrentUser = Depends(get_current_user),
):
    """Set status to one of Applied, Reviewed, Interview, Offered, Rejected."""
    application = ApplicationService().update_status(application_id, update.status)
    return success_response("Application status updated successfully.", application)


@router.get("/{job_id}/applicants")
async def list_applicants(job_id: str, user: CurrentUser = Depends(get_current_user)):
    applications = ApplicationService().list_for_job(job_id)
    return success_response("Applications fetched successfully.", applications, total=len(applications))


@router.get("/{user_id}")
async def list_applied_jobs(user_id: str, user: CurrentUser = Depends(get_current_user)):
    """Applications of the caller, with job and company details."""
    if user_id != user.user_id:
        raise ForbiddenError("You can only view your own applications.")
    applications = ApplicationService().list_for_applicant(user_id)
    return success_response("Applications fetched successfully.", applications, total=len(applications))
