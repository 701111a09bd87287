"""
Job Routes

POST /job/post - Create job posting
PUT /job/update/{job_id} - Update job
GET /job/all?keyword= - Search jobs (title/description), company populated
GET /job/all/{user_id} - Jobs posted by a user
GET /job/{job_id} - Get job
DELETE /job/{job_id} - Delete job (unlinks it from company and categories)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from jobboard.core.auth import CurrentUser, get_current_user
from jobboard.schemas.schemas import JobCreate, JobUpdate, success_response
from jobboard.services.job_service import JobService

router = APIRouter(prefix="/job", tags=["Jobs"])


@router.post("/post", status_code=201)
async def post_job(job: JobCreate, user: CurrentUser = Depends(get_current_user)):
    """
    Create a job posting.

    `company` and every id in `categories` must exist. The new job is
    linked into the company's and the categories' `jobs` lists.
    """
    created = JobService().post(user.user_id, job)
    return success_response("Job created successfully", created)


@router.put("/update/{job_id}")
async def update_job(job_id: str, update: JobUpdate, user: CurrentUser = Depends(get_current_user)):
    job = JobService().update(job_id, update)
    return success_response("Job updated successfully", job)


@router.get("/all")
async def list_jobs(
    keyword: Optional[str] = Query(None, description="Search in title and description"),
    user: CurrentUser = Depends(get_current_user),
):
    """List jobs, newest first."""
    jobs = JobService().list_all(keyword)
    return success_response("All jobs fetched successfully.", jobs, total=len(jobs))


@router.get("/all/{user_id}")
async def list_jobs_by_poster(user_id: str, user: CurrentUser = Depends(get_current_user)):
    jobs = JobService().list_by_poster(user_id)
    return success_response("Jobs found successfully.", jobs, total=len(jobs))


@router.get("/{job_id}")
async def get_job(job_id: str, user: CurrentUser = Depends(get_current_user)):
    job = JobService().get_by_id(job_id)
    return success_response("Job found successfully", job)


@router.delete("/{job_id}")
async def delete_job(job_id: str, user: CurrentUser = Depends(get_current_user)):
    """Delete a job. Existing applications to it are kept."""
    JobService().delete(job_id)
    return success_response("Job deleted successfully")
