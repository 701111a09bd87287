"""
Job Category Routes

POST /job/category/create - Create category
GET /job/category/all - List categories
PUT /job/category/update/{category_id} - Rename category
GET /job/category/{category_id} - Get category
DELETE /job/category/{category_id} - Delete category (unlinks it from jobs)
"""

from fastapi import APIRouter, Depends

from jobboard.core.auth import CurrentUser, get_current_user
from jobboard.schemas.schemas import JobCategoryCreate, JobCategoryUpdate, success_response
from jobboard.services.category_service import JobCategoryService

router = APIRouter(prefix="/job/category", tags=["Job Categories"])


@router.post("/create", status_code=201)
async def create_category(data: JobCategoryCreate, user: CurrentUser = Depends(get_current_user)):
    category = JobCategoryService().create(data)
    return success_response("Job category created successfully", category)


@router.get("/all")
async def list_categories(user: CurrentUser = Depends(get_current_user)):
    categories = JobCategoryService().list_all()
    return success_response("Job categories fetched successfully", categories, total=len(categories))


@router.put("/update/{category_id}")
async def update_category(category_id: str, data: JobCategoryUpdate, user: CurrentUser = Depends(get_current_user)):
    category = JobCategoryService().update(category_id, data)
    return success_response("Job category updated successfully", category)


@router.get("/{category_id}")
async def get_category(category_id: str, user: CurrentUser = Depends(get_current_user)):
    category = JobCategoryService().get_by_id(category_id)
    return success_response("Job category found successfully", category)


@router.delete("/{category_id}")
async def delete_category(category_id: str, user: CurrentUser = Depends(get_current_user)):
    category = JobCategoryService().delete(category_id)
    return success_response(f"{category['name']} deleted successfully.")
