"""
Company Routes

POST /company/create - Create company owned by the caller
GET /company/all - List all companies
GET /company/user/{user_id} - List companies owned by a user
PUT /company/update/{company_id} - Update company
GET /company/{company_id} - Get company
DELETE /company/{company_id} - Delete company (only once it has no jobs)
"""

from fastapi import APIRouter, Depends

from jobboard.core.auth import CurrentUser, get_current_user
from jobboard.schemas.schemas import CompanyCreate, CompanyUpdate, success_response
from jobboard.services.company_service import CompanyService

router = APIRouter(prefix="/company", tags=["Companies"])


@router.post("/create", status_code=201)
async def create_company(data: CompanyCreate, user: CurrentUser = Depends(get_current_user)):
    """Create a company. The caller becomes its owner."""
    company = CompanyService().create(user.user_id, data)
    return success_response("Company created successfully", company)


@router.get("/all")
async def list_companies(user: CurrentUser = Depends(get_current_user)):
    companies = CompanyService().list_all()
    return success_response("Companies found successfully", companies, total=len(companies))


@router.get("/user/{user_id}")
async def list_companies_by_owner(user_id: str, user: CurrentUser = Depends(get_current_user)):
    """Companies whose owner list contains `user_id`."""
    companies = CompanyService().list_by_owner(user_id)
    return success_response("Companies found successfully", companies, total=len(companies))


@router.put("/update/{company_id}")
async def update_company(company_id: str, data: CompanyUpdate, user: CurrentUser = Depends(get_current_user)):
    company = CompanyService().update(company_id, data)
    return success_response("Company updated successfully", company)


@router.get("/{company_id}")
async def get_company(company_id: str, user: CurrentUser = Depends(get_current_user)):
    company = CompanyService().get_by_id(company_id)
    return success_response("Company found successfully", company)


@router.delete("/{company_id}")
async def delete_company(company_id: str, user: CurrentUser = Depends(get_current_user)):
    company = CompanyService().delete(company_id)
    return success_response(f"{company['name']} deleted successfully")
