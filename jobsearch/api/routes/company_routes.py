"""
Company Routes

POST   /company/addCompany                          - Register a company (HR)
PUT    /company/updateCompanyData                   - Update own company (HR)
DELETE /company/deleteCompanyData                   - Delete own company (HR)
GET    /company/searchForCompanyWithName            - Find a company by name
GET    /company/getCompanyData/{id}                 - Company with its jobs (HR)
GET    /company/getAllApplicationsForSpecificJob{id} - Applications to own job (HR)
"""

from fastapi import APIRouter, Depends

from jobsearch.api.deps import get_company_service
from jobsearch.core.auth import Identity, Role, auth
from jobsearch.core.validation import validate
from jobsearch.schemas.schemas import (
    CompanyCreate, CompanyNameQuery, CompanyUpdate, IdParams, MessageResponse,
)
from jobsearch.services.company_service import CompanyService

router = APIRouter(prefix="/company", tags=["Companies"])


@router.post("/addCompany", response_model=MessageResponse, status_code=201)
async def add_company(
    identity: Identity = Depends(auth(Role.company_hr)),
    data: CompanyCreate = Depends(validate(CompanyCreate)),
    companies: CompanyService = Depends(get_company_service),
):
    """Register a company. Name and e-mail must be unique."""
    companies.add_company(data)
    return MessageResponse(message="Company added successfully")


@router.put("/updateCompanyData")
async def update_company_data(
    identity: Identity = Depends(auth(Role.company_hr)),
    data: CompanyUpdate = Depends(validate(CompanyUpdate)),
    companies: CompanyService = Depends(get_company_service),
):
    """Update the company whose HR is the caller."""
    company = companies.update_company(identity, data)
    return {"message": "Company data updated successfully", "company": company}


@router.delete("/deleteCompanyData")
async def delete_company_data(
    identity: Identity = Depends(auth(Role.company_hr)),
    companies: CompanyService = Depends(get_company_service),
):
    company = companies.delete_company(identity)
    return {"message": "Company data deleted successfully", "company": company}


@router.get("/searchForCompanyWithName")
async def search_for_company_with_name(
    identity: Identity = Depends(auth()),
    query: CompanyNameQuery = Depends(validate(CompanyNameQuery, "query")),
    companies: CompanyService = Depends(get_company_service),
):
    return companies.search_by_name(query.companyName)


@router.get("/getCompanyData/{id}")
async def get_company_data(
    identity: Identity = Depends(auth(Role.company_hr)),
    params: IdParams = Depends(validate(IdParams, "params")),
    companies: CompanyService = Depends(get_company_service),
):
    return companies.get_company_data(params.id)


@router.get("/getAllApplicationsForSpecificJob{id}")
async def get_all_applications_for_specific_job(
    id: str,
    identity: Identity = Depends(auth(Role.company_hr)),
    companies: CompanyService = Depends(get_company_service),
):
    """Applications to one job; only the HR who posted the job may see them."""
    return {"applications": companies.applications_for_job(identity, id)}
