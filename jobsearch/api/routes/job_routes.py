"""
Job Routes

POST   /job/addJob                        - Post a job (HR)
PUT    /job/updateJob/{id}                - Update own job (HR)
DELETE /job/deleteJob/{id}                - Delete own job (HR)
GET    /job/JobsWithCompaniesInfo         - Every company with its jobs
GET    /job/getAllJobsForSpecificCompany  - Jobs of one company, by name
GET    /job/getFilteredJobs               - Search jobs
POST   /job/applyToJob                    - Apply with a resume (User)
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from jobsearch.api.deps import get_application_submission, get_job_service
from jobsearch.core.auth import Identity, Role, auth
from jobsearch.core.validation import validate
from jobsearch.schemas.schemas import (
    ApplyJobBody, CompanyNameQuery, JobCreate, JobDeleteParams,
    JobFilterQuery, JobUpdate, MessageResponse,
)
from jobsearch.services.application_service import ApplicationSubmission
from jobsearch.services.job_service import JobService

router = APIRouter(prefix="/job", tags=["Jobs"])


@router.post("/addJob", response_model=MessageResponse, status_code=201)
async def add_job(
    identity: Identity = Depends(auth(Role.company_hr)),
    data: JobCreate = Depends(validate(JobCreate)),
    jobs: JobService = Depends(get_job_service),
):
    jobs.add_job(identity, data)
    return MessageResponse(message="Job added successfully")


@router.put("/updateJob/{id}")
async def update_job(
    identity: Identity = Depends(auth(Role.company_hr)),
    data: JobUpdate = Depends(validate(JobUpdate, ["params", "body"])),
    jobs: JobService = Depends(get_job_service),
):
    """Update a job. Only the HR who posted it may do so."""
    job = jobs.update_job(identity, data)
    return {"message": "Job data updated successfully", "job": job}


@router.delete("/deleteJob/{id}")
async def delete_job(
    identity: Identity = Depends(auth(Role.company_hr)),
    params: JobDeleteParams = Depends(validate(JobDeleteParams, "params")),
    jobs: JobService = Depends(get_job_service),
):
    job = jobs.delete_job(identity, params.id)
    return {"message": "Job data deleted successfully", "job": job}


@router.get("/JobsWithCompaniesInfo")
async def jobs_with_companies_info(
    identity: Identity = Depends(auth()),
    jobs: JobService = Depends(get_job_service),
):
    return {"companies": jobs.jobs_with_companies()}


@router.get("/getAllJobsForSpecificCompany")
async def get_all_jobs_for_specific_company(
    identity: Identity = Depends(auth()),
    query: CompanyNameQuery = Depends(validate(CompanyNameQuery, "query")),
    jobs: JobService = Depends(get_job_service),
):
    return jobs.jobs_for_company(query.companyName)


@router.get("/getFilteredJobs")
async def get_filtered_jobs(
    identity: Identity = Depends(auth()),
    filters: JobFilterQuery = Depends(validate(JobFilterQuery, "query")),
    jobs: JobService = Depends(get_job_service),
):
    """
    Search jobs.

    workingTime, jobLocation and seniorityLevel match exactly, jobTitle is a
    case-insensitive substring, technicalSkills is comma-separated and every
    listed skill must be present.
    """
    found = jobs.filtered_jobs(filters)
    if not found:
        return JSONResponse(
            status_code=404,
            content={"message": "There are no jobs with these specifications"},
        )
    return {"jobs": found}


@router.post("/applyToJob", response_model=MessageResponse, status_code=201)
async def apply_to_job(
    request: Request,
    identity: Identity = Depends(auth(Role.user)),
    data: ApplyJobBody = Depends(validate(ApplyJobBody, skip=["userResume"])),
    submission: ApplicationSubmission = Depends(get_application_submission),
):
    """
    Apply to a job.

    Multipart form: jobId, userTechSkills and userSoftSkills (JSON arrays as
    text) plus the resume file in `userResume`.
    """
    skills, job = submission.prepare(data)

    form = await request.form()
    resume = form.get("userResume")
    # An unchosen file arrives as an empty-filename part
    if not isinstance(resume, UploadFile) or not resume.filename:
        return JSONResponse(status_code=400, content={"message": "Resume file is required"})

    # Disk copy and asset-store upload are blocking
    await run_in_threadpool(submission.submit, identity, skills, job, resume)
    return MessageResponse(message="Application submitted successfully")
