import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from talentdesk.core.database import get_db
from talentdesk.core.deps import get_current_admin
from talentdesk.core.exceptions import NotFoundError
from talentdesk.core.storage import StorageBackend, get_storage
from talentdesk.crud import job_post as job_crud
from talentdesk.models.job_post import JobPost
from talentdesk.schemas.admin_user import TokenIdentity
from talentdesk.schemas.job_post import (
    JobCreateRequest,
    JobDeleteResponse,
    JobListResponse,
    JobMutationResponse,
    JobResponse,
    JobUpdateRequest,
)
from talentdesk.services.applicant_intake import discard_resume

router = APIRouter(tags=["Jobs"])
logger = logging.getLogger(__name__)


def to_job_response(job: JobPost) -> JobResponse:
    """Flatten a posting and its (possibly missing) form into one response object."""
    form = job.application_form
    return JobResponse(
        id=job.id,
        uuid=job.uuid,
        job_title=job.job_title,
        slug=job.slug,
        details=job.details or {},
        description=job.description or {},
        basic_form_schema=form.basic_form_schema if form and form.basic_form_schema else [],
        application_form_schema=form.application_form_schema if form and form.application_form_schema else {},
        created_by=job.created_by,
        created_at=job.created_at,
        updated_at=job.updated_at,
    )


@router.get("/jobs", response_model=JobListResponse)
def list_jobs(db: Session = Depends(get_db)):
    """
    List all job postings with their application forms (public).

    Postings without a stored form come back with an empty
    basicFormSchema list and applicationFormSchema object.
    """
    jobs = job_crud.get_multi(db)
    return JobListResponse(jobs=[to_job_response(job) for job in jobs])


@router.get("/jobs/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """Retrieve a single posting by id (public)."""
    job = job_crud.get_by_id(db, job_id)
    if not job:
        raise NotFoundError("Job not found")
    return to_job_response(job)


@router.post("/add-job", status_code=status.HTTP_201_CREATED, response_model=JobMutationResponse)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db),
    identity: TokenIdentity = Depends(get_current_admin)
):
    """
    Create a job posting and its application form in one transaction.

    The multi-step form may be sent as `applicationFormSchema` or, from older
    clients, `applicationForm`; it is stored as applicationFormSchema either way.
    """
    job = job_crud.create(db, request, created_by=identity.id)
    return JobMutationResponse(message="Job created successfully!", job=to_job_response(job))


@router.patch("/jobs/{job_id}", response_model=JobMutationResponse)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db),
    identity: TokenIdentity = Depends(get_current_admin)
):
    """
    Partially update a posting.

    Only fields present in the body are changed. In particular, leaving out
    basicFormSchema/applicationFormSchema keeps the stored form as it is.
    """
    job = job_crud.update(db, job_id, request.supplied_fields())
    logger.info(f"Admin {identity.id} updated job {job_id}")
    return JobMutationResponse(message="Job updated successfully", job=to_job_response(job))


@router.delete("/jobs/{job_id}", response_model=JobDeleteResponse)
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
    identity: TokenIdentity = Depends(get_current_admin)
):
    """
    Delete a posting together with its form, applicants and pipeline entries.

    The applicants' resume files are removed afterwards on a best-effort basis.
    """
    deleted = job_crud.delete(db, job_id)

    for resume_path in deleted.pop("resume_paths"):
        discard_resume(storage, resume_path)

    logger.info(f"Admin {identity.id} deleted job {job_id}")
    return JobDeleteResponse(deleted=deleted)
