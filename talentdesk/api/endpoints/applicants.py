"""
API endpoints for applicants and the hiring pipeline.

POST /applicants is public (candidates apply from the careers site); every
other route requires a bearer token.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from talentdesk.core.config import settings
from talentdesk.core.database import get_db
from talentdesk.core.deps import get_current_admin
from talentdesk.core.exceptions import NotFoundError
from talentdesk.core.storage import StorageBackend, get_storage
from talentdesk.crud import applicant as applicant_crud
from talentdesk.crud import pipeline as pipeline_crud
from talentdesk.models.applicant import Applicant
from talentdesk.models.pipeline import PipelineStatus, ShortlistedCandidate
from talentdesk.schemas.admin_user import TokenIdentity
from talentdesk.schemas.applicant import (
    ApplicantDetailResponse,
    ApplicantListResponse,
    ApplicantSummary,
    ApplicationSubmitResponse,
    PipelineEntryResponse,
    PipelineListResponse,
    StageUpdateRequest,
    StageUpdateResponse,
)
from talentdesk.services.applicant_intake import discard_resume, submit_application
from talentdesk.services.form_data import extract_contact_fields

router = APIRouter(prefix="/applicants", tags=["Applicants"])
logger = logging.getLogger(__name__)


def to_applicant_summary(applicant: Applicant) -> ApplicantSummary:
    """
    Applicant joined with posting and pipeline entry.

    Contact details come from the pipeline entry; applicants without one fall
    back to their basic form answers and have no stage/status.
    """
    entry = applicant.pipeline_entry
    job = applicant.job
    contact = entry if entry else extract_contact_fields(applicant.basic_form_data)

    return ApplicantSummary(
        id=applicant.id,
        uuid=applicant.uuid,
        shortlist_id=entry.id if entry else None,
        full_name=contact.full_name or None,
        email=contact.email or None,
        phone=contact.phone or None,
        resume_path=applicant.resume_path,
        job_id=applicant.job_id,
        job_title=job.job_title if job else None,
        job_post_id=entry.job_post_id if entry else None,
        department=job.department if job else None,
        current_stage=entry.stage if entry else None,
        current_stage_status=entry.status if entry else None,
        rating=entry.rating if entry else None,
        note=entry.note if entry else None,
        applied_at=applicant.created_at,
        basic_form_data=applicant.basic_form_data or [],
        application_form_data=applicant.application_form_data or {},
    )


def to_pipeline_entry(entry: ShortlistedCandidate) -> PipelineEntryResponse:
    job = entry.job_post
    return PipelineEntryResponse(
        id=entry.id,
        applicant_id=entry.applicant_id,
        job_post_id=entry.job_post_id,
        full_name=entry.full_name,
        email=entry.email,
        phone=entry.phone,
        job_title=job.job_title if job else None,
        department=job.department if job else None,
        status=entry.status,
        stage=entry.stage,
        rating=entry.rating,
        note=entry.note,
        resume_path=entry.applicant.resume_path if entry.applicant else None,
        created_at=entry.created_at,
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApplicationSubmitResponse)
async def submit_applicant(
    job_id: Optional[int] = Form(None),
    basicFormData: Optional[str] = Form(None),
    applicationFormData: Optional[str] = Form(None),
    resume: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage)
):
    """
    Submit a job application (public, multipart/form-data).

    Fields:
    - job_id: Posting to apply for
    - basicFormData: JSON array of {label, name, value} answers; must contain
      the applicant's full name and email
    - applicationFormData: JSON object with the step-wise answers
    - resume: PDF file, at most 5MB

    The applicant and its pipeline entry (stage "Application Screening",
    status "New Application") are created together. If the database write
    fails the uploaded file is removed again.
    """
    # One byte past the cap is enough to reject an oversized file
    content = await resume.read(settings.MAX_RESUME_SIZE_BYTES + 1) if resume is not None else None

    applicant = submit_application(
        db,
        storage,
        job_id=job_id,
        basic_form_raw=basicFormData,
        application_form_raw=applicationFormData,
        resume_filename=resume.filename if resume is not None else None,
        resume_content_type=resume.content_type if resume is not None else None,
        resume_content=content,
    )

    return ApplicationSubmitResponse(applicant_id=applicant.id, applicant_uuid=applicant.uuid)


@router.get("", response_model=ApplicantListResponse)
def list_applicants(
    db: Session = Depends(get_db),
    identity: TokenIdentity = Depends(get_current_admin)
):
    """All applicants with their current stage and status, newest first."""
    applicants = applicant_crud.get_multi(db)
    return ApplicantListResponse(applicants=[to_applicant_summary(a) for a in applicants])


def _list_with_status(db: Session, pipeline_status: PipelineStatus) -> PipelineListResponse:
    entries = pipeline_crud.list_by_status(db, pipeline_status)
    return PipelineListResponse(applicants=[to_pipeline_entry(e) for e in entries])


@router.get("/shortlisted", response_model=PipelineListResponse)
def list_shortlisted(
    db: Session = Depends(get_db),
    identity: TokenIdentity = Depends(get_current_admin)
):
    """Pipeline entries with status exactly "Shortlisted"."""
    return _list_with_status(db, PipelineStatus.SHORTLISTED)


@router.get("/rejected", response_model=PipelineListResponse)
def list_rejected(
    db: Session = Depends(get_db),
    identity: TokenIdentity = Depends(get_current_admin)
):
    """Pipeline entries with status exactly "Rejected"."""
    return _list_with_status(db, PipelineStatus.REJECTED)


@router.get("/hired", response_model=PipelineListResponse)
def list_hired(
    db: Session = Depends(get_db),
    identity: TokenIdentity = Depends(get_current_admin)
):
    """Pipeline entries with status exactly "Hired"."""
    return _list_with_status(db, PipelineStatus.HIRED)


@router.get("/job/{job_id}", response_model=ApplicantListResponse)
def list_applicants_for_job(
    job_id: int,
    db: Session = Depends(get_db),
    identity: TokenIdentity = Depends(get_current_admin)
):
    applicants = applicant_crud.get_by_job(db, job_id)
    return ApplicantListResponse(applicants=[to_applicant_summary(a) for a in applicants])


@router.get("/{applicant_id}", response_model=ApplicantDetailResponse)
def get_applicant(
    applicant_id: int,
    db: Session = Depends(get_db),
    identity: TokenIdentity = Depends(get_current_admin)
):
    applicant = applicant_crud.get_by_id(db, applicant_id)
    if not applicant:
        raise NotFoundError("Applicant not found")
    return ApplicantDetailResponse(applicant=to_applicant_summary(applicant))


@router.patch("/{applicant_id}/stage", response_model=StageUpdateResponse)
def update_applicant_stage(
    applicant_id: int,
    request: StageUpdateRequest,
    db: Session = Depends(get_db),
    identity: TokenIdentity = Depends(get_current_admin)
):
    """
    Update an applicant's pipeline stage, status, note and/or rating.

    Applicants that have no pipeline entry yet get one on the fly (stage
    "Application Screening", status "New Application") before the changes are
    applied. Stage moves must follow Application Screening -> Shortlisted ->
    Hired, with Rejected reachable from either of the first two.
    """
    changes = request.model_dump(include=request.model_fields_set)
    applicant = pipeline_crud.update_stage(db, applicant_id, changes)
    logger.info(f"Admin {identity.id} updated stage of applicant {applicant_id}")
    return StageUpdateResponse(applicant=to_applicant_summary(applicant))


@router.delete("/{applicant_id}")
def delete_applicant(
    applicant_id: int,
    db: Session = Depends(get_db),
    storage: StorageBackend = Depends(get_storage),
    identity: TokenIdentity = Depends(get_current_admin)
):
    """Delete an applicant, its pipeline entry and its resume file."""
    resume_path = applicant_crud.delete(db, applicant_id)

    if resume_path:
        discard_resume(storage, resume_path)

    return {"success": True, "message": "Applicant deleted successfully"}
