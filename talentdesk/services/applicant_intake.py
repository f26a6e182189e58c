"""
Applicant intake: turns a public multipart submission into an Applicant row,
a pipeline entry and a stored resume.
"""

import io
import logging
from typing import Optional
from sqlalchemy.orm import Session
from talentdesk.core.config import settings
from talentdesk.core.exceptions import FileTooLargeError, NotFoundError, ValidationError
from talentdesk.core.storage import StorageBackend
from talentdesk.crud import applicant as applicant_crud
from talentdesk.crud import job_post as job_crud
from talentdesk.models.applicant import Applicant
from talentdesk.services.form_data import extract_contact_fields, parse_json_field

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


def validate_resume(content_type: Optional[str], content: bytes) -> None:
    """
    Raises:
        ValidationError: If the file is not a PDF or is empty
        FileTooLargeError: If it exceeds MAX_RESUME_SIZE_MB
    """
    if content_type != PDF_CONTENT_TYPE:
        raise ValidationError("Only PDF files are allowed!")
    if not content:
        raise ValidationError("Resume file is empty")
    if len(content) > settings.MAX_RESUME_SIZE_BYTES:
        raise FileTooLargeError(f"File too large. Maximum size: {settings.MAX_RESUME_SIZE_MB}MB")


def discard_resume(storage: StorageBackend, resume_path: str) -> bool:
    """
    Best-effort removal of a stored resume. A file that is already gone
    counts as removed; a failed delete is logged and reported as False.
    """
    if not storage.file_exists(resume_path):
        logger.info(f"Resume {resume_path} already removed")
        return True

    if not storage.delete_file(resume_path):
        logger.warning(f"Could not remove resume {resume_path}")
        return False

    return True


def submit_application(
    db: Session,
    storage: StorageBackend,
    job_id: Optional[int],
    basic_form_raw: Optional[str],
    application_form_raw: Optional[str],
    resume_filename: Optional[str],
    resume_content_type: Optional[str],
    resume_content: Optional[bytes],
) -> Applicant:
    """
    Validate and store a public application.

    Nothing is written (file or rows) until every check has passed. The
    Applicant and its pipeline entry are inserted in one transaction; if that
    fails, the stored resume is deleted again.

    Args:
        db: Database session
        storage: Resume storage backend
        job_id: Target posting id
        basic_form_raw: JSON array of basic-field answers
        application_form_raw: JSON object of step-wise answers
        resume_filename, resume_content_type, resume_content: The uploaded
            file, or None for all three when no file was attached

    Raises:
        ValidationError: Missing job id, name, email or resume; bad JSON; non-PDF file
        FileTooLargeError: Resume above the size cap
        NotFoundError: Unknown job posting
    """
    basic_form_data = parse_json_field(basic_form_raw, list, "basicFormData")
    application_form_data = parse_json_field(application_form_raw, dict, "applicationFormData")
    contact = extract_contact_fields(basic_form_data)

    if not job_id or not contact.full_name or not contact.email:
        raise ValidationError("Missing required fields: job_id, full_name, and email")

    if resume_content is None:
        raise ValidationError("Resume PDF is required")
    validate_resume(resume_content_type, resume_content)

    if not job_crud.get_by_id(db, job_id):
        raise NotFoundError(f"Job {job_id} not found")

    resume_path = storage.save_resume(io.BytesIO(resume_content), resume_filename or "resume.pdf")
    logger.info(f"Saved resume for job {job_id} to {resume_path}")

    try:
        return applicant_crud.create_with_pipeline_entry(
            db,
            job_id=job_id,
            basic_form_data=basic_form_data,
            application_form_data=application_form_data,
            resume_path=resume_path,
            full_name=contact.full_name,
            email=contact.email,
            phone=contact.phone or None,
        )
    except Exception:
        # The transaction was rolled back; only the stored file is left over
        discard_resume(storage, resume_path)
        raise
