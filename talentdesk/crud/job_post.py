"""
CRUD operations for job postings and their application forms.

A posting and its form are always written in the same transaction.
"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from talentdesk.core.exceptions import ConflictError, NotFoundError, ValidationError
from talentdesk.models.job_application_form import JobApplicationForm
from talentdesk.models.job_post import JobPost
from talentdesk.schemas.job_post import JobCreateRequest

logger = logging.getLogger(__name__)

# Defaults used when a JSON field is null or missing
JSON_DEFAULTS = {
    "details": dict,
    "description": dict,
    "basic_form_schema": list,
    "application_form_schema": dict,
}


def _slug_taken(db: Session, slug: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(JobPost.id).filter(JobPost.slug == slug)
    if exclude_id is not None:
        query = query.filter(JobPost.id != exclude_id)
    return query.first() is not None


def get_by_id(db: Session, job_id: int) -> Optional[JobPost]:
    return (
        db.query(JobPost)
        .options(joinedload(JobPost.application_form))
        .filter(JobPost.id == job_id)
        .first()
    )


def get_multi(db: Session) -> List[JobPost]:
    """All postings, newest first, with their form schema loaded in the same query."""
    return (
        db.query(JobPost)
        .options(joinedload(JobPost.application_form))
        .order_by(JobPost.id.desc())
        .all()
    )


def create(db: Session, job_data: JobCreateRequest, created_by: Optional[int] = None) -> JobPost:
    """
    Create a posting and its application form in one transaction.

    Args:
        db: Database session
        job_data: Validated creation payload
        created_by: Id of the admin creating the posting

    Returns:
        Created JobPost with its application_form attached

    Raises:
        ConflictError: If the slug is already used
    """
    if _slug_taken(db, job_data.slug):
        raise ConflictError(f"Slug '{job_data.slug}' is already in use")

    job = JobPost(
        job_title=job_data.title,
        slug=job_data.slug,
        details=job_data.details or {},
        description=job_data.description or {},
        created_by=created_by,
    )
    job.application_form = JobApplicationForm(
        basic_form_schema=job_data.basic_form_schema or [],
        application_form_schema=job_data.resolved_application_form_schema(),
    )

    db.add(job)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Slug '{job_data.slug}' is already in use")
    except Exception:
        db.rollback()
        raise
    db.refresh(job)

    logger.info(f"Created job {job.id} ({job.slug})")
    return job


def update(db: Session, job_id: int, fields: Dict[str, Any]) -> JobPost:
    """
    Apply a partial update to a posting and its form.

    Only keys present in `fields` are written. A null JSON field resets it to
    its empty default; a null title or slug is ignored.

    Raises:
        ValidationError: If no fields were supplied
        NotFoundError: If the posting does not exist
        ConflictError: If the new slug is used by another posting
    """
    if not fields:
        raise ValidationError("No fields provided for update")

    job = get_by_id(db, job_id)
    if not job:
        raise NotFoundError("Job not found")

    if fields.get("title") is not None:
        job.job_title = fields["title"]

    new_slug = fields.get("slug")
    slug_changed = new_slug is not None and new_slug != job.slug
    if slug_changed:
        if _slug_taken(db, new_slug, exclude_id=job.id):
            raise ConflictError(f"Slug '{new_slug}' is already in use")
        job.slug = new_slug

    for column in ("details", "description"):
        if column in fields:
            setattr(job, column, fields[column] if fields[column] is not None else JSON_DEFAULTS[column]())

    form_columns = [c for c in ("basic_form_schema", "application_form_schema") if c in fields]
    if form_columns:
        if job.application_form is None:
            job.application_form = JobApplicationForm(basic_form_schema=[], application_form_schema={})
        for column in form_columns:
            value = fields[column] if fields[column] is not None else JSON_DEFAULTS[column]()
            setattr(job.application_form, column, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if slug_changed:
            raise ConflictError(f"Slug '{new_slug}' is already in use")
        raise ConflictError("Job was modified by another request, please retry")
    except Exception:
        db.rollback()
        raise
    db.refresh(job)

    logger.info(f"Updated job {job.id}: {sorted(fields)}")
    return job


def delete(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Delete a posting. The form, applicants and pipeline entries go with it.

    Returns:
        Summary of the deleted posting plus the resume paths of its applicants,
        so the caller can remove the stored files

    Raises:
        NotFoundError: If the posting does not exist
    """
    job = get_by_id(db, job_id)
    if not job:
        raise NotFoundError("Job not found or already deleted.")

    deleted = {
        "id": job.id,
        "uuid": job.uuid,
        "title": job.job_title,
        "resume_paths": [a.resume_path for a in job.applicants if a.resume_path],
    }

    db.delete(job)
    db.commit()

    logger.info(f"Deleted job {job_id} with {len(deleted['resume_paths'])} applicants")
    return deleted
