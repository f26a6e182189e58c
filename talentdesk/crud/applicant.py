"""
CRUD operations for applicants.
"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session, joinedload
from talentdesk.core.exceptions import NotFoundError
from talentdesk.models.applicant import Applicant
from talentdesk.models.pipeline import ShortlistedCandidate, PipelineStage, PipelineStatus

logger = logging.getLogger(__name__)


def create_with_pipeline_entry(
    db: Session,
    job_id: int,
    basic_form_data: List[Dict[str, Any]],
    application_form_data: Dict[str, Any],
    resume_path: str,
    full_name: str,
    email: str,
    phone: Optional[str] = None,
) -> Applicant:
    """
    Insert an applicant together with its pipeline entry.

    Both rows are committed in one transaction; on failure the session is
    rolled back and the error re-raised.

    Returns:
        Created Applicant with pipeline_entry populated
    """
    applicant = Applicant(
        job_id=job_id,
        basic_form_data=basic_form_data,
        application_form_data=application_form_data,
        resume_path=resume_path,
    )
    applicant.pipeline_entry = ShortlistedCandidate(
        job_post_id=job_id,
        full_name=full_name,
        email=email,
        phone=phone,
        rating=0,
        status=PipelineStatus.NEW_APPLICATION.value,
        stage=PipelineStage.APPLICATION_SCREENING.value,
    )

    try:
        db.add(applicant)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create applicant for job {job_id}: {e}")
        raise
    db.refresh(applicant)

    logger.info(f"Created applicant {applicant.id} for job {job_id}")
    return applicant


def _with_relations(db: Session):
    return db.query(Applicant).options(
        joinedload(Applicant.job),
        joinedload(Applicant.pipeline_entry),
    )


def get_by_id(db: Session, applicant_id: int) -> Optional[Applicant]:
    return _with_relations(db).filter(Applicant.id == applicant_id).first()


def get_multi(db: Session) -> List[Applicant]:
    """Every applicant, newest first, with posting and pipeline entry loaded."""
    return (
        _with_relations(db)
        .order_by(Applicant.created_at.desc(), Applicant.id.desc())
        .all()
    )


def get_by_job(db: Session, job_id: int) -> List[Applicant]:
    return (
        _with_relations(db)
        .filter(Applicant.job_id == job_id)
        .order_by(Applicant.created_at.desc(), Applicant.id.desc())
        .all()
    )


def delete(db: Session, applicant_id: int) -> Optional[str]:
    """
    Delete an applicant and its pipeline entry.

    Returns:
        The applicant's resume path, for the caller to remove from storage

    Raises:
        NotFoundError: If the applicant does not exist
    """
    applicant = get_by_id(db, applicant_id)
    if not applicant:
        raise NotFoundError("Applicant not found")

    resume_path = applicant.resume_path
    db.delete(applicant)
    db.commit()

    logger.info(f"Deleted applicant {applicant_id}")
    return resume_path
