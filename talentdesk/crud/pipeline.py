"""
CRUD operations for the applicant pipeline (shortlisted_candidates).

Stage updates are get-or-create: an applicant without a pipeline entry gets
one built from its stored answers, inside the same transaction as the update.
The unique constraint on applicant_id decides concurrent first updates; the
loser reuses the winner's row.
"""

import logging
from typing import Any, Dict, List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, contains_eager
from talentdesk.core.exceptions import InvalidTransitionError, NotFoundError
from talentdesk.crud import applicant as applicant_crud
from talentdesk.models.applicant import Applicant
from talentdesk.models.pipeline import (
    ShortlistedCandidate,
    PipelineStage,
    PipelineStatus,
    can_transition,
)
from talentdesk.services.form_data import extract_contact_fields

logger = logging.getLogger(__name__)


def get_by_applicant(db: Session, applicant_id: int):
    return db.query(ShortlistedCandidate).filter(ShortlistedCandidate.applicant_id == applicant_id).first()


def get_or_create_entry(db: Session, applicant: Applicant) -> ShortlistedCandidate:
    """
    Return the applicant's pipeline entry, creating it with default stage and
    status when missing. Does not commit.
    """
    entry = get_by_applicant(db, applicant.id)
    if entry:
        return entry

    contact = extract_contact_fields(applicant.basic_form_data)
    entry = ShortlistedCandidate(
        job_post_id=applicant.job_id,
        full_name=contact.full_name,
        email=contact.email,
        phone=contact.phone or None,
        rating=0,
        status=PipelineStatus.NEW_APPLICATION.value,
        stage=PipelineStage.APPLICATION_SCREENING.value,
    )

    try:
        with db.begin_nested():
            # Flushed when the savepoint closes
            applicant.pipeline_entry = entry
    except IntegrityError:
        # A concurrent request created it first
        logger.info(f"Pipeline entry for applicant {applicant.id} created concurrently, reusing it")
        return db.query(ShortlistedCandidate).filter(ShortlistedCandidate.applicant_id == applicant.id).one()

    logger.info(f"Created missing pipeline entry for applicant {applicant.id}")
    return entry


def update_stage(db: Session, applicant_id: int, changes: Dict[str, Any]) -> Applicant:
    """
    Apply stage/status/note/rating changes to an applicant's pipeline entry.

    Args:
        db: Database session
        applicant_id: Applicant id (not the pipeline entry id)
        changes: Supplied fields only; stage and status are enum members.
            A None stage, status or rating is ignored, a None note clears it.

    Returns:
        The applicant with its updated pipeline entry

    Raises:
        NotFoundError: If the applicant does not exist
        InvalidTransitionError: If the stage cannot be reached from the current one
    """
    applicant = applicant_crud.get_by_id(db, applicant_id)
    if not applicant:
        raise NotFoundError("Applicant not found")

    try:
        entry = get_or_create_entry(db, applicant)

        stage = changes.get("stage")
        if stage is not None:
            if not can_transition(entry.stage, stage):
                raise InvalidTransitionError(
                    f"Cannot move applicant from '{entry.stage}' to '{stage.value}'"
                )
            entry.stage = stage.value

        if changes.get("status") is not None:
            entry.status = changes["status"].value

        if "note" in changes:
            entry.note = changes["note"]

        if changes.get("rating") is not None:
            entry.rating = changes["rating"]

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Updated pipeline for applicant {applicant_id}: stage='{entry.stage}' status='{entry.status}'")
    return applicant_crud.get_by_id(db, applicant_id)


def list_by_status(db: Session, status: PipelineStatus) -> List[ShortlistedCandidate]:
    """
    Pipeline entries whose status equals `status` exactly, newest first.
    """
    return (
        db.query(ShortlistedCandidate)
        .join(ShortlistedCandidate.applicant)
        .join(ShortlistedCandidate.job_post)
        .options(
            contains_eager(ShortlistedCandidate.applicant),
            contains_eager(ShortlistedCandidate.job_post),
        )
        .filter(ShortlistedCandidate.status == status.value)
        .order_by(ShortlistedCandidate.created_at.desc(), ShortlistedCandidate.id.desc())
        .all()
    )
