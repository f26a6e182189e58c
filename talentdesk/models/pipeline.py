"""
Applicant pipeline model.

Each applicant has at most one ShortlistedCandidate row tracking where it is
in the hiring pipeline:

    Application Screening -> Shortlisted -> Hired
              |                  |
              +----> Rejected <--+

Stage and status are stored as plain strings so existing rows stay readable,
but writes are restricted to the enum values below.
"""

import enum
from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, UniqueConstraint, func
from sqlalchemy.orm import relationship
from talentdesk.core.database import Base


class PipelineStage(str, enum.Enum):
    APPLICATION_SCREENING = "Application Screening"
    SHORTLISTED = "Shortlisted"
    REJECTED = "Rejected"
    HIRED = "Hired"


class PipelineStatus(str, enum.Enum):
    NEW_APPLICATION = "New Application"
    IN_REVIEW = "In Review"
    SHORTLISTED = "Shortlisted"
    REJECTED = "Rejected"
    HIRED = "Hired"


# Allowed stage moves; Rejected and Hired are terminal
STAGE_TRANSITIONS = {
    PipelineStage.APPLICATION_SCREENING: {PipelineStage.SHORTLISTED, PipelineStage.REJECTED},
    PipelineStage.SHORTLISTED: {PipelineStage.HIRED, PipelineStage.REJECTED},
    PipelineStage.REJECTED: set(),
    PipelineStage.HIRED: set(),
}

MIN_RATING = 0
MAX_RATING = 5


def can_transition(current: str, target: PipelineStage) -> bool:
    """
    Check whether a pipeline entry in stage `current` may move to `target`.

    Re-applying the current stage is always allowed. A current value outside
    the enum (legacy free-text rows) may only move back to screening.
    """
    if current == target.value:
        return True
    try:
        current_stage = PipelineStage(current)
    except ValueError:
        return target == PipelineStage.APPLICATION_SCREENING
    return target in STAGE_TRANSITIONS[current_stage]


class ShortlistedCandidate(Base):
    __tablename__ = "shortlisted_candidates"
    __table_args__ = (
        UniqueConstraint("applicant_id", name="uq_shortlisted_candidates_applicant_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    job_post_id = Column(Integer, ForeignKey("job_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    applicant_id = Column(Integer, ForeignKey("applicants.id", ondelete="CASCADE"), nullable=False)

    # Contact details copied from the applicant's basic form answers
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)

    rating = Column(Integer, nullable=False, default=0, server_default="0")
    status = Column(
        String(50),
        nullable=False,
        default=PipelineStatus.NEW_APPLICATION.value,
        server_default=PipelineStatus.NEW_APPLICATION.value,
        index=True,
    )
    stage = Column(
        String(100),
        nullable=False,
        default=PipelineStage.APPLICATION_SCREENING.value,
        server_default=PipelineStage.APPLICATION_SCREENING.value,
    )
    note = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    applicant = relationship("Applicant", back_populates="pipeline_entry")
    job_post = relationship("JobPost")

    def __repr__(self):
        return f"<ShortlistedCandidate(id={self.id}, applicant_id={self.applicant_id}, stage='{self.stage}', status='{self.status}')>"
