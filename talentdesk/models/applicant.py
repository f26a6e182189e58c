"""
Applicant model.

One row per public submission. The answers are stored as submitted; contact
details are copied onto the pipeline entry (ShortlistedCandidate).
"""

import uuid
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from talentdesk.core.database import Base, JSONColumn


class Applicant(Base):
    __tablename__ = "applicants"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    job_id = Column(Integer, ForeignKey("job_posts.id", ondelete="CASCADE"), nullable=False, index=True)

    # Answers to the basic fields (ordered list) and the step-wise form (object)
    basic_form_data = Column(JSONColumn, nullable=False, default=list)
    application_form_data = Column(JSONColumn, nullable=False, default=dict)

    # Public path (/uploads/resumes/...) or s3:// URI
    resume_path = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    job = relationship("JobPost", back_populates="applicants")
    pipeline_entry = relationship(
        "ShortlistedCandidate",
        back_populates="applicant",
        uselist=False,
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Applicant(id={self.id}, job_id={self.job_id})>"
