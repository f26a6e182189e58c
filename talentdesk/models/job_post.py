import uuid
from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from talentdesk.core.database import Base, JSONColumn


class JobPost(Base):
    """
    A job posting.

    `details` and `description` are opaque JSON objects owned by the admin
    frontend. The application form lives in JobApplicationForm (1:1).
    """
    __tablename__ = "job_posts"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    job_title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)

    details = Column(JSONColumn, nullable=False, default=dict)
    description = Column(JSONColumn, nullable=False, default=dict)

    # Admin id taken from the token at creation time (not a FK, admins can be deleted)
    created_by = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    application_form = relationship(
        "JobApplicationForm",
        back_populates="job_post",
        uselist=False,
        cascade="all, delete-orphan",
    )
    applicants = relationship("Applicant", back_populates="job", cascade="all, delete-orphan")

    @property
    def department(self):
        """details.department when it is a plain string"""
        if isinstance(self.details, dict):
            value = self.details.get("department")
            if isinstance(value, str):
                return value
        return None

    def __repr__(self):
        return f"<JobPost(id={self.id}, slug='{self.slug}')>"
