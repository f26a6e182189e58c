import uuid
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from talentdesk.core.database import Base, JSONColumn


class JobApplicationForm(Base):
    """
    Application form schema attached to a job posting.

    basic_form_schema is an ordered list of field definitions; the
    application_form_schema holds the multi-step form as an object.
    """
    __tablename__ = "job_application_forms"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    job_post_id = Column(
        Integer,
        ForeignKey("job_posts.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    basic_form_schema = Column(JSONColumn, nullable=False, default=list)
    application_form_schema = Column(JSONColumn, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    job_post = relationship("JobPost", back_populates="application_form")
