"""
Database models package.
"""

from talentdesk.models.admin_user import AdminUser
from talentdesk.models.job_post import JobPost
from talentdesk.models.job_application_form import JobApplicationForm
from talentdesk.models.applicant import Applicant
from talentdesk.models.pipeline import ShortlistedCandidate, PipelineStage, PipelineStatus

__all__ = [
    "AdminUser",
    "JobPost",
    "JobApplicationForm",
    "Applicant",
    "ShortlistedCandidate",
    "PipelineStage",
    "PipelineStatus",
]
