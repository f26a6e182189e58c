"""
Pydantic schemas for applicant intake and the applicant pipeline.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, model_validator
from talentdesk.models.pipeline import PipelineStage, PipelineStatus, MIN_RATING, MAX_RATING


class ApplicationSubmitResponse(BaseModel):
    """Response after a public application was stored."""
    success: bool = True
    message: str = "Application submitted & candidate shortlisted!"
    applicant_id: int
    applicant_uuid: str


class StageUpdateRequest(BaseModel):
    """
    Pipeline update for one applicant. Any combination of fields may be sent,
    but at least one is required. `stageId` is accepted as an alias of `stage`.
    """
    stage: Optional[PipelineStage] = Field(None, alias="stageId")
    status: Optional[PipelineStatus] = None
    note: Optional[str] = None
    rating: Optional[int] = Field(None, ge=MIN_RATING, le=MAX_RATING)

    @model_validator(mode="after")
    def require_one_field(self):
        if not self.model_fields_set & {"stage", "status", "note", "rating"}:
            raise ValueError("No fields to update")
        return self

    class Config:
        populate_by_name = True


class ApplicantSummary(BaseModel):
    """Applicant joined with its posting and pipeline entry (pipeline may be missing)."""
    id: int
    uuid: str
    shortlist_id: Optional[int] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    resume_path: str
    job_id: int
    job_title: Optional[str] = None
    job_post_id: Optional[int] = None
    department: Optional[str] = None
    current_stage: Optional[str] = Field(None, alias="currentStage")
    current_stage_status: Optional[str] = Field(None, alias="currentStageStatus")
    rating: Optional[int] = None
    note: Optional[str] = None
    applied_at: Optional[datetime] = None
    basic_form_data: List[Dict[str, Any]] = Field(default_factory=list, alias="basicFormData")
    application_form_data: Dict[str, Any] = Field(default_factory=dict, alias="applicationFormData")

    class Config:
        populate_by_name = True


class PipelineEntryResponse(BaseModel):
    """Row of the shortlisted / rejected / hired views."""
    id: int
    applicant_id: int
    job_post_id: int
    full_name: str
    email: str
    phone: Optional[str] = None
    job_title: Optional[str] = None
    department: Optional[str] = None
    status: str
    stage: str
    rating: int
    note: Optional[str] = None
    resume_path: Optional[str] = None
    created_at: Optional[datetime] = None


class ApplicantListResponse(BaseModel):
    success: bool = True
    applicants: List[ApplicantSummary]


class PipelineListResponse(BaseModel):
    success: bool = True
    applicants: List[PipelineEntryResponse]


class ApplicantDetailResponse(BaseModel):
    success: bool = True
    applicant: ApplicantSummary


class StageUpdateResponse(BaseModel):
    success: bool = True
    message: str = "Applicant stage updated successfully"
    applicant: ApplicantSummary
