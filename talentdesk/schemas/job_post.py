from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime


class JobCreateRequest(BaseModel):
    """
    Schema for creating a job posting with its application form.

    Older admin clients send the multi-step form as `applicationForm`;
    newer ones use `applicationFormSchema`. Both are accepted.
    """
    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    details: Optional[Dict[str, Any]] = None
    description: Optional[Dict[str, Any]] = None
    basic_form_schema: Optional[List[Dict[str, Any]]] = Field(None, alias="basicFormSchema")
    application_form_schema: Optional[Dict[str, Any]] = Field(None, alias="applicationFormSchema")
    application_form: Optional[Dict[str, Any]] = Field(None, alias="applicationForm")

    def resolved_application_form_schema(self) -> Dict[str, Any]:
        return self.application_form_schema or self.application_form or {}

    class Config:
        populate_by_name = True


class JobUpdateRequest(BaseModel):
    """
    Partial update. Only fields present in the request body are written;
    form-schema fields that are absent keep their stored value.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255)
    details: Optional[Dict[str, Any]] = None
    description: Optional[Dict[str, Any]] = None
    basic_form_schema: Optional[List[Dict[str, Any]]] = Field(None, alias="basicFormSchema")
    application_form_schema: Optional[Dict[str, Any]] = Field(None, alias="applicationFormSchema")
    application_form: Optional[Dict[str, Any]] = Field(None, alias="applicationForm")

    def supplied_fields(self) -> Dict[str, Any]:
        """Fields explicitly sent by the client, with the legacy form name folded in."""
        supplied = self.model_dump(exclude_unset=True)
        legacy = supplied.pop("application_form", None)
        if "application_form_schema" not in supplied and legacy is not None:
            supplied["application_form_schema"] = legacy
        return supplied

    class Config:
        populate_by_name = True


class JobResponse(BaseModel):
    """Schema for job response"""
    id: int
    uuid: str
    job_title: str
    slug: str
    details: Dict[str, Any] = Field(default_factory=dict)
    description: Dict[str, Any] = Field(default_factory=dict)
    basic_form_schema: List[Dict[str, Any]] = Field(default_factory=list, alias="basicFormSchema")
    application_form_schema: Dict[str, Any] = Field(default_factory=dict, alias="applicationFormSchema")
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


class JobListResponse(BaseModel):
    success: bool = True
    jobs: List[JobResponse]


class JobMutationResponse(BaseModel):
    success: bool = True
    message: str
    job: JobResponse


class JobDeleteResponse(BaseModel):
    success: bool = True
    message: str = "Job deleted successfully"
    deleted: Dict[str, Any]
