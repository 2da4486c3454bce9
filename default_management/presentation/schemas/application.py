"""Default application Pydantic schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from default_management.domain.entities import Severity


def _not_blank(v: str, name: str) -> str:
    if not v.strip():
        raise ValueError(f"{name} cannot be empty or whitespace")
    return v.strip()


class CreateApplicationRequestSchema(BaseModel):
    """Schema for POST /api/v1/applications request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "customer_name": "Acme",
                    "severity": "High",
                    "reason": "Payment overdue more than 90 days",
                    "remarks": "Second notice ignored",
                }
            ]
        }
    )

    customer_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Exact name of the customer",
        examples=["Acme"],
    )
    severity: Severity = Field(..., examples=["High"])
    reason: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Why the customer is considered in default",
    )
    remarks: Optional[str] = Field(None, max_length=1000)

    @field_validator("customer_name")
    @classmethod
    def validate_customer_name(cls, v: str) -> str:
        return _not_blank(v, "customer_name")

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v: str) -> str:
        return _not_blank(v, "reason")


class ApproveRequestSchema(BaseModel):
    """Schema for approving an application or a rebirth."""

    application_id: UUID


class RejectRequestSchema(BaseModel):
    """Schema for POST /api/v1/applications/review/reject request body."""

    application_id: UUID
    reason: str = Field(..., min_length=1, max_length=1000)

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v: str) -> str:
        return _not_blank(v, "reason")


class RebirthRequestSchema(BaseModel):
    """Schema for POST /api/v1/applications/rebirth/apply request body."""

    application_id: UUID
    rebirth_reason: str = Field(..., min_length=1, max_length=1000)

    @field_validator("rebirth_reason")
    @classmethod
    def validate_rebirth_reason(cls, v: str) -> str:
        return _not_blank(v, "rebirth_reason")


class MessageResponseSchema(BaseModel):
    message: str


class ApplicationResponseSchema(BaseModel):
    """Brief application view returned on creation and in the review queue."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_name: str
    status: str
    severity: str
    applicant_name: Optional[str] = None
    application_time: datetime


class ApplicationDetailResponseSchema(BaseModel):
    """Full application view returned by searches."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_name: str
    latest_ext_grade: Optional[str] = None
    status: str
    severity: str
    default_reason: str
    remarks: Optional[str] = None
    applicant_name: Optional[str] = None
    application_time: datetime
    approver_name: Optional[str] = None
    approval_time: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    rebirth_reason: Optional[str] = None
    rebirth_approval_time: Optional[datetime] = None


class PaginatedApplicationsResponseSchema(BaseModel):
    """Schema for GET /api/v1/applications response."""

    model_config = ConfigDict(from_attributes=True)

    total: int = Field(..., ge=0, description="Matches before pagination")
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    data: List[ApplicationDetailResponseSchema]
