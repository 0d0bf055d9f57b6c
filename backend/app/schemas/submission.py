from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SubmissionCreate(BaseModel):
    # Presence and length are checked by the intake validator
    category: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    submitted_by: Optional[str] = Field(default=None, alias="submittedBy")

    class Config:
        populate_by_name = True


class SubmissionStatusUpdate(BaseModel):
    status: Optional[str] = None


class SubmissionRecord(BaseModel):
    id: str
    category: str
    title: str
    description: str
    url: str
    submitted_by: Optional[str] = None
    submitted_ip: Optional[str] = None
    status: SubmissionStatus = SubmissionStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubmissionReceipt(BaseModel):
    success: bool = True
    message: str
    submission_id: str


class SubmissionListResponse(BaseModel):
    submissions: List[SubmissionRecord]
    total: int
    limit: int
    offset: int
