from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class FeedbackType(str, Enum):
    BUG = "bug"
    FEATURE = "feature"
    IMPROVEMENT = "improvement"
    OTHER = "other"


class FeedbackStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class FeedbackPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class FeedbackCreate(BaseModel):
    type: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    contact_info: Optional[str] = None
    page_url: Optional[str] = None
    browser_info: Optional[Dict[str, Any]] = None


class FeedbackUpdate(BaseModel):
    status: Optional[str] = None
    priority: Optional[str] = None
    admin_reply: Optional[str] = None
    tags: Optional[List[str]] = None


class FeedbackRecord(BaseModel):
    id: str
    type: FeedbackType
    title: str
    content: str
    contact_info: Optional[str] = None
    user_agent: Optional[str] = None
    page_url: Optional[str] = None
    browser_info: Optional[Dict[str, Any]] = None
    priority: FeedbackPriority = FeedbackPriority.NORMAL
    status: FeedbackStatus = FeedbackStatus.OPEN
    admin_reply: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    submitted_ip: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FeedbackReceipt(BaseModel):
    success: bool = True
    message: str
    feedback_id: str


class FeedbackStats(BaseModel):
    total: int = 0
    by_status: Dict[str, int] = Field(default_factory=dict)
    by_type: Dict[str, int] = Field(default_factory=dict)
    by_priority: Dict[str, int] = Field(default_factory=dict)


class FeedbackListResponse(BaseModel):
    feedback: List[FeedbackRecord]
    total: int
    limit: int
    offset: int
    stats: Optional[FeedbackStats] = None
