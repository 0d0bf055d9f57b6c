from app.schemas.service import (
    ServiceStatus,
    ServiceCreate,
    ServiceUpdate,
    ServiceRecord,
    ServiceMatch,
)
from app.schemas.category import (
    CategoryType,
    CategoryCreate,
    CategoryUpdate,
    CategoryRecord,
    CategoryNode,
    BreadcrumbItem,
)
from app.schemas.navigation import BrowseResponse
from app.schemas.submission import SubmissionCreate, SubmissionRecord, SubmissionStatus
from app.schemas.feedback import (
    FeedbackCreate,
    FeedbackPriority,
    FeedbackRecord,
    FeedbackStatus,
    FeedbackType,
)

__all__ = [
    "ServiceStatus",
    "ServiceCreate",
    "ServiceUpdate",
    "ServiceRecord",
    "ServiceMatch",
    "CategoryType",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryRecord",
    "CategoryNode",
    "BreadcrumbItem",
    "BrowseResponse",
    "SubmissionCreate",
    "SubmissionRecord",
    "SubmissionStatus",
    "FeedbackCreate",
    "FeedbackPriority",
    "FeedbackRecord",
    "FeedbackStatus",
    "FeedbackType",
]
