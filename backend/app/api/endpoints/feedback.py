from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from typing import Optional
import logging
from slowapi import Limiter
from slowapi.util import get_remote_address
from app.core.config import settings
from app.core.database import get_db
from app.core.auth import get_current_admin
from app.core.logging_config import log_audit_event, get_client_ip
from app.api.validation import AdminLimitParam, OffsetParam
from app.schemas.feedback import (
    FeedbackCreate,
    FeedbackListResponse,
    FeedbackReceipt,
    FeedbackRecord,
    FeedbackStats,
    FeedbackUpdate,
)
from app.services.feedback import FeedbackFilter, FeedbackManager

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.post("/", response_model=FeedbackReceipt)
@limiter.limit(settings.FEEDBACK_RATE_LIMIT)
def submit_feedback(
    request: Request,
    feedback: FeedbackCreate,
    db: Session = Depends(get_db),
):
    """Public intake: bug reports, feature ideas and other comments."""
    client_ip = get_client_ip(request)
    created = FeedbackManager(db).submit(
        feedback,
        submitted_ip=client_ip,
        user_agent=request.headers.get("user-agent"),
    )
    log_audit_event(
        event_type="feedback.received",
        message=f"{created.type.value} feedback '{created.title}' received",
        ip_address=client_ip,
        request_method="POST",
        request_path="/api/feedback/",
        event_category="intake",
        feedback_id=created.id,
        priority=created.priority.value,
    )
    return FeedbackReceipt(
        message="Thanks for the feedback, we will look into it",
        feedback_id=created.id,
    )


@router.get("/", response_model=FeedbackListResponse)
def get_feedback(
    status: Optional[str] = "all",
    type: Optional[str] = None,
    priority: Optional[str] = None,
    limit: int = AdminLimitParam,
    offset: int = OffsetParam,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin),
):
    manager = FeedbackManager(db)
    items, total = manager.list(
        FeedbackFilter(
            status=status, type=type, priority=priority, limit=limit, offset=offset
        )
    )
    return FeedbackListResponse(
        feedback=items,
        total=total,
        limit=limit,
        offset=offset,
        stats=manager.stats(),
    )


@router.get("/stats", response_model=FeedbackStats)
def get_feedback_stats(
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin),
):
    return FeedbackManager(db).stats()


@router.put("/{feedback_id}", response_model=FeedbackRecord)
def update_feedback(
    feedback_id: str,
    feedback_update: FeedbackUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin),
):
    patch = feedback_update.model_dump(exclude_unset=True)
    updated = FeedbackManager(db).update(feedback_id, patch)
    log_audit_event(
        event_type="feedback.updated",
        message=f"Feedback '{updated.title}' updated",
        username=admin,
        ip_address=get_client_ip(request),
        event_category="intake",
        feedback_id=feedback_id,
        fields=sorted(patch),
    )
    return updated
