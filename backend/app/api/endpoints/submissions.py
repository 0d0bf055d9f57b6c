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
from app.schemas.submission import (
    SubmissionCreate,
    SubmissionListResponse,
    SubmissionReceipt,
    SubmissionRecord,
    SubmissionStatusUpdate,
)
from app.services.submissions import SubmissionManager

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.post("/", response_model=SubmissionReceipt)
@limiter.limit(settings.SUBMISSION_RATE_LIMIT)
def submit_resource(
    request: Request,
    submission: SubmissionCreate,
    db: Session = Depends(get_db),
):
    """Public intake: suggest a resource for the directory."""
    client_ip = get_client_ip(request)
    created = SubmissionManager(db).submit(submission, submitted_ip=client_ip)
    log_audit_event(
        event_type="submission.received",
        message=f"Submission '{created.title}' received",
        ip_address=client_ip,
        request_method="POST",
        request_path="/api/submissions/",
        event_category="intake",
        submission_id=created.id,
    )
    return SubmissionReceipt(
        message="Submission received and awaiting review",
        submission_id=created.id,
    )


@router.get("/", response_model=SubmissionListResponse)
def get_submissions(
    status: Optional[str] = "all",
    limit: int = AdminLimitParam,
    offset: int = OffsetParam,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin),
):
    """Admin review queue, newest first."""
    items, total = SubmissionManager(db).list(status, limit, offset)
    return SubmissionListResponse(
        submissions=items, total=total, limit=limit, offset=offset
    )


@router.put("/{submission_id}", response_model=SubmissionRecord)
def update_submission_status(
    submission_id: str,
    update: SubmissionStatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin),
):
    updated = SubmissionManager(db).set_status(submission_id, update.status)
    log_audit_event(
        event_type="submission.reviewed",
        message=f"Submission '{updated.title}' marked {updated.status.value}",
        username=admin,
        ip_address=get_client_ip(request),
        event_category="intake",
        submission_id=submission_id,
        status=updated.status.value,
    )
    return updated
