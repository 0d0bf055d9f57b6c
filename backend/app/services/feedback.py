"""Persistence and triage of visitor feedback."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import ErrorReason, NotFoundError, StoreError, ValidationError
from app.models.feedback import Feedback
from app.schemas.feedback import (
    FeedbackCreate,
    FeedbackPriority,
    FeedbackRecord,
    FeedbackStats,
    FeedbackStatus,
    FeedbackType,
)
from app.services.intake_validation import FeedbackValidator

logger = logging.getLogger(__name__)

# Most pressing first
PRIORITY_RANK = {"urgent": 0, "high": 1, "normal": 2, "low": 3}


@dataclass
class FeedbackFilter:
    status: Optional[str] = None
    type: Optional[str] = None
    priority: Optional[str] = None
    limit: int = 50
    offset: int = 0


def _check_enum(enum_cls, value: Optional[str], reason: ErrorReason) -> Optional[str]:
    if value is None:
        return None
    try:
        return enum_cls(value).value
    except ValueError:
        raise ValidationError(f"Invalid {enum_cls.__name__} filter: {value!r}", reason)


class SqlFeedbackStore:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Feedback store failure while trying to {action}: {e}")
            raise StoreError(f"Failed to {action}") from e

    def search(self, filter: FeedbackFilter) -> Tuple[List[FeedbackRecord], int]:
        with self._guard("list feedback"):
            query = self.db.query(Feedback)
            if filter.status is not None:
                query = query.filter(Feedback.status == filter.status)
            if filter.type is not None:
                query = query.filter(Feedback.type == filter.type)
            if filter.priority is not None:
                query = query.filter(Feedback.priority == filter.priority)
            total = query.count()
            rank = case(PRIORITY_RANK, value=Feedback.priority, else_=len(PRIORITY_RANK))
            rows = (
                query.order_by(rank, Feedback.created_at.desc())
                .offset(filter.offset)
                .limit(filter.limit)
                .all()
            )
        return [FeedbackRecord.model_validate(f) for f in rows], total

    def insert(self, record: dict) -> FeedbackRecord:
        with self._guard("create feedback"):
            feedback = Feedback(**record)
            self.db.add(feedback)
            self.db.commit()
            self.db.refresh(feedback)
        logger.info(f"Stored {feedback.type} feedback {feedback.id} ({feedback.priority})")
        return FeedbackRecord.model_validate(feedback)

    def update(self, feedback_id: str, changes: dict) -> FeedbackRecord:
        with self._guard("update feedback"):
            feedback = self.db.get(Feedback, feedback_id)
            if feedback is None:
                raise NotFoundError(f"Feedback {feedback_id} not found")
            for key, value in changes.items():
                setattr(feedback, key, value)
            self.db.commit()
            self.db.refresh(feedback)
        return FeedbackRecord.model_validate(feedback)

    def counts_by(self, column) -> dict:
        with self._guard("count feedback"):
            rows = self.db.query(column, func.count(Feedback.id)).group_by(column).all()
        return {key: count for key, count in rows}


class FeedbackManager:
    def __init__(self, db: Session):
        self.store = SqlFeedbackStore(db)
        self.validator = FeedbackValidator()

    def submit(
        self,
        candidate: FeedbackCreate,
        submitted_ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> FeedbackRecord:
        values = self.validator.prepare(candidate)
        record = self.store.insert(
            {**values, "submitted_ip": submitted_ip, "user_agent": user_agent}
        )
        if record.priority == FeedbackPriority.HIGH:
            logger.warning(f"High priority feedback received: {record.title!r} ({record.id})")
        return record

    def list(self, filter: Optional[FeedbackFilter] = None) -> Tuple[List[FeedbackRecord], int]:
        """Most pressing first, newest first within a priority."""
        filter = filter or FeedbackFilter()
        status = None if filter.status == "all" else filter.status
        checked = FeedbackFilter(
            status=_check_enum(FeedbackStatus, status, ErrorReason.INVALID_STATUS),
            type=_check_enum(FeedbackType, filter.type, ErrorReason.INVALID_FEEDBACK_TYPE),
            priority=_check_enum(FeedbackPriority, filter.priority, ErrorReason.INVALID_PRIORITY),
            limit=filter.limit,
            offset=filter.offset,
        )
        return self.store.search(checked)

    def update(self, feedback_id: str, patch: dict) -> FeedbackRecord:
        changes = self.validator.prepare_update(patch)
        return self.store.update(feedback_id, changes)

    def stats(self) -> FeedbackStats:
        """Totals per status, type and priority, zero-filled."""
        by_status = self.store.counts_by(Feedback.status)
        by_type = self.store.counts_by(Feedback.type)
        by_priority = self.store.counts_by(Feedback.priority)
        return FeedbackStats(
            total=sum(by_status.values()),
            by_status={s.value: by_status.get(s.value, 0) for s in FeedbackStatus},
            by_type={t.value: by_type.get(t.value, 0) for t in FeedbackType},
            by_priority={p.value: by_priority.get(p.value, 0) for p in FeedbackPriority},
        )
