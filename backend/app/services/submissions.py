"""Persistence and review workflow for visitor resource submissions."""

import logging
from contextlib import contextmanager
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, ErrorReason, NotFoundError, StoreError
from app.models.submission import Submission
from app.schemas.submission import SubmissionCreate, SubmissionRecord
from app.services.intake_validation import SubmissionValidator

logger = logging.getLogger(__name__)


class SqlSubmissionStore:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Submission store failure while trying to {action}: {e}")
            raise StoreError(f"Failed to {action}") from e

    def find_duplicate(self, title: str, url: str) -> Optional[SubmissionRecord]:
        """Any earlier submission with the same title or the same URL."""
        with self._guard("check for duplicate submissions"):
            existing = (
                self.db.query(Submission)
                .filter(or_(Submission.title == title, Submission.url == url))
                .first()
            )
        return SubmissionRecord.model_validate(existing) if existing else None

    def search(
        self, status: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> Tuple[List[SubmissionRecord], int]:
        with self._guard("list submissions"):
            query = self.db.query(Submission)
            if status is not None:
                query = query.filter(Submission.status == status)
            total = query.count()
            rows = (
                query.order_by(Submission.created_at.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
        return [SubmissionRecord.model_validate(s) for s in rows], total

    def insert(self, record: dict) -> SubmissionRecord:
        with self._guard("create submission"):
            submission = Submission(**record)
            self.db.add(submission)
            self.db.commit()
            self.db.refresh(submission)
        logger.info(f"Stored submission {submission.id} for review")
        return SubmissionRecord.model_validate(submission)

    def set_status(self, submission_id: str, status: str) -> SubmissionRecord:
        with self._guard("update submission"):
            submission = self.db.get(Submission, submission_id)
            if submission is None:
                raise NotFoundError(f"Submission {submission_id} not found")
            submission.status = status
            self.db.commit()
            self.db.refresh(submission)
        return SubmissionRecord.model_validate(submission)


class SubmissionManager:
    def __init__(self, db: Session):
        self.store = SqlSubmissionStore(db)
        self.validator = SubmissionValidator()

    def submit(self, candidate: SubmissionCreate, submitted_ip: Optional[str] = None) -> SubmissionRecord:
        values = self.validator.prepare(candidate)
        if self.store.find_duplicate(values["title"], values["url"]) is not None:
            raise ConflictError(
                "This resource has already been submitted",
                ErrorReason.DUPLICATE_SUBMISSION,
            )
        return self.store.insert({**values, "submitted_ip": submitted_ip, "status": "pending"})

    def list(
        self, status: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> Tuple[List[SubmissionRecord], int]:
        """Newest first; ``status`` of None or "all" lists every submission."""
        if status == "all":
            status = None
        elif status is not None:
            status = self.validator.check_status(status).value
        return self.store.search(status, limit, offset)

    def set_status(self, submission_id: str, status: Optional[str]) -> SubmissionRecord:
        checked = self.validator.check_status(status)
        return self.store.set_status(submission_id, checked.value)
