"""
Checks and clean-up for visitor input: resource submissions and feedback.

Both intakes accept free text from anonymous callers, so markup that could
run in the admin pages is stripped before anything is stored, and a small
blocklist turns away obvious spam.
"""

import logging
import re
from typing import Iterable, Optional

from app.core.errors import ErrorReason, ValidationError
from app.schemas.feedback import (
    FeedbackCreate,
    FeedbackPriority,
    FeedbackStatus,
    FeedbackType,
)
from app.schemas.submission import SubmissionCreate, SubmissionStatus
from app.services.directory_manager import clean_tags
from app.services.service_validation import blank_to_none, is_absolute_url

logger = logging.getLogger(__name__)

SUBMISSION_TITLE_MAX = 100
SUBMISSION_DESCRIPTION_MAX = 500
FEEDBACK_TITLE_MAX = 100
FEEDBACK_CONTENT_MAX = 1000
FEEDBACK_TITLE_MIN = 5
FEEDBACK_CONTENT_MIN = 10

SUBMISSION_BLOCKED_WORDS = ("spam", "test123", "example.com")
FEEDBACK_BLOCKED_WORDS = (
    "spam",
    "test123",
    "aaaaaa",
    "测试测试测试",
    "hack",
    "crack",
    "exploit",
    "vulnerability",
    "promotion",
    "discount",
    "sale",
    "buy now",
)


def _element(tag: str) -> re.Pattern:
    return re.compile(
        rf"<{tag}\b[^<]*(?:(?!</{tag}>)<[^<]*)*</{tag}>", re.IGNORECASE
    )


BASIC_PATTERNS = (
    _element("script"),
    _element("iframe"),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"\bon\w+\s*=", re.IGNORECASE),
)

STRICT_PATTERNS = BASIC_PATTERNS + (
    _element("object"),
    _element("embed"),
    re.compile(r"vbscript:", re.IGNORECASE),
    re.compile(r"data:text/html", re.IGNORECASE),
)


def sanitize_content(text: str, strict: bool = False) -> str:
    """Strip script-bearing markup and inline handlers, then trim."""
    for pattern in STRICT_PATTERNS if strict else BASIC_PATTERNS:
        text = pattern.sub("", text)
    return text.strip()


def contains_blocked_words(text: str, blocked: Iterable[str]) -> bool:
    lowered = text.lower()
    return any(word in lowered for word in blocked)


def _require(**fields: Optional[str]) -> None:
    missing = [name for name, value in fields.items() if not (value or "").strip()]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            ErrorReason.MISSING_FIELDS,
        )


def _check_max(name: str, value: str, limit: int) -> None:
    if len(value) > limit:
        raise ValidationError(
            f"{name} is longer than {limit} characters", ErrorReason.FIELD_TOO_LONG
        )


class SubmissionValidator:
    """Turns a raw submission into the values written to the store."""

    def prepare(self, candidate: SubmissionCreate) -> dict:
        _require(
            category=candidate.category,
            title=candidate.title,
            description=candidate.description,
            url=candidate.url,
        )
        url = candidate.url.strip()
        if not is_absolute_url(url):
            raise ValidationError(f"Invalid URL: {url}", ErrorReason.INVALID_URL)

        _check_max("title", candidate.title, SUBMISSION_TITLE_MAX)
        _check_max("description", candidate.description, SUBMISSION_DESCRIPTION_MAX)

        title = sanitize_content(candidate.title)
        description = sanitize_content(candidate.description)
        submitted_by = blank_to_none(
            sanitize_content(candidate.submitted_by) if candidate.submitted_by else None
        )
        # Markup-only input is empty once cleaned
        _require(title=title, description=description)

        if contains_blocked_words(title, SUBMISSION_BLOCKED_WORDS) or contains_blocked_words(
            description, SUBMISSION_BLOCKED_WORDS
        ):
            logger.info(f"Rejected submission with blocked content: {title!r}")
            raise ValidationError(
                "Submission contains blocked content", ErrorReason.BLOCKED_CONTENT
            )

        return {
            "category": candidate.category.strip(),
            "title": title,
            "description": description,
            "url": url,
            "submitted_by": submitted_by,
        }

    def check_status(self, status: Optional[str]) -> SubmissionStatus:
        try:
            return SubmissionStatus(status)
        except ValueError:
            raise ValidationError(
                f"Invalid submission status: {status!r}", ErrorReason.INVALID_STATUS
            )


class FeedbackValidator:
    def prepare(self, candidate: FeedbackCreate) -> dict:
        _require(type=candidate.type, title=candidate.title, content=candidate.content)
        try:
            feedback_type = FeedbackType(candidate.type.strip().lower())
        except ValueError:
            raise ValidationError(
                f"Invalid feedback type: {candidate.type!r}",
                ErrorReason.INVALID_FEEDBACK_TYPE,
            )

        _check_max("title", candidate.title, FEEDBACK_TITLE_MAX)
        _check_max("content", candidate.content, FEEDBACK_CONTENT_MAX)

        title = sanitize_content(candidate.title, strict=True)
        content = sanitize_content(candidate.content, strict=True)
        contact_info = blank_to_none(
            sanitize_content(candidate.contact_info, strict=True)
            if candidate.contact_info
            else None
        )

        if contains_blocked_words(title, FEEDBACK_BLOCKED_WORDS) or contains_blocked_words(
            content, FEEDBACK_BLOCKED_WORDS
        ):
            logger.info(f"Rejected feedback with blocked content: {title!r}")
            raise ValidationError(
                "Feedback contains blocked content", ErrorReason.BLOCKED_CONTENT
            )

        if len(title) < FEEDBACK_TITLE_MIN or len(content) < FEEDBACK_CONTENT_MIN:
            raise ValidationError(
                f"Title needs at least {FEEDBACK_TITLE_MIN} characters and content "
                f"at least {FEEDBACK_CONTENT_MIN}",
                ErrorReason.FIELD_TOO_SHORT,
            )

        priority = (
            FeedbackPriority.HIGH if feedback_type == FeedbackType.BUG else FeedbackPriority.NORMAL
        )
        return {
            "type": feedback_type.value,
            "title": title,
            "content": content,
            "contact_info": contact_info,
            "page_url": blank_to_none(candidate.page_url),
            "browser_info": candidate.browser_info,
            "priority": priority.value,
            "status": FeedbackStatus.OPEN.value,
        }

    def prepare_update(self, patch: dict) -> dict:
        """Validate an admin patch; null fields are left unchanged."""
        changes = {}
        if patch.get("status") is not None:
            try:
                changes["status"] = FeedbackStatus(patch["status"]).value
            except ValueError:
                raise ValidationError(
                    f"Invalid feedback status: {patch['status']!r}",
                    ErrorReason.INVALID_STATUS,
                )
        if patch.get("priority") is not None:
            try:
                changes["priority"] = FeedbackPriority(patch["priority"]).value
            except ValueError:
                raise ValidationError(
                    f"Invalid feedback priority: {patch['priority']!r}",
                    ErrorReason.INVALID_PRIORITY,
                )
        if "admin_reply" in patch:
            reply = patch["admin_reply"]
            changes["admin_reply"] = blank_to_none(
                sanitize_content(reply, strict=True) if reply else None
            )
        if patch.get("tags") is not None:
            changes["tags"] = clean_tags(patch["tags"])

        if not changes:
            raise ValidationError("No valid fields to update", ErrorReason.EMPTY_UPDATE)
        return changes
