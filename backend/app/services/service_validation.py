import logging
from typing import Optional
from urllib.parse import urlparse

from app.core.errors import ErrorReason, NotFoundError, ValidationError
from app.schemas.service import ServiceCreate, ServiceStatus
from app.services.category_store import CategoryStore

logger = logging.getLogger(__name__)


def is_absolute_url(url: str) -> bool:
    """Check that a link is an absolute http(s) URL with a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class ServiceValidator:
    """Checks service writes before they reach the store."""

    def __init__(self, categories: CategoryStore, services):
        self.categories = categories
        self.services = services

    def _check_title(self, title: Optional[str]) -> None:
        if not (title or "").strip():
            raise ValidationError("Service title is required", ErrorReason.MISSING_TITLE)

    def _check_category(self, category_id: Optional[str]) -> None:
        if not category_id or self.categories.get_by_id(category_id) is None:
            raise ValidationError(
                f"Category {category_id} does not exist",
                ErrorReason.CATEGORY_NOT_FOUND,
            )

    def _check_href(self, href: Optional[str]) -> None:
        href = blank_to_none(href)
        if href is not None and not is_absolute_url(href):
            raise ValidationError(f"Invalid URL: {href}", ErrorReason.INVALID_URL)

    def _check_status(self, status: Optional[str]) -> None:
        try:
            ServiceStatus(status)
        except ValueError:
            raise ValidationError(
                f"Invalid service status: {status!r}", ErrorReason.INVALID_STATUS
            )

    def validate_create(self, candidate: ServiceCreate) -> None:
        self._check_title(candidate.title)
        self._check_category(candidate.category_id)
        self._check_href(candidate.href)
        self._check_status(candidate.status)

    def validate_update(self, service_id: str, patch: dict) -> None:
        if self.services.get_by_id(service_id) is None:
            raise NotFoundError(f"Service {service_id} not found")
        if "title" in patch:
            self._check_title(patch["title"])
        if "category_id" in patch:
            self._check_category(patch["category_id"])
        if "href" in patch:
            self._check_href(patch["href"])
        if "status" in patch:
            self._check_status(patch["status"])
