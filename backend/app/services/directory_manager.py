"""
Validated write paths for categories and services.

Validation always runs before the store is touched, and the normalised
values written (trimmed names, blank strings as null, defaults) are decided
here rather than in the endpoints.
"""

import logging
from typing import Dict, List, Tuple

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ErrorReason, NotFoundError, ValidationError
from app.schemas.category import CategoryCreate, CategoryRecord, CategoryType
from app.schemas.service import ServiceCreate, ServiceRecord
from app.services.category_store import CategoryFilter, SqlCategoryStore
from app.services.category_validation import ValidationEngine, clean_parent_id
from app.services.service_store import ServiceFilter, SqlServiceStore
from app.services.service_validation import ServiceValidator, blank_to_none

logger = logging.getLogger(__name__)

# Columns that cannot be null; a null in a patch means "leave unchanged"
NON_NULLABLE_CATEGORY_FIELDS = {"color", "featured", "sort_order"}
NON_NULLABLE_SERVICE_FIELDS = {"tags", "status", "featured", "sort_order"}


def clean_tags(tags) -> List[str]:
    return [t.strip() for t in tags or [] if t and t.strip()]


class CategoryManager:
    def __init__(self, db: Session):
        self.categories = SqlCategoryStore(db)
        self.services = SqlServiceStore(db)
        self.validator = ValidationEngine(self.categories, self.services)

    def list(self, filter: CategoryFilter = None) -> List[CategoryRecord]:
        return self.categories.list(filter)

    def get(self, category_id: str) -> CategoryRecord:
        category = self.categories.get_by_id(category_id)
        if category is None:
            raise NotFoundError(f"Category {category_id} not found")
        return category

    def create(self, candidate: CategoryCreate) -> CategoryRecord:
        self.validator.validate_create(candidate)
        return self.categories.insert(
            {
                "name": candidate.name.strip(),
                "type": CategoryType(candidate.type).value,
                "parent_id": clean_parent_id(candidate.parent_id),
                "icon": blank_to_none(candidate.icon),
                "description": blank_to_none(candidate.description),
                "color": blank_to_none(candidate.color)
                or settings.DEFAULT_CATEGORY_COLOR,
                "featured": candidate.featured,
                "sort_order": candidate.sort_order,
            }
        )

    def update(self, category_id: str, patch: dict) -> CategoryRecord:
        self.validator.validate_update(category_id, patch)

        changes = {}
        for key, value in patch.items():
            if key in NON_NULLABLE_CATEGORY_FIELDS and value is None:
                continue
            if key == "name":
                value = value.strip()
            elif key == "type":
                value = CategoryType(value).value
            elif key == "parent_id":
                value = clean_parent_id(value)
            elif key in ("icon", "description"):
                value = blank_to_none(value)
            changes[key] = value

        return self.categories.update(category_id, changes)

    def delete(self, category_id: str) -> None:
        self.validator.validate_delete(category_id)
        self.categories.delete(category_id)

    def reorder(self, category_ids: List[str]) -> List[CategoryRecord]:
        """Give one sibling set the order of ``category_ids``."""
        if not category_ids or len(set(category_ids)) != len(category_ids):
            raise ValidationError(
                "Reorder needs a non-empty list of distinct ids",
                ErrorReason.INVALID_REORDER,
            )

        records = [self.categories.get_by_id(cid) for cid in category_ids]
        missing = [cid for cid, r in zip(category_ids, records) if r is None]
        if missing:
            raise NotFoundError(f"Categories not found: {', '.join(missing)}")

        parents = {r.parent_id for r in records}
        if len(parents) != 1:
            raise ValidationError(
                "Only categories sharing one parent can be reordered together",
                ErrorReason.INVALID_REORDER,
            )

        self.categories.reorder(category_ids)
        parent_id = parents.pop()
        return self.categories.list(
            CategoryFilter(parent_id=parent_id, roots_only=parent_id is None)
        )

    def stats(self) -> Tuple[Dict[str, int], Dict[str, int]]:
        """Category counts per type, and service counts per owning category type."""
        by_type = self.categories.count_by_type()
        counts = {t.value: by_type.get(t.value, 0) for t in CategoryType}
        counts["total"] = sum(by_type.values())
        return counts, self.services.count_by_category_type()


class ServiceManager:
    def __init__(self, db: Session):
        self.categories = SqlCategoryStore(db)
        self.services = SqlServiceStore(db)
        self.validator = ServiceValidator(self.categories, self.services)

    def search(self, filter: ServiceFilter) -> Tuple[List[ServiceRecord], int]:
        return self.services.search(filter)

    def create(self, candidate: ServiceCreate) -> ServiceRecord:
        self.validator.validate_create(candidate)
        return self.services.insert(
            {
                "category_id": candidate.category_id,
                "title": candidate.title.strip(),
                "description": blank_to_none(candidate.description),
                "tags": clean_tags(candidate.tags),
                "image": blank_to_none(candidate.image),
                "href": blank_to_none(candidate.href),
                "status": candidate.status,
                "featured": candidate.featured,
                "sort_order": candidate.sort_order,
            }
        )

    def update(self, service_id: str, patch: dict) -> ServiceRecord:
        self.validator.validate_update(service_id, patch)

        changes = {}
        for key, value in patch.items():
            if key in NON_NULLABLE_SERVICE_FIELDS and value is None:
                continue
            if key == "title":
                value = value.strip()
            elif key == "tags":
                value = clean_tags(value)
            elif key in ("description", "image", "href"):
                value = blank_to_none(value)
            changes[key] = value

        return self.services.update(service_id, changes)

    def delete(self, service_id: str) -> None:
        self.services.delete(service_id)
