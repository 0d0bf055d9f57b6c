"""
Structural validation for category writes.

The engine only reads from the stores; it raises on the first violated rule
and never mutates anything. Rules enforced:

- a campus has no parent
- a section has a parent, and that parent is a campus
- a general category has no parent
- names are unique among categories sharing the same ``parent_id``
  (all roots share one namespace regardless of type)
- a category with services or child categories cannot be deleted
"""

import logging
from typing import Optional

from app.core.errors import (
    ConflictError,
    DirectoryError,
    ErrorReason,
    NotFoundError,
    ValidationError,
)
from app.schemas.category import CategoryCreate, CategoryRecord, CategoryType
from app.services.category_store import CategoryFilter, CategoryStore
from app.services.service_store import ServiceFilter

logger = logging.getLogger(__name__)


def clean_parent_id(parent_id: Optional[str]) -> Optional[str]:
    """Blank parent ids coming from forms mean "no parent"."""
    if parent_id is None or not str(parent_id).strip():
        return None
    return str(parent_id).strip()


def parse_category_type(value) -> CategoryType:
    try:
        return CategoryType(value)
    except ValueError:
        raise ValidationError(
            f"Invalid category type: {value!r} (expected campus, section or general)",
            ErrorReason.INVALID_TYPE,
        )


class ValidationEngine:
    """Gatekeeper for category create/update/delete."""

    def __init__(self, categories: CategoryStore, services):
        self.categories = categories
        self.services = services

    def _reject(self, error: DirectoryError):
        logger.info(f"Rejected category write: {error.reason.value} ({error.message})")
        raise error

    def _require_name(self, name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            self._reject(ValidationError("Category name is required", ErrorReason.MISSING_NAME))
        return name

    def _parse_type(self, value) -> CategoryType:
        try:
            return parse_category_type(value)
        except ValidationError as e:
            self._reject(e)

    def _check_structure(
        self,
        category_type: CategoryType,
        parent_id: Optional[str],
        self_id: Optional[str] = None,
    ) -> None:
        if category_type == CategoryType.CAMPUS and parent_id is not None:
            self._reject(
                ValidationError(
                    "A campus category cannot have a parent",
                    ErrorReason.CAMPUS_WITH_PARENT,
                )
            )
        if category_type == CategoryType.GENERAL and parent_id is not None:
            self._reject(
                ValidationError(
                    "A general category cannot have a parent",
                    ErrorReason.GENERAL_WITH_PARENT,
                )
            )
        if category_type != CategoryType.SECTION:
            return

        if parent_id is None:
            self._reject(
                ValidationError(
                    "A section must belong to a campus",
                    ErrorReason.SECTION_WITHOUT_PARENT,
                )
            )
        if self_id is not None and parent_id == self_id:
            self._reject(
                ValidationError(
                    "A category cannot be its own parent", ErrorReason.SELF_PARENT
                )
            )

        parent = self.categories.get_by_id(parent_id)
        if parent is None:
            self._reject(
                ValidationError(
                    f"Parent category {parent_id} does not exist",
                    ErrorReason.PARENT_NOT_FOUND,
                )
            )
        if parent.type != CategoryType.CAMPUS:
            self._reject(
                ValidationError(
                    f"A section's parent must be a campus, not a {parent.type.value}",
                    ErrorReason.PARENT_NOT_CAMPUS,
                )
            )

    def _check_unique(
        self, name: str, parent_id: Optional[str], exclude_id: Optional[str] = None
    ) -> None:
        # Scoped by parent_id only: a root campus and a root general collide.
        siblings = self.categories.list(
            CategoryFilter(
                name=name,
                parent_id=parent_id,
                roots_only=parent_id is None,
                exclude_id=exclude_id,
                limit=1,
            )
        )
        if siblings:
            self._reject(
                ConflictError(
                    f"A category named '{name}' already exists here",
                    ErrorReason.DUPLICATE_NAME,
                )
            )

    def _has_children(self, category_id: str) -> bool:
        return bool(
            self.categories.list(CategoryFilter(parent_id=category_id, limit=1))
        )

    def _get_existing(self, category_id: str) -> CategoryRecord:
        current = self.categories.get_by_id(category_id)
        if current is None:
            self._reject(NotFoundError(f"Category {category_id} not found"))
        return current

    def validate_create(self, candidate: CategoryCreate) -> None:
        name = self._require_name(candidate.name)
        category_type = self._parse_type(candidate.type)
        parent_id = clean_parent_id(candidate.parent_id)

        self._check_structure(category_type, parent_id)
        self._check_unique(name, parent_id)

    def validate_update(self, category_id: str, patch: dict) -> None:
        """
        Validate a partial update. Only rules touching fields present in
        ``patch`` are re-checked; absent fields keep their stored values.
        """
        current = self._get_existing(category_id)

        name = None
        if "name" in patch:
            name = self._require_name(patch["name"])

        category_type = current.type
        if "type" in patch:
            category_type = self._parse_type(patch["type"])

        parent_id = current.parent_id
        if "parent_id" in patch:
            parent_id = clean_parent_id(patch["parent_id"])

        if "type" in patch or "parent_id" in patch:
            self._check_structure(category_type, parent_id, self_id=category_id)
            if (
                current.type == CategoryType.CAMPUS
                and category_type != CategoryType.CAMPUS
                and self._has_children(category_id)
            ):
                self._reject(
                    ConflictError(
                        "A campus with sections cannot change its type",
                        ErrorReason.HAS_CHILDREN,
                    )
                )

        moved = "parent_id" in patch and parent_id != current.parent_id
        if name is not None or moved:
            self._check_unique(
                name if name is not None else current.name,
                parent_id,
                exclude_id=category_id,
            )

    def validate_delete(self, category_id: str) -> None:
        self._get_existing(category_id)

        if self.services.list(ServiceFilter(category_id=category_id, limit=1)):
            self._reject(
                ConflictError(
                    "This category still has services; delete them first",
                    ErrorReason.HAS_SERVICES,
                )
            )
        if self._has_children(category_id):
            self._reject(
                ConflictError(
                    "This category still has sections; delete them first",
                    ErrorReason.HAS_CHILDREN,
                )
            )
