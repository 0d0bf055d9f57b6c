"""
Free-text and type-facet narrowing of the flat category collection.

Matching is a visibility predicate on root containers: a root survives when
it, one of its sections, or a service anywhere beneath it contains the term.
A surviving root keeps its whole subtree, so the tree built afterwards shows
full child and service lists.
"""

import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from app.core.config import settings
from app.core.errors import ErrorReason, ValidationError
from app.schemas.category import CategoryRecord
from app.schemas.service import ServiceMatch, ServiceRecord
from app.services.breadcrumbs import category_path_label
from app.services.tree_builder import TreeBuilder

logger = logging.getLogger(__name__)


class TypeFacet(str, Enum):
    ALL = "all"
    CAMPUS = "campus"
    GENERAL = "general"


def parse_facet(value: Optional[str]) -> TypeFacet:
    """Turn boundary input into a TypeFacet; unknown values are rejected."""
    if value is None or not value.strip():
        return TypeFacet.ALL
    try:
        return TypeFacet(value.strip().lower())
    except ValueError:
        raise ValidationError(
            f"Invalid type filter: {value!r} (expected all, campus or general)",
            ErrorReason.INVALID_FACET,
        )


def _contains(text: Optional[str], needle: str) -> bool:
    return bool(text) and needle in text.lower()


def service_matches(service: ServiceRecord, needle: str) -> bool:
    return (
        _contains(service.title, needle)
        or _contains(service.description, needle)
        or any(_contains(tag, needle) for tag in service.tags)
    )


def category_matches(category: CategoryRecord, needle: str) -> bool:
    """Match on the category's own text or any of its embedded services."""
    if _contains(category.name, needle) or _contains(category.description, needle):
        return True
    return any(service_matches(s, needle) for s in category.services)


class SearchFilter:
    def __init__(self, term: Optional[str] = "", facet: TypeFacet = TypeFacet.ALL):
        self.term = (term or "").strip()
        self.facet = facet

    @property
    def needle(self) -> str:
        return self.term.lower()

    @property
    def is_active(self) -> bool:
        return bool(self.term) or self.facet != TypeFacet.ALL

    def _root_of(
        self, category: CategoryRecord, by_id: Dict[str, CategoryRecord]
    ) -> Optional[CategoryRecord]:
        current = category
        for _ in range(settings.BREADCRUMB_MAX_DEPTH):
            if current.parent_id is None:
                return current
            parent = by_id.get(current.parent_id)
            if parent is None:
                return None
            current = parent
        return None

    def _root_allowed(self, root: CategoryRecord) -> bool:
        return self.facet == TypeFacet.ALL or root.type.value == self.facet.value

    def apply(self, collection: Sequence[CategoryRecord]) -> List[CategoryRecord]:
        """Return the surviving rows, in input order."""
        if not self.is_active:
            return list(collection)

        by_id = {c.id: c for c in collection}
        needle = self.needle
        visible_roots = set()
        orphans = set()

        for category in collection:
            root = self._root_of(category, by_id)
            if root is None:
                # Orphans are judged on their own type and text
                if not self._root_allowed(category):
                    continue
                if not needle or category_matches(category, needle):
                    orphans.add(category.id)
                continue
            if not self._root_allowed(root):
                continue
            if not needle or category_matches(category, needle):
                visible_roots.add(root.id)

        survivors = []
        for category in collection:
            if category.id in orphans:
                survivors.append(category)
                continue
            root = self._root_of(category, by_id)
            if root is not None and root.id in visible_roots:
                survivors.append(category)

        logger.debug(
            f"Search '{self.term}' (facet={self.facet.value}) kept "
            f"{len(survivors)} of {len(collection)} categories"
        )
        return survivors

    def matching_services(
        self, collection: Sequence[CategoryRecord]
    ) -> List[ServiceMatch]:
        """Every service containing the term, labelled with its category path."""
        if not self.term:
            return []

        needle = self.needle
        builder = TreeBuilder(collection)
        by_id = {c.id: c for c in collection}

        def walk() -> Iterable[CategoryRecord]:
            for root in builder.roots():
                yield root
                yield from builder.children_of(root.id)
            yield from builder.orphans()

        matches = []
        for category in walk():
            label = None
            for service in builder.services_of(category.id):
                if not service_matches(service, needle):
                    continue
                if label is None:
                    label = category_path_label(category, by_id)
                matches.append(
                    ServiceMatch(**service.model_dump(), category_path=label)
                )
        return matches


def apply(
    term: Optional[str], facet: TypeFacet, collection: Sequence[CategoryRecord]
) -> List[CategoryRecord]:
    return SearchFilter(term, facet).apply(collection)
