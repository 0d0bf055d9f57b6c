"""
Persistence adapter for categories.

The rest of the directory only sees flat ``CategoryRecord`` rows; nesting is
done in memory by the tree builder. Every listing is ordered by
``(sort_order, created_at)``.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Protocol

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, StoreError
from app.models.category import Category
from app.models.service import Service
from app.schemas.category import CategoryRecord, CategoryType
from app.schemas.service import ServiceRecord

logger = logging.getLogger(__name__)

CATEGORY_FIELDS = (
    "id",
    "name",
    "type",
    "parent_id",
    "icon",
    "description",
    "color",
    "featured",
    "sort_order",
    "created_at",
    "updated_at",
)


@dataclass
class CategoryFilter:
    """Query filter for category listings. Unset fields do not filter."""

    type: Optional[CategoryType] = None
    parent_id: Optional[str] = None
    roots_only: bool = False
    featured: Optional[bool] = None
    name: Optional[str] = None
    exclude_id: Optional[str] = None
    include_services: bool = False
    limit: Optional[int] = None


class CategoryStore(Protocol):
    def list(self, filter: Optional[CategoryFilter] = None) -> List[CategoryRecord]: ...

    def get_by_id(self, category_id: str) -> Optional[CategoryRecord]: ...

    def insert(self, record: dict) -> CategoryRecord: ...

    def update(self, category_id: str, patch: dict) -> CategoryRecord: ...

    def delete(self, category_id: str) -> None: ...


def to_category_record(
    category: Category, services: Iterable[Service] = ()
) -> CategoryRecord:
    data = {field: getattr(category, field) for field in CATEGORY_FIELDS}
    data["services"] = [ServiceRecord.model_validate(s) for s in services]
    return CategoryRecord(**data)


class SqlCategoryStore:
    """SQLAlchemy-backed CategoryStore."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Category store failure while trying to {action}: {e}")
            raise StoreError(f"Failed to {action}") from e

    def _ordered(self, query):
        return query.order_by(Category.sort_order.asc(), Category.created_at.asc())

    def list(self, filter: Optional[CategoryFilter] = None) -> List[CategoryRecord]:
        filter = filter or CategoryFilter()
        with self._guard("list categories"):
            query = self.db.query(Category)
            if filter.type is not None:
                query = query.filter(Category.type == CategoryType(filter.type).value)
            if filter.roots_only:
                query = query.filter(Category.parent_id.is_(None))
            elif filter.parent_id is not None:
                query = query.filter(Category.parent_id == filter.parent_id)
            if filter.featured is not None:
                query = query.filter(Category.featured == filter.featured)
            if filter.name is not None:
                query = query.filter(Category.name == filter.name)
            if filter.exclude_id is not None:
                query = query.filter(Category.id != filter.exclude_id)
            query = self._ordered(query)
            if filter.limit is not None:
                query = query.limit(filter.limit)
            categories = query.all()

            services_by_category: Dict[str, List[Service]] = {}
            if filter.include_services and categories:
                services = (
                    self.db.query(Service)
                    .filter(Service.category_id.in_([c.id for c in categories]))
                    .order_by(Service.sort_order.asc(), Service.created_at.asc())
                    .all()
                )
                for service in services:
                    services_by_category.setdefault(service.category_id, []).append(
                        service
                    )

        return [
            to_category_record(c, services_by_category.get(c.id, ()))
            for c in categories
        ]

    def get_by_id(self, category_id: str) -> Optional[CategoryRecord]:
        with self._guard("load category"):
            category = self.db.get(Category, category_id)
        return to_category_record(category) if category else None

    def insert(self, record: dict) -> CategoryRecord:
        with self._guard("create category"):
            category = Category(**record)
            self.db.add(category)
            self.db.commit()
            self.db.refresh(category)
        logger.info(f"Created category {category.id} ({category.type} '{category.name}')")
        return to_category_record(category)

    def update(self, category_id: str, patch: dict) -> CategoryRecord:
        with self._guard("update category"):
            category = self.db.get(Category, category_id)
            if category is None:
                raise NotFoundError(f"Category {category_id} not found")
            for key, value in patch.items():
                setattr(category, key, value)
            self.db.commit()
            self.db.refresh(category)
        return to_category_record(category)

    def delete(self, category_id: str) -> None:
        with self._guard("delete category"):
            category = self.db.get(Category, category_id)
            if category is None:
                raise NotFoundError(f"Category {category_id} not found")
            self.db.delete(category)
            self.db.commit()
        logger.info(f"Deleted category {category_id}")

    def reorder(self, category_ids: List[str]) -> None:
        """Rewrite sort_order of the given ids to their list position."""
        with self._guard("reorder categories"):
            categories = (
                self.db.query(Category).filter(Category.id.in_(category_ids)).all()
            )
            category_map = {c.id: c for c in categories}
            for index, category_id in enumerate(category_ids):
                category_map[category_id].sort_order = index
            self.db.commit()

    def count_by_type(self) -> Dict[str, int]:
        with self._guard("count categories"):
            rows = (
                self.db.query(Category.type, func.count(Category.id))
                .group_by(Category.type)
                .all()
            )
        return {category_type: count for category_type, count in rows}
