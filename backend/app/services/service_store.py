"""Persistence adapter for services (the leaf resources of the directory)."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, StoreError
from app.models.category import Category
from app.models.service import Service
from app.schemas.service import ServiceRecord

logger = logging.getLogger(__name__)


def escape_like(term: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass
class ServiceFilter:
    category_id: Optional[str] = None
    status: Optional[str] = None
    search: Optional[str] = None
    tags: List[str] = field(default_factory=list)  # any-of
    order: str = "position"  # position | newest | title
    limit: Optional[int] = None
    offset: int = 0


class SqlServiceStore:
    """SQLAlchemy-backed store for services."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Service store failure while trying to {action}: {e}")
            raise StoreError(f"Failed to {action}") from e

    def _query(self, filter: ServiceFilter):
        query = self.db.query(Service)
        if filter.category_id is not None:
            query = query.filter(Service.category_id == filter.category_id)
        if filter.status is not None:
            query = query.filter(Service.status == filter.status)
        if filter.search:
            pattern = f"%{escape_like(filter.search)}%"
            query = query.filter(
                or_(
                    Service.title.ilike(pattern, escape="\\"),
                    Service.description.ilike(pattern, escape="\\"),
                )
            )
        if filter.order == "newest":
            return query.order_by(Service.created_at.desc())
        if filter.order == "title":
            return query.order_by(Service.title.asc(), Service.created_at.asc())
        return query.order_by(Service.sort_order.asc(), Service.created_at.asc())

    def search(self, filter: Optional[ServiceFilter] = None) -> Tuple[List[ServiceRecord], int]:
        """Return one page of matching services and the total match count."""
        filter = filter or ServiceFilter()
        with self._guard("list services"):
            services = self._query(filter).all()

        if filter.tags:
            # Tags live in a JSON column, so any-of matching happens here
            wanted = set(filter.tags)
            services = [s for s in services if wanted.intersection(s.tags or [])]

        total = len(services)
        end = None if filter.limit is None else filter.offset + filter.limit
        page = services[filter.offset:end]
        return [ServiceRecord.model_validate(s) for s in page], total

    def list(self, filter: Optional[ServiceFilter] = None) -> List[ServiceRecord]:
        items, _ = self.search(filter)
        return items

    def get_by_id(self, service_id: str) -> Optional[ServiceRecord]:
        with self._guard("load service"):
            service = self.db.get(Service, service_id)
        return ServiceRecord.model_validate(service) if service else None

    def insert(self, record: dict) -> ServiceRecord:
        with self._guard("create service"):
            service = Service(**record)
            self.db.add(service)
            self.db.commit()
            self.db.refresh(service)
        logger.info(f"Created service {service.id} in category {service.category_id}")
        return ServiceRecord.model_validate(service)

    def update(self, service_id: str, patch: dict) -> ServiceRecord:
        with self._guard("update service"):
            service = self.db.get(Service, service_id)
            if service is None:
                raise NotFoundError(f"Service {service_id} not found")
            for key, value in patch.items():
                setattr(service, key, value)
            self.db.commit()
            self.db.refresh(service)
        return ServiceRecord.model_validate(service)

    def delete(self, service_id: str) -> None:
        with self._guard("delete service"):
            service = self.db.get(Service, service_id)
            if service is None:
                raise NotFoundError(f"Service {service_id} not found")
            self.db.delete(service)
            self.db.commit()
        logger.info(f"Deleted service {service_id}")

    def count_by_category_type(self) -> Dict[str, int]:
        with self._guard("count services"):
            rows = (
                self.db.query(Category.type, func.count(Service.id))
                .join(Category, Service.category_id == Category.id)
                .group_by(Category.type)
                .all()
            )
        return {category_type: count for category_type, count in rows}
