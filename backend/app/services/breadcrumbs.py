import logging
from typing import Dict, List, Mapping, Optional, Sequence, Union

from app.core.config import settings
from app.core.errors import ErrorReason, InconsistencyError
from app.schemas.category import BreadcrumbItem, CategoryRecord

logger = logging.getLogger(__name__)

PATH_SEPARATOR = " > "


def _index(
    collection: Union[Sequence[CategoryRecord], Mapping[str, CategoryRecord]]
) -> Mapping[str, CategoryRecord]:
    if isinstance(collection, Mapping):
        return collection
    return {c.id: c for c in collection}


def to_breadcrumb_item(category: CategoryRecord) -> BreadcrumbItem:
    return BreadcrumbItem(
        id=category.id, name=category.name, type=category.type, icon=category.icon
    )


def resolve_path(
    target: Optional[CategoryRecord],
    collection: Union[Sequence[CategoryRecord], Mapping[str, CategoryRecord]],
    max_depth: Optional[int] = None,
) -> List[BreadcrumbItem]:
    """
    Reconstruct the root-to-target path by walking parent references.

    A parent missing from ``collection`` ends the walk and the partial path is
    returned; a stale or filtered collection is not an error. A walk longer
    than ``max_depth`` means the stored hierarchy is corrupt (for example a
    cycle) and raises InconsistencyError.
    """
    if target is None:
        return []

    limit = max_depth or settings.BREADCRUMB_MAX_DEPTH
    by_id = _index(collection)

    path: List[BreadcrumbItem] = [to_breadcrumb_item(target)]
    current = target
    while current.parent_id is not None:
        parent = by_id.get(current.parent_id)
        if parent is None:
            logger.debug(
                f"Breadcrumb for {target.id} stops at missing parent {current.parent_id}"
            )
            break
        if len(path) >= limit:
            raise InconsistencyError(
                f"Category {target.id} is nested deeper than {limit} levels",
                ErrorReason.PATH_TOO_DEEP,
            )
        path.insert(0, to_breadcrumb_item(parent))
        current = parent

    return path


def format_path(path: Sequence[BreadcrumbItem], separator: str = PATH_SEPARATOR) -> str:
    """Render a breadcrumb as a label, e.g. ``"North Campus > Library"``."""
    return separator.join(item.name for item in path)


def category_path_label(
    category: CategoryRecord, by_id: Dict[str, CategoryRecord]
) -> str:
    return format_path(resolve_path(category, by_id))
