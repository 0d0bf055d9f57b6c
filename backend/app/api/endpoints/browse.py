from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from app.core.database import get_db
from app.core.errors import NotFoundError
from app.api.validation import FacetParam, SearchParam
from app.schemas.navigation import BrowseResponse
from app.services.breadcrumbs import to_breadcrumb_item
from app.services.category_store import CategoryFilter, SqlCategoryStore
from app.services.navigation import NavigationController
from app.services.search_filter import parse_facet

router = APIRouter()


@router.get("", response_model=BrowseResponse)
def browse(
    category_id: Optional[str] = None,
    q: Optional[str] = SearchParam,
    facet: Optional[str] = FacetParam,
    db: Session = Depends(get_db),
):
    """
    Server-side projection of the directory navigation.

    Without ``category_id`` the top level is shown; otherwise the view a
    visitor reaches by jumping to that category: a campus lists its sections,
    a section or general category lists its services.
    """
    type_facet = parse_facet(facet)
    collection = SqlCategoryStore(db).list(CategoryFilter(include_services=True))
    controller = NavigationController(collection, term=q, facet=type_facet)

    if category_id is not None and not any(c.id == category_id for c in collection):
        raise NotFoundError(f"Category {category_id} not found")

    state = controller.go_to(category_id)
    return BrowseResponse(
        view=state.view.kind,
        current=to_breadcrumb_item(state.current) if state.current else None,
        breadcrumb=state.breadcrumb,
        categories=state.categories,
        services=state.services,
        matching_services=state.matching_services,
    )
