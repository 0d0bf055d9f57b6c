from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from typing import List, Optional
from app.core.database import get_db
from app.core.auth import get_current_admin
from app.core.logging_config import log_audit_event, get_client_ip
from app.api.validation import (
    CategoryTypeParam,
    ParentIdParam,
    parse_parent_filter,
)
from app.schemas.category import (
    CategoryCreate,
    CategoryListResponse,
    CategoryRecord,
    CategoryStatsResponse,
    CategoryTreeResponse,
    CategoryUpdate,
    ReorderRequest,
)
from app.services.breadcrumbs import format_path, resolve_path
from app.services.category_store import CategoryFilter, SqlCategoryStore
from app.services.category_validation import parse_category_type
from app.services.directory_manager import CategoryManager
from app.services.tree_builder import TreeBuilder, TreeMode

router = APIRouter()


@router.get("/public")
def get_public_categories(
    type: Optional[str] = CategoryTypeParam,
    parent_id: Optional[str] = ParentIdParam,
    include_children: bool = False,
    include_services: bool = False,
    tree: bool = False,
    featured: bool = False,
    db: Session = Depends(get_db),
):
    """
    Public category listing.

    - ``tree=true``: roots with sections and services pre-nested
    - otherwise a flat listing filtered by ``type``, ``parent_id`` (an id or
      the literal ``null``) and ``featured``, with one level of children and/or
      services joined on request
    """
    store = SqlCategoryStore(db)

    if tree:
        builder = TreeBuilder(store.list(CategoryFilter(include_services=True)))
        roots = builder.build(
            TreeMode.TREE, root_filter=(lambda c: c.featured) if featured else None
        )
        return CategoryTreeResponse(categories=roots, total=len(roots))

    category_type = parse_category_type(type) if type else None
    roots_only, parent = parse_parent_filter(parent_id)
    if include_children and parent_id is None and category_type is None:
        # Hierarchical listing: start from the top level
        roots_only = True

    selected = store.list(
        CategoryFilter(
            type=category_type,
            parent_id=parent,
            roots_only=roots_only,
            featured=True if featured else None,
            include_services=include_services,
        )
    )
    if include_children:
        builder = TreeBuilder(
            store.list(CategoryFilter(include_services=include_services))
        )
    else:
        builder = TreeBuilder(selected)

    nodes = builder.build(
        TreeMode.FLAT,
        include_children=include_children,
        include_services=include_services,
        selected=selected,
    )
    return CategoryListResponse(categories=nodes, total=len(nodes))


@router.get("/stats", response_model=CategoryStatsResponse)
def get_category_stats(db: Session = Depends(get_db)):
    """Category counts per type, and service counts per owning category type."""
    categories, services = CategoryManager(db).stats()
    return CategoryStatsResponse(
        categories=categories, services_by_category_type=services
    )


@router.get("/", response_model=CategoryListResponse)
def get_categories(
    include_services: bool = False,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin),
):
    """Admin listing of every category, flat, ordered by sort order."""
    collection = CategoryManager(db).list(
        CategoryFilter(include_services=include_services)
    )
    nodes = TreeBuilder(collection).build(
        TreeMode.FLAT,
        include_children=False,
        include_services=include_services,
        selected=collection,
    )
    return CategoryListResponse(categories=nodes, total=len(nodes))


@router.post("/", response_model=CategoryRecord)
def create_category(
    category: CategoryCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin),
):
    """Create a category after structural validation."""
    created = CategoryManager(db).create(category)
    log_audit_event(
        event_type="category.created",
        message=f"Category '{created.name}' created",
        username=admin,
        ip_address=get_client_ip(request),
        event_category="directory",
        category_id=created.id,
        category_type=created.type.value,
    )
    return created


@router.post("/reorder", response_model=List[CategoryRecord])
def reorder_categories(
    payload: ReorderRequest,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin),
):
    """
    Reorder one sibling set.

    Accepts the category ids in the desired order and rewrites their
    sort_order to 0..n-1.
    """
    return CategoryManager(db).reorder(payload.category_ids)


@router.get("/{category_id}/breadcrumb")
def get_category_breadcrumb(category_id: str, db: Session = Depends(get_db)):
    """Root-to-node path for a category."""
    manager = CategoryManager(db)
    target = manager.get(category_id)
    path = resolve_path(target, manager.list())
    return {"breadcrumb": path, "label": format_path(path)}


@router.put("/{category_id}", response_model=CategoryRecord)
def update_category(
    category_id: str,
    category_update: CategoryUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin),
):
    """Apply a partial update; only the fields sent are validated and written."""
    patch = category_update.model_dump(exclude_unset=True)
    updated = CategoryManager(db).update(category_id, patch)
    log_audit_event(
        event_type="category.updated",
        message=f"Category '{updated.name}' updated",
        username=admin,
        ip_address=get_client_ip(request),
        event_category="directory",
        category_id=category_id,
        fields=sorted(patch),
    )
    return updated


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin),
):
    """
    Delete a category.

    Refused while the category still owns services or sections.
    """
    CategoryManager(db).delete(category_id)
    log_audit_event(
        event_type="category.deleted",
        message=f"Category {category_id} deleted",
        username=admin,
        ip_address=get_client_ip(request),
        event_category="directory",
        category_id=category_id,
    )
    return {"message": "Category deleted successfully"}
