from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from typing import Optional
from app.core.database import get_db
from app.core.auth import get_current_admin
from app.core.logging_config import log_audit_event, get_client_ip
from app.api.validation import (
    AdminLimitParam,
    OffsetParam,
    PageParam,
    PublicLimitParam,
    SearchParam,
    TagsParam,
    parse_service_sort,
    parse_tags,
)
from app.schemas.service import (
    AdminServiceListResponse,
    ServiceCreate,
    ServiceListResponse,
    ServiceRecord,
    ServiceStatus,
    ServiceUpdate,
)
from app.services.directory_manager import ServiceManager
from app.services.service_store import ServiceFilter

router = APIRouter()


@router.get("/public", response_model=ServiceListResponse)
def get_public_services(
    search: Optional[str] = SearchParam,
    category: Optional[str] = None,
    tags: Optional[str] = TagsParam,
    sort: Optional[str] = None,
    page: int = PageParam,
    limit: int = PublicLimitParam,
    db: Session = Depends(get_db),
):
    """Paginated listing of active services with search, category and tag filters."""
    items, total = ServiceManager(db).search(
        ServiceFilter(
            category_id=category,
            status=ServiceStatus.ACTIVE.value,
            search=(search or "").strip() or None,
            tags=parse_tags(tags),
            order=parse_service_sort(sort),
            limit=limit,
            offset=(page - 1) * limit,
        )
    )
    return ServiceListResponse(items=items, page=page, limit=limit, total=total)


@router.get("/", response_model=AdminServiceListResponse)
def get_services(
    category_id: Optional[str] = None,
    status: Optional[str] = None,
    limit: int = AdminLimitParam,
    offset: int = OffsetParam,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin),
):
    """Admin listing of services in position order."""
    items, total = ServiceManager(db).search(
        ServiceFilter(
            category_id=category_id, status=status, limit=limit, offset=offset
        )
    )
    return AdminServiceListResponse(
        services=items, total=total, limit=limit, offset=offset
    )


@router.post("/", response_model=ServiceRecord)
def create_service(
    service: ServiceCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin),
):
    created = ServiceManager(db).create(service)
    log_audit_event(
        event_type="service.created",
        message=f"Service '{created.title}' created",
        username=admin,
        ip_address=get_client_ip(request),
        event_category="directory",
        service_id=created.id,
        category_id=created.category_id,
    )
    return created


@router.put("/{service_id}", response_model=ServiceRecord)
def update_service(
    service_id: str,
    service_update: ServiceUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin),
):
    patch = service_update.model_dump(exclude_unset=True)
    updated = ServiceManager(db).update(service_id, patch)
    log_audit_event(
        event_type="service.updated",
        message=f"Service '{updated.title}' updated",
        username=admin,
        ip_address=get_client_ip(request),
        event_category="directory",
        service_id=service_id,
        fields=sorted(patch),
    )
    return updated


@router.delete("/{service_id}")
def delete_service(
    service_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: str = Depends(get_current_admin),
):
    ServiceManager(db).delete(service_id)
    log_audit_event(
        event_type="service.deleted",
        message=f"Service {service_id} deleted",
        username=admin,
        ip_address=get_client_ip(request),
        event_category="directory",
        service_id=service_id,
    )
    return {"message": "Service deleted successfully"}
