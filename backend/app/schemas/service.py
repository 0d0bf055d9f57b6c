from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class ServiceStatus(str, Enum):
    ACTIVE = "active"
    COMING_SOON = "coming-soon"
    MAINTENANCE = "maintenance"


class ServiceCreate(BaseModel):
    category_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    image: Optional[str] = None
    href: Optional[str] = None
    status: str = ServiceStatus.ACTIVE.value
    featured: bool = False
    sort_order: int = 0


class ServiceUpdate(BaseModel):
    category_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    image: Optional[str] = None
    href: Optional[str] = None
    status: Optional[str] = None
    featured: Optional[bool] = None
    sort_order: Optional[int] = None


class ServiceRecord(BaseModel):
    id: str
    category_id: str
    title: str
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    href: Optional[str] = None
    image: Optional[str] = None
    status: ServiceStatus = ServiceStatus.ACTIVE
    featured: bool = False
    sort_order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ServiceMatch(ServiceRecord):
    """A search hit annotated with the path label of its category."""

    category_path: str


class ServiceListResponse(BaseModel):
    items: List[ServiceRecord]
    page: int
    limit: int
    total: int


class AdminServiceListResponse(BaseModel):
    services: List[ServiceRecord]
    total: int
    limit: int
    offset: int
