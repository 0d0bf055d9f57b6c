from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from app.schemas.service import ServiceRecord


class CategoryType(str, Enum):
    CAMPUS = "campus"
    SECTION = "section"
    GENERAL = "general"


ROOT_TYPES = (CategoryType.CAMPUS, CategoryType.GENERAL)


class CategoryCreate(BaseModel):
    # name and type stay loosely typed so the validator can name the exact reason
    name: Optional[str] = None
    type: Optional[str] = None
    parent_id: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    featured: bool = False
    sort_order: int = 0


class CategoryUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    parent_id: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    featured: Optional[bool] = None
    sort_order: Optional[int] = None


class CategoryRecord(BaseModel):
    """A flat category row, optionally carrying its embedded services."""

    id: str
    name: str
    type: CategoryType
    parent_id: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    color: str = "blue"
    featured: bool = False
    sort_order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    services: List[ServiceRecord] = Field(default_factory=list)

    class Config:
        from_attributes = True


class CategoryNode(CategoryRecord):
    children: List["CategoryNode"] = Field(default_factory=list)


CategoryNode.model_rebuild()


class BreadcrumbItem(BaseModel):
    id: str
    name: str
    type: CategoryType
    icon: Optional[str] = None


class CategoryListResponse(BaseModel):
    categories: List[CategoryNode]
    total: int


class CategoryTreeResponse(CategoryListResponse):
    view: Literal["tree"] = "tree"


class CategoryStats(BaseModel):
    total: int
    campus: int = 0
    section: int = 0
    general: int = 0


class CategoryStatsResponse(BaseModel):
    categories: CategoryStats
    services_by_category_type: dict


class ReorderRequest(BaseModel):
    category_ids: List[str]
