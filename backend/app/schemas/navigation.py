from pydantic import BaseModel
from typing import List, Literal, Optional

from app.schemas.category import BreadcrumbItem, CategoryNode
from app.schemas.service import ServiceMatch, ServiceRecord


class BrowseResponse(BaseModel):
    view: Literal["top", "campus", "services"]
    current: Optional[BreadcrumbItem] = None
    breadcrumb: List[BreadcrumbItem]
    categories: List[CategoryNode]
    services: List[ServiceRecord]
    matching_services: List[ServiceMatch]
