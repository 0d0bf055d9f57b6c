"""
Shared query parameter definitions and parsers for the directory endpoints.
"""

from typing import List, Optional, Tuple
from fastapi import Query

# The literal the public API accepts for "roots only"
NULL_PARENT = "null"

SERVICE_SORTS = {"newest", "title"}


def parse_parent_filter(parent_id: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Interpret the ``parent_id`` query parameter.

    Returns:
        (roots_only, parent_id): the literal "null" selects roots only
    """
    if parent_id is None or not parent_id.strip():
        return False, None
    if parent_id.strip() == NULL_PARENT:
        return True, None
    return False, parent_id.strip()


def parse_tags(tags: Optional[str]) -> List[str]:
    """Split a comma-separated tag list, dropping blanks."""
    if not tags:
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


def parse_service_sort(sort: Optional[str]) -> str:
    """Unknown sort keys fall back to newest first."""
    return sort if sort in SERVICE_SORTS else "newest"


# Query parameter dependencies for common validations
CategoryTypeParam = Query(
    None, max_length=20, description="Category type: campus, section or general"
)
ParentIdParam = Query(
    None, max_length=36, description="Parent category id, or 'null' for roots"
)
SearchParam = Query(None, max_length=200, description="Free-text search term")
FacetParam = Query(None, max_length=20, description="Top-level type filter")
TagsParam = Query(None, max_length=500, description="Comma-separated tags (any-of)")
PageParam = Query(1, ge=1, le=10000, description="Page number (1-based)")
PublicLimitParam = Query(20, ge=1, le=100, description="Items per page")
AdminLimitParam = Query(50, ge=1, le=500, description="Maximum items to return")
OffsetParam = Query(0, ge=0, le=100000, description="Number of items to skip")
