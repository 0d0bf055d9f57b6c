"""
Materialize a flat category row-set into a nested tree.

Two retrieval modes share one recursive join:

- ``TreeMode.TREE``: every root (``parent_id`` absent) with its sections
  and the services of every node attached.
- ``TreeMode.FLAT``: the selected rows themselves, each with one level of
  direct children and/or its own services, as requested.

Sibling lists and service lists are ordered by ``(sort_order, created_at)``
in both modes. Rows whose parent is missing from the input are left out of
the nested result; ``orphans()`` lists them.
"""

from collections import defaultdict
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from app.schemas.category import CategoryNode, CategoryRecord
from app.schemas.service import ServiceRecord

# Roots and their sections. Services hang below the deepest level.
TREE_DEPTH = 2


class TreeMode(str, Enum):
    TREE = "tree"
    FLAT = "flat"


def sort_key(item):
    return (item.sort_order, item.created_at or datetime.min)


class TreeBuilder:
    """Index a flat snapshot by id and by parent id, then join on demand."""

    def __init__(
        self,
        categories: Sequence[CategoryRecord],
        services: Optional[Sequence[ServiceRecord]] = None,
    ):
        self._by_id: Dict[str, CategoryRecord] = {}
        self._children: Dict[Optional[str], List[CategoryRecord]] = defaultdict(list)
        self._services: Dict[str, List[ServiceRecord]] = defaultdict(list)

        for category in categories:
            if category.id in self._by_id:
                continue
            self._by_id[category.id] = category
            self._children[category.parent_id].append(category)

        if services is None:
            services = [s for c in self._by_id.values() for s in c.services]
        seen = set()
        for service in services:
            if service.id in seen:
                continue
            seen.add(service.id)
            self._services[service.category_id].append(service)

        for siblings in self._children.values():
            siblings.sort(key=sort_key)
        for owned in self._services.values():
            owned.sort(key=sort_key)

    def get(self, category_id: str) -> Optional[CategoryRecord]:
        return self._by_id.get(category_id)

    def roots(self) -> List[CategoryRecord]:
        return list(self._children.get(None, []))

    def children_of(self, category_id: str) -> List[CategoryRecord]:
        return list(self._children.get(category_id, []))

    def services_of(self, category_id: str) -> List[ServiceRecord]:
        return list(self._services.get(category_id, []))

    def orphans(self) -> List[CategoryRecord]:
        """Rows pointing at a parent that is not in the snapshot."""
        return sorted(
            (
                c
                for c in self._by_id.values()
                if c.parent_id is not None and c.parent_id not in self._by_id
            ),
            key=sort_key,
        )

    def _node(
        self,
        record: CategoryRecord,
        depth: int,
        include_children: bool,
        include_services: bool,
    ) -> CategoryNode:
        children = []
        if include_children and depth > 1:
            children = [
                self._node(child, depth - 1, include_children, include_services)
                for child in self._children.get(record.id, [])
            ]
        services = self.services_of(record.id) if include_services else []
        return CategoryNode(
            **record.model_dump(exclude={"services"}),
            services=services,
            children=children,
        )

    def build(
        self,
        mode: TreeMode = TreeMode.TREE,
        *,
        include_children: bool = True,
        include_services: bool = True,
        selected: Optional[Sequence[CategoryRecord]] = None,
        root_filter: Optional[Callable[[CategoryRecord], bool]] = None,
    ) -> List[CategoryNode]:
        """
        Join the snapshot into nodes.

        Args:
            mode: TREE nests from the roots; FLAT joins one level onto ``selected``
            include_children: FLAT only, attach direct children
            include_services: FLAT only, attach services
            selected: FLAT only, rows to return (defaults to every row)
            root_filter: TREE only, predicate restricting which roots appear
        """
        if mode == TreeMode.TREE:
            roots = self.roots()
            if root_filter is not None:
                roots = [r for r in roots if root_filter(r)]
            return [self._node(r, TREE_DEPTH, True, True) for r in roots]

        if selected is None:
            selected = list(self._by_id.values())
        rows = sorted(selected, key=sort_key)
        return [
            self._node(r, TREE_DEPTH, include_children, include_services)
            for r in rows
        ]


def build_tree(
    categories: Sequence[CategoryRecord],
    mode: TreeMode = TreeMode.TREE,
    **options,
) -> List[CategoryNode]:
    """Shortcut for ``TreeBuilder(categories).build(mode, **options)``."""
    return TreeBuilder(categories).build(mode, **options)
