"""
Navigation state machine for browsing the directory.

The current view is one of three variants:

- ``TopView``: roots (campuses and general categories) are displayed
- ``CampusView(category)``: the campus's sections are displayed
- ``ServicesView(category)``: the services of a section or general category

Every transition is synchronous and re-derives the breadcrumb and the
displayed sets from the in-memory collection. Fetches happen outside the
transitions; ``begin_fetch``/``apply_fetch`` number them so that a response
arriving after a newer one has been applied is dropped.
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, ClassVar, List, Optional, Sequence, Union

from app.schemas.category import BreadcrumbItem, CategoryNode, CategoryRecord, CategoryType
from app.schemas.service import ServiceMatch, ServiceRecord
from app.services.breadcrumbs import resolve_path, to_breadcrumb_item
from app.services.search_filter import SearchFilter, TypeFacet
from app.services.tree_builder import TreeBuilder, TreeMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TopView:
    kind: ClassVar[str] = "top"

    @property
    def category(self) -> None:
        return None


@dataclass(frozen=True)
class CampusView:
    category: CategoryRecord
    kind: ClassVar[str] = "campus"


@dataclass(frozen=True)
class ServicesView:
    category: CategoryRecord
    kind: ClassVar[str] = "services"


View = Union[TopView, CampusView, ServicesView]


@dataclass(frozen=True)
class NavigationState:
    view: View
    breadcrumb: List[BreadcrumbItem] = field(default_factory=list)
    categories: List[CategoryNode] = field(default_factory=list)
    services: List[ServiceRecord] = field(default_factory=list)
    matching_services: List[ServiceMatch] = field(default_factory=list)

    @property
    def current(self) -> Optional[CategoryRecord]:
        return self.view.category


def view_for(category: CategoryRecord) -> View:
    """Campuses open onto their sections; everything else onto services."""
    if category.type == CategoryType.CAMPUS:
        return CampusView(category)
    return ServicesView(category)


FetchCollection = Callable[[], Awaitable[Sequence[CategoryRecord]]]


class NavigationController:
    def __init__(
        self,
        collection: Sequence[CategoryRecord] = (),
        term: Optional[str] = "",
        facet: TypeFacet = TypeFacet.ALL,
    ):
        self._collection: List[CategoryRecord] = list(collection)
        self._search = SearchFilter(term, facet)
        self._issued = 0
        self._applied = 0
        self._reindex()
        self.state = self._derive(TopView())

    def _reindex(self) -> None:
        self._by_id = {c.id: c for c in self._collection}
        self._full = TreeBuilder(self._collection)
        self._filtered = TreeBuilder(self._search.apply(self._collection))

    @property
    def view(self) -> View:
        return self.state.view

    @property
    def collection(self) -> List[CategoryRecord]:
        return list(self._collection)

    def _live(self, category: CategoryRecord) -> Optional[CategoryRecord]:
        return self._by_id.get(category.id)

    def _derive(self, view: View) -> NavigationState:
        if isinstance(view, TopView):
            return NavigationState(
                view=view,
                categories=self._filtered.build(TreeMode.TREE),
                matching_services=self._search.matching_services(self._collection),
            )

        breadcrumb = resolve_path(view.category, self._by_id)

        if isinstance(view, CampusView):
            # Sections come from the search-narrowed tree when the campus is in it
            source = self._filtered if self._filtered.get(view.category.id) else self._full
            sections = source.build(
                TreeMode.FLAT,
                include_children=False,
                include_services=True,
                selected=source.children_of(view.category.id),
            )
            return NavigationState(view=view, breadcrumb=breadcrumb, categories=sections)

        return NavigationState(
            view=view,
            breadcrumb=breadcrumb,
            services=self._full.services_of(view.category.id),
        )

    def _transition(self, view: View) -> NavigationState:
        self.state = self._derive(view)
        logger.debug(f"Navigation -> {view.kind} ({getattr(view.category, 'id', None)})")
        return self.state

    def _displayed_ids(self) -> set:
        return {node.id for node in self.state.categories}

    def click(self, node: CategoryRecord) -> NavigationState:
        """
        Open a displayed category node.

        A node that is not on screen (a section of another campus, or a stale
        reference) is handled as a breadcrumb jump to that node.
        """
        if node.id not in self._displayed_ids():
            logger.debug(f"Click on undisplayed category {node.id} in {self.view.kind} view")
            return self.navigate_breadcrumb(to_breadcrumb_item(node))
        return self._transition(view_for(self._by_id[node.id]))

    def navigate_breadcrumb(self, item: Optional[BreadcrumbItem]) -> NavigationState:
        """Jump to a breadcrumb entry; ``None`` is the home entry."""
        if item is None:
            return self._transition(TopView())
        category = self._by_id.get(item.id)
        if category is None:
            # The entry no longer exists in the live data
            return self._transition(TopView())
        return self._transition(view_for(category))

    def home(self) -> NavigationState:
        return self.navigate_breadcrumb(None)

    def go_to(self, category_id: Optional[str]) -> NavigationState:
        """Navigate directly to a category id, as a breadcrumb jump would."""
        if category_id is None:
            return self.home()
        category = self._by_id.get(category_id)
        item = to_breadcrumb_item(category) if category else None
        return self.navigate_breadcrumb(item)

    def set_search(
        self, term: Optional[str], facet: TypeFacet = TypeFacet.ALL
    ) -> NavigationState:
        self._search = SearchFilter(term, facet)
        self._reindex()
        return self._refresh_view()

    def _refresh_view(self) -> NavigationState:
        current = self.view.category
        if current is None:
            return self._transition(TopView())
        live = self._live(current)
        if live is None:
            return self._transition(TopView())
        return self._transition(view_for(live))

    def begin_fetch(self) -> int:
        """Issue the sequence number for a collection fetch about to start."""
        self._issued += 1
        return self._issued

    def apply_fetch(self, seq: int, collection: Sequence[CategoryRecord]) -> bool:
        """
        Install a fetched collection unless a newer fetch was already applied.

        Returns True when the collection was installed.
        """
        if seq <= self._applied:
            logger.debug(
                f"Discarding stale directory response #{seq} (applied #{self._applied})"
            )
            return False
        self._applied = seq
        self._collection = list(collection)
        self._reindex()
        self._refresh_view()
        return True

    async def refresh(self, fetch: FetchCollection) -> bool:
        seq = self.begin_fetch()
        collection = await fetch()
        return self.apply_fetch(seq, collection)
