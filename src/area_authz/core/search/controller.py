"""Interactive hierarchical search over a role-scoped area forest."""

from collections.abc import Iterable

from loguru import logger

from area_authz.config import MATERIALIZED_PATH_SEPARATOR
from area_authz.core.roles import RoleLike
from area_authz.core.scope.role_filter import filter_areas_by_ids, filter_areas_by_role
from area_authz.core.search.matching import area_matches, normalize_text
from area_authz.core.tree.builder import build_area_tree
from area_authz.core.tree.navigation import descendants_of, find_by_id, full_name, path_to
from area_authz.models.area import Area, AreaId, AreaNode, SearchStats


class HierarchicalSearchController:
    """Search, expansion and selection state for one browsing session.

    The visible tree holds every area matching the query plus all of their
    ancestors, so results stay navigable in context. All transitions are
    synchronous; callers serialize access to an instance.
    """

    def __init__(
        self,
        areas: list[Area] | None,
        *,
        role: RoleLike = None,
        area_ids: Iterable[AreaId] | None = None,
        initial_selected_id: AreaId | None = None,
        enable_search: bool = True,
    ) -> None:
        self.role = role
        self.area_ids = None if area_ids is None else frozenset(area_ids)
        self.enable_search = enable_search

        self._query = ""
        self._expanded_ids: set[AreaId] = set()
        self._selected_id = initial_selected_id

        self._all_areas: list[Area] = []
        self._working_areas: list[Area] = []
        self._full_tree: list[AreaNode] = []
        self._visible_tree: list[AreaNode] = []
        self.refresh(areas)

    # --- Snapshot ---

    def refresh(self, areas: list[Area] | None) -> None:
        """Rebuild from a fresh snapshot, keeping query, expansion and selection."""
        if not isinstance(areas, (list, tuple)):
            areas = []
        self._all_areas = [area for area in areas if isinstance(area, Area)]
        if len(self._all_areas) != len(areas):
            logger.debug("Skipped {} non-area records", len(areas) - len(self._all_areas))
        if self.role is not None:
            by_role = filter_areas_by_role(self._all_areas, self.role)
        else:
            by_role = self._all_areas
        self._working_areas = filter_areas_by_ids(by_role, self.area_ids)
        self._full_tree = build_area_tree(self._working_areas)
        self._recompute()
        logger.debug(
            "Search snapshot: {} areas, {} in scope, {} roots",
            len(self._all_areas), len(self._working_areas), len(self._full_tree),
        )

    def _recompute(self) -> None:
        term = normalize_text(self._query)
        if not self.enable_search or not term:
            self._visible_tree = self._full_tree
            return

        matches = [area for area in self._working_areas if area_matches(area, term)]
        if not matches:
            self._visible_tree = []
            return

        keep_ids: set[AreaId] = {area.id for area in matches}
        path_ids: set[str] = set()
        for area in matches:
            if area.path:
                path_ids.update(area.path.split(MATERIALIZED_PATH_SEPARATOR))
            else:
                keep_ids.update(node.id for node in path_to(self._full_tree, area.id))

        relevant = [
            area
            for area in self._working_areas
            if area.id in keep_ids or str(area.id) in path_ids
        ]
        self._visible_tree = build_area_tree(relevant)

    # --- Search ---

    def set_query(self, text: str | None) -> None:
        """Narrow the visible tree to matches and their ancestors.

        A non-empty query expands every node so matches are visible without
        drilling down. A query matching nothing yields an empty tree.
        """
        self._query = (text or "").strip()
        if self._query:
            self.expand_all()
        self._recompute()

    def clear_query(self) -> None:
        """Show the full scoped tree again. Expansion is left as is."""
        self._query = ""
        self._recompute()

    # --- Expansion ---

    def toggle_expanded(self, area_id: AreaId) -> None:
        if area_id in self._expanded_ids:
            self._expanded_ids.discard(area_id)
        else:
            self._expanded_ids.add(area_id)

    def is_expanded(self, area_id: AreaId) -> bool:
        return area_id in self._expanded_ids

    def expand_all(self) -> None:
        self._expanded_ids = {area.id for area in self._all_areas}

    def collapse_all(self) -> None:
        self._expanded_ids = set()

    def expand_to(self, area_id: AreaId) -> None:
        """Expand every node on the path to ``area_id``."""
        self._expanded_ids.update(node.id for node in path_to(self._full_tree, area_id))

    # --- Selection ---

    def select(self, area_id: AreaId | None) -> None:
        """Select an area and reveal it by expanding its path."""
        self._selected_id = area_id
        if area_id is not None:
            self.expand_to(area_id)

    def clear_selection(self) -> None:
        self._selected_id = None

    # --- Views ---

    @property
    def query(self) -> str:
        return self._query

    @property
    def expanded_ids(self) -> frozenset[AreaId]:
        return frozenset(self._expanded_ids)

    @property
    def selected_id(self) -> AreaId | None:
        return self._selected_id

    @property
    def all_areas(self) -> list[Area]:
        return list(self._all_areas)

    @property
    def working_areas(self) -> list[Area]:
        return list(self._working_areas)

    @property
    def full_tree(self) -> list[AreaNode]:
        return self._full_tree

    @property
    def visible_tree(self) -> list[AreaNode]:
        return self._visible_tree

    @property
    def selected_area(self) -> AreaNode | None:
        return find_by_id(self._full_tree, self._selected_id)

    @property
    def selected_path(self) -> list[AreaNode]:
        return path_to(self._full_tree, self._selected_id)

    @property
    def selected_full_name(self) -> str:
        return full_name(self._full_tree, self._selected_id)

    @property
    def selected_descendants(self) -> list[AreaNode]:
        return descendants_of(self._full_tree, self._selected_id)

    @property
    def stats(self) -> SearchStats:
        return SearchStats(
            total=len(self._all_areas),
            filtered=len(self._working_areas),
            roots=len(self._full_tree),
            selected=0 if self._selected_id is None else 1,
            expanded=len(self._expanded_ids),
        )
