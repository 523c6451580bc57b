"""Tree navigation: lookup, breadcrumbs, descendants and flat-list queries."""

from collections.abc import Iterable

from area_authz.config import DEFAULT_PATH_SEPARATOR
from area_authz.models.area import Area, AreaId, AreaNode


def find_by_id(forest: list[AreaNode], area_id: AreaId | None) -> AreaNode | None:
    """Depth-first search for the first node with ``area_id``."""
    if area_id is None:
        return None
    stack = list(reversed(forest))
    while stack:
        node = stack.pop()
        if node.id == area_id:
            return node
        stack.extend(reversed(node.children))
    return None


def path_to(forest: list[AreaNode], area_id: AreaId | None) -> list[AreaNode]:
    """Nodes from a root down to ``area_id`` inclusive, or ``[]`` if not found.

    The path is recomputed from the forest on each call.
    """
    if area_id is None:
        return []
    stack: list[tuple[AreaNode, tuple[AreaNode, ...]]] = [
        (node, ()) for node in reversed(forest)
    ]
    while stack:
        node, ancestors = stack.pop()
        trail = (*ancestors, node)
        if node.id == area_id:
            return list(trail)
        stack.extend((child, trail) for child in reversed(node.children))
    return []


def descendants_of(forest: list[AreaNode], area_id: AreaId | None) -> list[AreaNode]:
    """Every node strictly below ``area_id``, in pre-order."""
    start = find_by_id(forest, area_id)
    if start is None:
        return []
    result: list[AreaNode] = []
    stack = list(reversed(start.children))
    while stack:
        node = stack.pop()
        result.append(node)
        stack.extend(reversed(node.children))
    return result


def full_name(
    forest: list[AreaNode],
    area_id: AreaId | None,
    separator: str = DEFAULT_PATH_SEPARATOR,
) -> str:
    """Breadcrumb names joined with ``separator``; empty if not found."""
    return separator.join(node.name or "" for node in path_to(forest, area_id))


def level_mismatches(forest: list[AreaNode]) -> list[tuple[AreaNode, AreaNode]]:
    """(parent, child) pairs where the child's level is not the parent's level + 1.

    Levels come from the data source and are not checked when the forest is
    built; this lets callers audit a snapshot.
    """
    result: list[tuple[AreaNode, AreaNode]] = []
    stack = list(reversed(forest))
    while stack:
        node = stack.pop()
        for child in node.children:
            if child.level != node.level + 1:
                result.append((node, child))
        stack.extend(reversed(node.children))
    return result


# --- Flat-list queries ---


def get_area_by_id(areas: Iterable[Area], area_id: AreaId | None) -> Area | None:
    if area_id is None:
        return None
    return next((area for area in areas if area.id == area_id), None)


def areas_by_level(areas: Iterable[Area], level: int) -> list[Area]:
    return [area for area in areas if area.level == level]


def root_areas(areas: Iterable[Area]) -> list[Area]:
    """Areas at level 1 (directorates)."""
    return areas_by_level(areas, 1)


def children_of(areas: Iterable[Area], area_id: AreaId | None) -> list[Area]:
    """Direct children of ``area_id``, in input order."""
    if area_id is None:
        return []
    return [area for area in areas if area.parent_area_id == area_id]


def has_children(areas: Iterable[Area], area_id: AreaId | None) -> bool:
    if area_id is None:
        return False
    return any(area.parent_area_id == area_id for area in areas)
