"""Build an ordered area forest from flat parent-pointer records."""

from functools import cmp_to_key
from typing import Any

from loguru import logger

from area_authz.core.search.matching import normalize_text
from area_authz.models.area import Area, AreaId, AreaNode


def _compare_siblings(a: AreaNode, b: AreaNode) -> int:
    """display_order when both siblings carry one, otherwise collated name."""
    if a.display_order is not None and b.display_order is not None:
        return (a.display_order > b.display_order) - (a.display_order < b.display_order)
    key_a = (normalize_text(a.name), a.name or "")
    key_b = (normalize_text(b.name), b.name or "")
    return (key_a > key_b) - (key_a < key_b)


_sibling_key = cmp_to_key(_compare_siblings)


def _sort_forest(nodes: list[AreaNode]) -> None:
    stack = [nodes]
    while stack:
        siblings = stack.pop()
        siblings.sort(key=_sibling_key)
        stack.extend(node.children for node in siblings if node.children)


def _reachable_ids(roots: list[AreaNode]) -> set[AreaId]:
    seen: set[AreaId] = set()
    stack = list(roots)
    while stack:
        node = stack.pop()
        seen.add(node.id)
        stack.extend(node.children)
    return seen


def build_area_tree(areas: Any) -> list[AreaNode]:
    """Build a deterministic forest from a flat list of areas.

    A record whose parent is unknown (or itself) becomes a root. Each node is
    attached to exactly one parent in a single pass, so no node can appear
    twice. Records stuck in a parent cycle are detached and promoted to roots
    in input order so that every input area ends up in the forest.

    Args:
        areas: A list or tuple of Area records. Anything else yields ``[]``.

    Returns:
        Root nodes with every sibling list sorted.
    """
    if not isinstance(areas, (list, tuple)):
        if areas is not None:
            logger.debug("Ignoring non-list area input of type {}", type(areas).__name__)
        return []

    # Index pass
    index: dict[AreaId, AreaNode] = {}
    for area in areas:
        if not isinstance(area, Area):
            logger.debug("Skipping non-Area record {!r}", area)
            continue
        if area.id in index:
            logger.warning("Duplicate area id {!r}; keeping the last record", area.id)
        index[area.id] = AreaNode(area=area)

    # Attach pass
    roots: list[AreaNode] = []
    parent_of: dict[AreaId, AreaNode] = {}
    for node in index.values():
        parent_id = node.parent_area_id
        parent = index.get(parent_id) if parent_id is not None else None
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent.children.append(node)
            parent_of[node.id] = parent

    if len(roots) < len(index):
        reachable = _reachable_ids(roots)
        for node in index.values():
            if node.id in reachable:
                continue
            logger.warning("Area {!r} is part of a parent cycle; promoting it to a root", node.id)
            former = parent_of[node.id]
            former.children = [child for child in former.children if child is not node]
            roots.append(node)
            reachable |= _reachable_ids([node])

    _sort_forest(roots)
    return roots


def flatten_area_tree(forest: list[AreaNode]) -> list[Area]:
    """Pre-order list of the areas held in a forest."""
    result: list[Area] = []
    stack = list(reversed(forest))
    while stack:
        node = stack.pop()
        result.append(node.area)
        stack.extend(reversed(node.children))
    return result
