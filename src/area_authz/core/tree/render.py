"""Render area forests as indented plain-text outlines."""

import io
from collections.abc import Callable

from area_authz.models.area import AreaId, AreaNode


def render_forest_as_text(
    forest: list[AreaNode],
    *,
    max_depth: int | None = None,
    is_expanded: Callable[[AreaId], bool] | None = None,
    show_ids: bool = False,
) -> str:
    """Render a forest as a bullet outline.

    Args:
        forest: Root nodes to render.
        max_depth: Max levels below the roots to include (None = unlimited).
        is_expanded: When given, children of collapsed nodes are hidden.
        show_ids: Append ``[id=...]`` to each line.

    Returns:
        One line per rendered node, children indented four spaces.
    """
    out = io.StringIO()
    stack: list[tuple[AreaNode, int]] = [(node, 0) for node in reversed(forest)]
    while stack:
        node, depth = stack.pop()
        indent = "    " * depth
        label = node.name or ""
        if node.code:
            label = f"{label} ({node.code})"
        if show_ids:
            label = f"{label}  [id={node.id}]"
        out.write(f"{indent}- {label}\n")

        if not node.children:
            continue
        collapsed = is_expanded is not None and not is_expanded(node.id)
        truncated = max_depth is not None and depth >= max_depth
        if collapsed or truncated:
            count = len(node.children)
            noun = "child" if count == 1 else "children"
            out.write(f"{indent}    - ... ({count} more {noun})\n")
            continue
        stack.extend((child, depth + 1) for child in reversed(node.children))
    return out.getvalue()
